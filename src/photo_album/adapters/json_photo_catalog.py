"""JSON file-backed photo catalog."""

import json
from dataclasses import dataclass
from pathlib import Path

from photo_album.domain.errors import CatalogError
from photo_album.domain.photos import Photo
from photo_album.services.catalog import PhotoCatalog

DEFAULT_PHOTOS_FILE = Path(__file__).resolve().parent.parent / "data" / "photos.json"


@dataclass
class JsonPhotoCatalog(PhotoCatalog):
    """Catalog read from a JSON array of ``{id, url}`` records."""

    path: Path = DEFAULT_PHOTOS_FILE

    def load_photos(self) -> list[Photo]:
        """Read and validate every record from the catalog file."""
        try:
            with open(self.path, encoding="utf-8") as handle:
                records = json.load(handle)
        except (OSError, ValueError) as exc:
            raise CatalogError(f"Cannot read photo catalog {self.path}: {exc}") from exc

        if not isinstance(records, list):
            raise CatalogError("Photo catalog must be a JSON array")

        photos: list[Photo] = []
        seen: set[int] = set()
        for index, record in enumerate(records):
            photo = _parse_record(index, record)
            if photo.id in seen:
                raise CatalogError(f"Duplicate photo id {photo.id} at index {index}")
            seen.add(photo.id)
            photos.append(photo)
        return photos


def _parse_record(index: int, record: object) -> Photo:
    if not isinstance(record, dict):
        raise CatalogError(f"Photo record at index {index} is not an object")
    photo_id = record.get("id")
    url = record.get("url")
    if isinstance(photo_id, bool) or not isinstance(photo_id, int) or photo_id < 1:
        raise CatalogError(f"Photo record at index {index} has an invalid id")
    if not isinstance(url, str) or not url:
        raise CatalogError(f"Photo record at index {index} has no url")
    return Photo(id=photo_id, url=url)
