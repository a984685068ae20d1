"""Read-only photo store."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from photo_album.domain.errors import NotFoundError
from photo_album.domain.photos import PaginationParams, Photo, PhotoPage
from photo_album.services.pagination import paginate


class PhotoCatalog(Protocol):
    """Source of the photo catalog."""

    def load_photos(self) -> list[Photo]:
        """Return every catalog entry in canonical order."""


@dataclass(frozen=True)
class PhotoStore:
    """Immutable, ordered photo catalog loaded once at startup."""

    photos: tuple[Photo, ...]
    _by_id: dict[int, Photo] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_id", {photo.id: photo for photo in self.photos})

    @classmethod
    def load(cls, catalog: PhotoCatalog) -> "PhotoStore":
        """Load the store from a catalog source."""
        return cls(photos=tuple(catalog.load_photos()))

    def list(self) -> Sequence[Photo]:
        """Return the full catalog in canonical order."""
        return self.photos

    def get(self, photo_id: int) -> Photo | None:
        """Return a photo by id, if present."""
        return self._by_id.get(photo_id)

    def require(self, photo_id: int) -> Photo:
        """Return a photo by id or raise ``NotFoundError``."""
        photo = self.get(photo_id)
        if photo is None:
            raise NotFoundError("Photo not found")
        return photo

    def exists(self, photo_id: int) -> bool:
        """Return whether a photo id is in the catalog."""
        return photo_id in self._by_id

    def count(self) -> int:
        """Return the catalog size."""
        return len(self.photos)

    def page(self, params: PaginationParams) -> PhotoPage:
        """Return one page of the catalog."""
        return paginate(params, self.photos)
