"""Client-side gallery state models."""

from dataclasses import dataclass, field
from enum import Enum

from photo_album.domain.photos import PaginationMeta, Photo


class GalleryPhase(Enum):
    """Fetch orchestrator states."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    LOADING_MORE = "loading_more"
    EXHAUSTED = "exhausted"
    ERROR = "error"


class CardState(Enum):
    """Lazy image state of a rendered card."""

    PENDING = "pending"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass
class PhotoCard:
    """A painted photo card; the image source is deferred until triggered."""

    photo_id: int
    data_src: str
    alt: str
    src: str | None = None
    state: CardState = CardState.PENDING


@dataclass
class ClientPaginationState:
    """Pagination progress of one gallery session."""

    limit: int
    page: int = 1
    total: int = 0
    total_pages: int = 0
    has_more: bool = True
    is_loading: bool = False
    all_photos: list[Photo] = field(default_factory=list)

    def reset(self) -> None:
        """Return to the start-of-session state."""
        self.page = 1
        self.total = 0
        self.total_pages = 0
        self.has_more = True
        self.is_loading = False
        self.all_photos = []

    def update_from(self, pagination: PaginationMeta) -> None:
        """Copy server-reported pagination metadata."""
        self.page = pagination.page
        self.total = pagination.total
        self.total_pages = pagination.total_pages
        self.has_more = pagination.has_more

    def merge(self, photos: list[Photo], *, replace: bool) -> list[Photo]:
        """Merge a fetched batch and return the photos that were new."""
        if replace:
            self.all_photos = []
        known = {photo.id for photo in self.all_photos}
        added: list[Photo] = []
        for photo in photos:
            if photo.id in known:
                continue
            known.add(photo.id)
            added.append(photo)
        self.all_photos.extend(added)
        return added

    def status(self) -> dict[str, object]:
        """Return a progress summary."""
        return {
            "page": self.page,
            "total": self.total,
            "totalPages": self.total_pages,
            "hasMore": self.has_more,
            "loaded": len(self.all_photos),
        }
