"""Photo catalog domain models."""

from dataclasses import dataclass

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 12
MAX_LIMIT = 50


@dataclass(frozen=True)
class Photo:
    """A single catalog entry."""

    id: int
    url: str

    def to_dict(self) -> dict[str, object]:
        """Return the wire representation."""
        return {"id": self.id, "url": self.url}

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "Photo":
        """Build a photo from its wire representation."""
        return cls(id=int(payload["id"]), url=str(payload["url"]))


@dataclass(frozen=True)
class PaginationParams:
    """Normalized page request."""

    page: int
    limit: int


@dataclass(frozen=True)
class PaginationMeta:
    """Pagination metadata computed for a single page query."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool
    has_previous: bool

    def to_dict(self) -> dict[str, object]:
        """Return the camelCase wire representation."""
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
            "hasMore": self.has_more,
            "hasPrevious": self.has_previous,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "PaginationMeta":
        """Build metadata from its wire representation."""
        return cls(
            page=int(payload["page"]),
            limit=int(payload["limit"]),
            total=int(payload["total"]),
            total_pages=int(payload["totalPages"]),
            has_more=bool(payload["hasMore"]),
            has_previous=bool(payload["hasPrevious"]),
        )


@dataclass(frozen=True)
class PhotoPage:
    """One page of photos with its metadata."""

    photos: list[Photo]
    pagination: PaginationMeta

    def to_dict(self) -> dict[str, object]:
        """Return the wire representation."""
        return {
            "photos": [photo.to_dict() for photo in self.photos],
            "pagination": self.pagination.to_dict(),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "PhotoPage":
        """Build a page from its wire representation."""
        photos = payload.get("photos") or []
        return cls(
            photos=[Photo.from_dict(item) for item in photos],
            pagination=PaginationMeta.from_dict(payload["pagination"]),
        )
