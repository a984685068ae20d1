"""Domain errors surfaced by the HTTP layer."""

from http import HTTPStatus


class PhotoAlbumError(Exception):
    """Expected failure carrying the HTTP status it maps to."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidArgumentError(PhotoAlbumError):
    """Raised when a caller supplies a malformed argument."""

    status_code = HTTPStatus.BAD_REQUEST


class NotFoundError(PhotoAlbumError):
    """Raised when a well-formed identifier does not exist."""

    status_code = HTTPStatus.NOT_FOUND


class CatalogError(Exception):
    """Raised when the photo catalog source cannot be loaded."""
