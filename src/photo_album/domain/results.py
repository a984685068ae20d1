"""Tagged results returned by the gallery API client."""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """Failure categories seen by the gallery client."""

    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"
    NETWORK = "network"

    @classmethod
    def from_status(cls, status_code: int) -> "ErrorKind":
        """Map an HTTP error status to a failure kind."""
        if status_code == 400:  # noqa: PLR2004
            return cls.INVALID_ARGUMENT
        if status_code == 404:  # noqa: PLR2004
            return cls.NOT_FOUND
        if status_code >= 500:  # noqa: PLR2004
            return cls.INTERNAL
        return cls.NETWORK


@dataclass(frozen=True)
class Success:
    """Successful response carrying the decoded JSON payload."""

    payload: object


@dataclass(frozen=True)
class Failure:
    """Failed request with its category and a readable message."""

    kind: ErrorKind
    message: str
    status_code: int | None = None


ApiResult = Success | Failure
