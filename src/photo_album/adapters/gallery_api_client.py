"""Photo album HTTP API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from photo_album.domain.results import ApiResult, ErrorKind, Failure, Success


class GalleryApiClient(Protocol):
    """Interface for the photo album read API."""

    async def fetch_photos(self) -> ApiResult:
        """Fetch the full, unpaginated photo list."""

    async def fetch_page(self, page: int, limit: int) -> ApiResult:
        """Fetch one page of photos with pagination metadata."""

    async def fetch_photo(self, photo_id: int) -> ApiResult:
        """Fetch a single photo."""


@dataclass
class HttpxGalleryApiClient(GalleryApiClient):
    """HTTPX-backed gallery client returning tagged results."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 10

    @classmethod
    def create(cls, base_url: str, timeout: float = 10) -> "HttpxGalleryApiClient":
        """Create a client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient(), timeout=timeout)

    async def fetch_photos(self) -> ApiResult:
        """Fetch ``GET /photos`` without pagination parameters."""
        return await self._get("/photos")

    async def fetch_page(self, page: int, limit: int) -> ApiResult:
        """Fetch ``GET /photos`` in paginated mode."""
        return await self._get(
            "/photos", params={"page": page, "limit": limit, "paginated": "true"}
        )

    async def fetch_photo(self, photo_id: int) -> ApiResult:
        """Fetch ``GET /photo/{id}``."""
        return await self._get(f"/photo/{photo_id}")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _get(
        self, path: str, params: dict[str, object] | None = None
    ) -> ApiResult:
        url = f"{self.base_url.rstrip('/')}{path}"
        try:
            response = await self.http_client.get(
                url, params=params, timeout=self.timeout
            )
        except httpx.HTTPError as exc:
            return Failure(kind=ErrorKind.NETWORK, message=str(exc) or repr(exc))

        if not response.is_success:
            return Failure(
                kind=ErrorKind.from_status(response.status_code),
                message=_error_message(response),
                status_code=response.status_code,
            )
        try:
            return Success(payload=response.json())
        except ValueError:
            return Failure(
                kind=ErrorKind.NETWORK,
                message="Response body is not valid JSON",
                status_code=response.status_code,
            )


def _error_message(response: httpx.Response) -> str:
    """Extract the server's error message, if the body carries one."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return f"HTTP error! status: {response.status_code}"
