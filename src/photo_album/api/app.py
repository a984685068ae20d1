"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse

from photo_album.api.errors import register_error_handlers
from photo_album.api.schemas import PaginatedPhotosModel, PaginationModel, PhotoModel
from photo_album.app_logging import configure_logging
from photo_album.containers import AppContainer
from photo_album.domain.errors import InvalidArgumentError
from photo_album.domain.photos import Photo, PhotoPage
from photo_album.services.pagination import normalize_pagination, parse_photo_id

_TRUTHY = {"true", "1", "yes"}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        logger.info(
            "Serving %s photos in %s mode",
            state_container.photo_store.count(),
            state_container.settings.environment,
        )
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    register_error_handlers(app, container.settings)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/photos")
    async def list_photos(
        request: Request,
        page: str | None = None,
        limit: str | None = None,
        paginated: str | None = None,
    ) -> PaginatedPhotosModel | list[PhotoModel]:
        """List photos, paginated when any pagination parameter is given."""
        state_container: AppContainer = request.app.state.container
        store = state_container.photo_store
        if not _wants_pagination(page, limit, paginated):
            return [_photo_model(photo) for photo in store.list()]
        params = normalize_pagination(page, limit)
        return _page_model(store.page(params))

    @app.get("/photo/")
    async def missing_photo_id() -> PhotoModel:
        """Reject a photo lookup without an identifier."""
        raise InvalidArgumentError("Photo ID is required")

    @app.get("/photo/{photo_id}")
    async def get_photo(photo_id: str, request: Request) -> PhotoModel:
        """Return a single photo by id."""
        state_container: AppContainer = request.app.state.container
        photo = state_container.photo_store.require(parse_photo_id(photo_id))
        return _photo_model(photo)

    # Registered last so the API routes above take precedence.
    @app.get("/{full_path:path}", response_class=HTMLResponse, include_in_schema=False)
    async def gallery_page(full_path: str) -> HTMLResponse:
        """Serve the gallery page for every other path."""
        return HTMLResponse(_GALLERY_HTML)

    return app


def _wants_pagination(
    page: str | None, limit: str | None, paginated: str | None
) -> bool:
    if page is not None or limit is not None:
        return True
    return paginated is not None and paginated.strip().lower() in _TRUTHY


def _photo_model(photo: Photo) -> PhotoModel:
    return PhotoModel(id=photo.id, url=photo.url)


def _page_model(photo_page: PhotoPage) -> PaginatedPhotosModel:
    meta = photo_page.pagination
    return PaginatedPhotosModel(
        photos=[_photo_model(photo) for photo in photo_page.photos],
        pagination=PaginationModel(
            page=meta.page,
            limit=meta.limit,
            total=meta.total,
            total_pages=meta.total_pages,
            has_more=meta.has_more,
            has_previous=meta.has_previous,
        ),
    )


_GALLERY_HTML = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Photo Album</title>
  <style>
    body { font-family: system-ui, sans-serif; margin: 2rem; background: #fafafa; }
    #gallery { display: grid; grid-template-columns: repeat(auto-fill, minmax(180px, 1fr)); gap: 1rem; }
    #gallery img { width: 100%; aspect-ratio: 1; object-fit: cover; border-radius: 6px; }
    #counter { color: #555; margin: 1rem 0; }
    #sentinel { height: 1px; }
  </style>
</head>
<body>
  <h1>Photo Album</h1>
  <div id="counter" aria-live="polite"></div>
  <div id="gallery" role="list"></div>
  <div id="sentinel"></div>
  <script>
    const gallery = document.getElementById("gallery");
    const counter = document.getElementById("counter");
    const sentinel = document.getElementById("sentinel");
    const seen = new Set();
    let page = 1;
    let hasMore = true;
    let loading = false;

    async function loadPage() {
      if (loading || !hasMore) return;
      loading = true;
      try {
        const response = await fetch(`/photos?page=${page}&limit=12`);
        if (!response.ok) throw new Error(`HTTP error! status: ${response.status}`);
        const data = await response.json();
        for (const photo of data.photos) {
          if (seen.has(photo.id)) continue;
          seen.add(photo.id);
          const img = document.createElement("img");
          img.loading = "lazy";
          img.src = photo.url;
          img.alt = `Photo ${photo.id}`;
          img.setAttribute("role", "listitem");
          gallery.appendChild(img);
        }
        hasMore = data.pagination.hasMore;
        page = data.pagination.page + 1;
        counter.textContent = `Showing ${seen.size} of ${data.pagination.total} photos`;
        if (!seen.size) counter.textContent = "No photos available";
      } catch (error) {
        counter.textContent = "Failed to load photos. Please try again later.";
      } finally {
        loading = false;
      }
    }

    new IntersectionObserver((entries) => {
      if (entries.some((entry) => entry.isIntersecting)) loadPage();
    }).observe(sentinel);
    loadPage();
  </script>
</body>
</html>
"""
