"""Dependency container wiring for the server and the gallery client."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from photo_album.adapters.gallery_api_client import HttpxGalleryApiClient
from photo_album.adapters.json_file_storage import JsonFileStorage
from photo_album.adapters.json_photo_catalog import JsonPhotoCatalog
from photo_album.adapters.logging_notifier import LoggingNotifier
from photo_album.config import Settings
from photo_album.services.cache import PhotoCache
from photo_album.services.catalog import PhotoStore
from photo_album.services.gallery import GalleryService, Notifier
from photo_album.services.rendering import (
    GalleryRenderer,
    ImmediateViewportObserver,
    LazyImageLoader,
    RenderSurface,
    ViewportObserver,
)


@dataclass
class AppContainer:
    """Holds server-wide dependencies."""

    settings: Settings
    photo_store: PhotoStore


@dataclass
class GalleryContainer:
    """Holds the dependencies of one gallery client session."""

    settings: Settings
    api_client: HttpxGalleryApiClient
    cache: PhotoCache
    surface: RenderSurface
    renderer: GalleryRenderer
    gallery_service: GalleryService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default server container, loading the catalog once."""
    resolved_settings = settings or Settings()
    photo_store = PhotoStore.load(JsonPhotoCatalog(resolved_settings.photos_file))
    return AppContainer(settings=resolved_settings, photo_store=photo_store)


def build_gallery_container(
    settings: Settings | None = None,
    *,
    image_observer: ViewportObserver | None = None,
    scroll_observer: ViewportObserver | None = None,
    notifier: Notifier | None = None,
) -> GalleryContainer:
    """Create a gallery client wired against the configured API."""
    resolved_settings = settings or Settings()
    api_client = HttpxGalleryApiClient.create(
        resolved_settings.api_base_url,
        timeout=resolved_settings.request_timeout_seconds,
    )
    cache = PhotoCache(
        storage=JsonFileStorage(resolved_settings.cache_file),
        ttl_seconds=resolved_settings.cache_ttl_seconds,
    )
    surface = RenderSurface()
    renderer = GalleryRenderer(
        surface=surface,
        lazy_loader=LazyImageLoader(image_observer or ImmediateViewportObserver()),
    )
    gallery_service = GalleryService(
        api_client=api_client,
        cache=cache,
        renderer=renderer,
        notifier=notifier or LoggingNotifier(),
        page_size=resolved_settings.page_size,
        use_infinite_scroll=resolved_settings.use_infinite_scroll,
        scroll_observer=scroll_observer,
    )

    async def close_resources() -> None:
        await api_client.close()

    return GalleryContainer(
        settings=resolved_settings,
        api_client=api_client,
        cache=cache,
        surface=surface,
        renderer=renderer,
        gallery_service=gallery_service,
        close_resources=close_resources,
    )
