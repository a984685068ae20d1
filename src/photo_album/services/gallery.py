"""Gallery fetch orchestration: pagination, caching and rendering."""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from photo_album.adapters.gallery_api_client import GalleryApiClient
from photo_album.domain.gallery import ClientPaginationState, GalleryPhase
from photo_album.domain.photos import Photo, PhotoPage
from photo_album.domain.results import ErrorKind, Failure
from photo_album.services.cache import ALL_PHOTOS_KEY, PhotoCache, page_key
from photo_album.services.rendering import PhotoRenderer, ViewportObserver

INITIAL_ERROR_MESSAGE = "Failed to load photos. Please try again later."
FALLBACK_WARNING = "Showing cached photos. Network error occurred."
LOAD_MORE_ERROR = "Failed to load more photos."

_logger = logging.getLogger(__name__)


class NotificationLevel(Enum):
    """Severity of a user-facing notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notifier(Protocol):
    """Toast-style user notifications."""

    def notify(self, message: str, level: NotificationLevel) -> None:
        """Show a transient message to the user."""


@dataclass
class InfiniteScroll:
    """Watches a sentinel below the grid and triggers loading when reached.

    Observers fire once per registration, so the sentinel is re-armed after
    every successful page while more pages remain.
    """

    observer: ViewportObserver
    on_trigger: Callable[[], None]
    sentinel: object = field(default_factory=object)
    attached: bool = False

    def attach(self) -> None:
        """Arm the sentinel."""
        if self.attached:
            self.observer.unregister(self.sentinel)
        self.attached = True
        self.observer.register(self.sentinel, self._fire)

    def detach(self) -> None:
        """Disarm the sentinel."""
        if self.attached:
            self.observer.unregister(self.sentinel)
            self.attached = False

    def _fire(self) -> None:
        self.attached = False
        self.on_trigger()


@dataclass
class GalleryService:
    """State machine driving initial load, load-more and revalidation.

    ``state.is_loading`` guards against overlapping page fetches. Each reset
    bumps a generation counter and responses from an older generation are
    dropped instead of being merged into the new session.
    """

    api_client: GalleryApiClient
    cache: PhotoCache
    renderer: PhotoRenderer
    notifier: Notifier
    page_size: int = 12
    use_infinite_scroll: bool = True
    scroll_observer: ViewportObserver | None = None
    state: ClientPaginationState = field(init=False)
    phase: GalleryPhase = field(init=False, default=GalleryPhase.IDLE)
    error_message: str | None = field(init=False, default=None)
    scroll: InfiniteScroll | None = field(init=False, default=None)
    _generation: int = field(init=False, default=0)
    _background: set[asyncio.Task] = field(init=False, default_factory=set)

    def __post_init__(self) -> None:
        self.state = ClientPaginationState(limit=self.page_size)
        if self.scroll_observer is not None:
            self.scroll = InfiniteScroll(
                observer=self.scroll_observer,
                on_trigger=lambda: self._spawn(self.load_more()),
            )

    @property
    def view_key(self) -> str:
        """Cache key of the data backing the first screen."""
        return page_key(1) if self.use_infinite_scroll else ALL_PHOTOS_KEY

    async def fetch_initial(self) -> None:
        """Reset the session and load the first screen of photos."""
        self._reset()
        if self.use_infinite_scroll:
            await self._fetch_page(initial=True)
        else:
            await self._fetch_all()

    async def load_more(self) -> None:
        """Load the next page; a no-op unless the gallery is ready for more."""
        if not self.use_infinite_scroll or self.phase is not GalleryPhase.READY:
            return
        if self.state.is_loading or not self.state.has_more:
            return
        await self._fetch_page(initial=False)

    async def revalidate(self, key: str) -> None:
        """Refetch the data behind ``key`` and refresh the view if it changed."""
        generation = self._generation
        if key == ALL_PHOTOS_KEY:
            result = await self.api_client.fetch_photos()
        elif key == page_key(1):
            result = await self.api_client.fetch_page(1, self.state.limit)
        else:
            _logger.warning("Revalidation is not supported for cache key %s", key)
            return

        if isinstance(result, Failure):
            _logger.warning("Background revalidation failed: %s", result.message)
            return

        payload = result.payload
        decoded = _decode_photos(payload) if key == ALL_PHOTOS_KEY else _decode_page(payload)
        if decoded is None:
            _logger.warning("Background revalidation returned a malformed payload")
            return

        cached = self.cache.get(key)
        changed = cached is not None and cached.data != payload
        self.cache.set(key, payload)
        if not changed or generation != self._generation:
            return

        _logger.info("New photos detected, updating view")
        self._reset()
        if isinstance(decoded, PhotoPage):
            self._apply_page(decoded, initial=True)
        else:
            self._apply_all(decoded)
        self.notifier.notify("Photos updated!", NotificationLevel.SUCCESS)

    async def on_visible(self) -> None:
        """Revalidate the current view if its cache entry went stale."""
        cached = self.cache.get(self.view_key)
        if cached is not None and cached.is_stale:
            _logger.info("Page visible, revalidating stale cache")
            await self.revalidate(self.view_key)

    async def on_online(self) -> None:
        """Announce connectivity and revalidate stale data."""
        self.notifier.notify("You are back online!", NotificationLevel.SUCCESS)
        cached = self.cache.get(self.view_key)
        if cached is not None and cached.is_stale:
            await self.revalidate(self.view_key)

    def on_offline(self) -> None:
        """Announce that cached content is being shown."""
        self.notifier.notify(
            "You are offline. Showing cached content.", NotificationLevel.WARNING
        )

    async def clear_cache_and_reload(self) -> None:
        """Drop every cached entry and start a fresh session."""
        self.cache.clear()
        self.notifier.notify("Cache cleared!", NotificationLevel.SUCCESS)
        await self.fetch_initial()

    def cache_status(self) -> dict[str, object]:
        """Report whether the current view is cached and fresh."""
        cached = self.cache.get(self.view_key)
        return {
            "hasCachedData": cached is not None,
            "isStale": cached.is_stale if cached is not None else False,
            "cacheSize": self.cache.size,
        }

    async def wait_for_background(self) -> None:
        """Wait until scheduled background work has finished."""
        while self._background:
            await asyncio.gather(*list(self._background))

    def _reset(self) -> None:
        self._generation += 1
        self.state.reset()
        self.error_message = None
        self.phase = GalleryPhase.IDLE

    def _spawn(self, coro: Coroutine[object, object, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _fetch_page(self, *, initial: bool) -> None:
        if self.state.is_loading:
            return
        generation = self._generation
        page = 1 if initial else self.state.page
        key = page_key(page)
        self.state.is_loading = True
        self.phase = GalleryPhase.LOADING if initial else GalleryPhase.LOADING_MORE
        try:
            outcome = await self._load_page(page, key)
            if generation != self._generation:
                _logger.debug("Discarding page %s from a previous session", page)
                return
            if isinstance(outcome, Failure):
                self._handle_page_failure(key, outcome, initial=initial)
                return
            self._apply_page(outcome, initial=initial)
        finally:
            if generation == self._generation:
                self.state.is_loading = False

    async def _load_page(self, page: int, key: str) -> PhotoPage | Failure:
        cached = self.cache.get(key)
        if cached is not None and not cached.is_stale:
            photo_page = _decode_page(cached.data)
            if photo_page is not None:
                return photo_page

        result = await self.api_client.fetch_page(page, self.state.limit)
        if isinstance(result, Failure):
            return result
        photo_page = _decode_page(result.payload)
        if photo_page is None:
            return Failure(kind=ErrorKind.NETWORK, message="Malformed photo page payload")
        self.cache.set(key, result.payload)
        return photo_page

    def _apply_page(self, photo_page: PhotoPage, *, initial: bool) -> None:
        pagination = photo_page.pagination
        self.state.update_from(pagination)
        added = self.state.merge(photo_page.photos, replace=initial)
        if initial:
            self.renderer.render_initial(self.state.all_photos)
        elif added:
            self.renderer.append_batch(added)
        self._render_counter()

        if self.state.has_more:
            self.state.page = pagination.page + 1
            self.phase = GalleryPhase.READY
            if self.scroll is not None:
                self.scroll.attach()
        else:
            self.phase = GalleryPhase.EXHAUSTED
            if self.scroll is not None:
                self.scroll.detach()

    def _handle_page_failure(self, key: str, failure: Failure, *, initial: bool) -> None:
        _logger.error("Error fetching photos: %s", failure.message)
        if not initial:
            self.phase = GalleryPhase.READY
            self.notifier.notify(LOAD_MORE_ERROR, NotificationLevel.ERROR)
            return

        cached = self.cache.get(key)
        photo_page = _decode_page(cached.data) if cached is not None else None
        if photo_page is None:
            self._fail(INITIAL_ERROR_MESSAGE)
            return
        self._apply_page(photo_page, initial=True)
        self.notifier.notify(FALLBACK_WARNING, NotificationLevel.WARNING)

    async def _fetch_all(self) -> None:
        key = ALL_PHOTOS_KEY
        cached = self.cache.get(key)
        photos = _decode_photos(cached.data) if cached is not None else None
        if cached is not None and photos is not None:
            self._apply_all(photos)
            if cached.is_stale:
                _logger.info("Cache is stale, revalidating in background")
                self._spawn(self.revalidate(key))
            return

        generation = self._generation
        self.state.is_loading = True
        self.phase = GalleryPhase.LOADING
        try:
            result = await self.api_client.fetch_photos()
            if generation != self._generation:
                _logger.debug("Discarding photo list from a previous session")
                return
            if isinstance(result, Failure):
                _logger.error("Error fetching photos: %s", result.message)
                self._fail(INITIAL_ERROR_MESSAGE)
                return
            photos = _decode_photos(result.payload)
            if photos is None:
                _logger.error("Error fetching photos: malformed photo list")
                self._fail(INITIAL_ERROR_MESSAGE)
                return
            self.cache.set(key, result.payload)
            self._apply_all(photos)
        finally:
            if generation == self._generation:
                self.state.is_loading = False

    def _apply_all(self, photos: list[Photo]) -> None:
        self.state.merge(photos, replace=True)
        self.state.page = 1
        self.state.total = len(self.state.all_photos)
        self.state.total_pages = 1 if photos else 0
        self.state.has_more = False
        self.renderer.render_initial(self.state.all_photos)
        self._render_counter()
        self.phase = GalleryPhase.EXHAUSTED

    def _render_counter(self) -> None:
        status = self.state.status()
        self.renderer.render_counter(int(status["loaded"]), int(status["total"]))

    def _fail(self, message: str) -> None:
        self.phase = GalleryPhase.ERROR
        self.error_message = message
        self.renderer.render_error(message)


def _decode_page(payload: object) -> PhotoPage | None:
    if not isinstance(payload, dict):
        return None
    try:
        return PhotoPage.from_dict(payload)
    except (KeyError, TypeError, ValueError):
        return None


def _decode_photos(payload: object) -> list[Photo] | None:
    if not isinstance(payload, list):
        return None
    try:
        return [Photo.from_dict(item) for item in payload]
    except (KeyError, TypeError, ValueError):
        return None
