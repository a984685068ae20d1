"""Tests for the gallery fetch orchestrator."""

import asyncio

from photo_album.domain.gallery import GalleryPhase
from photo_album.domain.results import ApiResult, Success
from photo_album.services.cache import ALL_PHOTOS_KEY, PhotoCache, page_key
from photo_album.services.gallery import (
    FALLBACK_WARNING,
    INITIAL_ERROR_MESSAGE,
    LOAD_MORE_ERROR,
    GalleryService,
    NotificationLevel,
)
from photo_album.services.rendering import (
    GalleryRenderer,
    ImmediateViewportObserver,
    LazyImageLoader,
    RenderSurface,
)
from tests.conftest import (
    FakeClock,
    FakeGalleryApiClient,
    InMemoryStorage,
    ManualViewportObserver,
    RecordingNotifier,
    RecordingRenderer,
    make_photos,
)


def _service(
    api_client: FakeGalleryApiClient | None = None,
    clock: FakeClock | None = None,
    **kwargs: object,
) -> GalleryService:
    return GalleryService(
        api_client=api_client or FakeGalleryApiClient(),
        cache=PhotoCache(storage=InMemoryStorage(), clock=clock or FakeClock()),
        renderer=RecordingRenderer(),
        notifier=RecordingNotifier(),
        **kwargs,
    )


def _ids(service: GalleryService) -> list[int]:
    return [photo.id for photo in service.state.all_photos]


def test_fetch_initial_loads_first_page() -> None:
    api_client = FakeGalleryApiClient()
    service = _service(api_client)

    asyncio.run(service.fetch_initial())

    assert api_client.page_calls == [(1, 12)]
    assert _ids(service) == list(range(1, 13))
    assert service.state.page == 2
    assert service.state.total == 30
    assert service.phase is GalleryPhase.READY
    assert service.renderer.counters[-1] == (12, 30)
    assert service.cache.get(page_key(1)) is not None


def test_load_more_until_exhausted() -> None:
    api_client = FakeGalleryApiClient()
    service = _service(api_client)

    async def scenario() -> None:
        await service.fetch_initial()
        await service.load_more()
        await service.load_more()
        await service.load_more()

    asyncio.run(scenario())

    assert api_client.page_calls == [(1, 12), (2, 12), (3, 12)]
    assert _ids(service) == list(range(1, 31))
    assert service.renderer.batches == [list(range(13, 25)), list(range(25, 31))]
    assert service.phase is GalleryPhase.EXHAUSTED
    assert service.state.has_more is False
    assert service.renderer.counters[-1] == (30, 30)


def test_concurrent_load_more_fetches_once() -> None:
    api_client = FakeGalleryApiClient()
    service = _service(api_client)

    async def scenario() -> None:
        await service.fetch_initial()
        await asyncio.gather(service.load_more(), service.load_more())

    asyncio.run(scenario())

    assert api_client.page_calls == [(1, 12), (2, 12)]
    assert _ids(service) == list(range(1, 25))
    assert service.state.is_loading is False


def test_fresh_cache_serves_without_network() -> None:
    api_client = FakeGalleryApiClient()
    service = _service(api_client)

    async def scenario() -> None:
        await service.fetch_initial()
        await service.fetch_initial()

    asyncio.run(scenario())

    assert api_client.page_calls == [(1, 12)]
    assert _ids(service) == list(range(1, 13))


def test_initial_failure_without_cache_shows_error() -> None:
    service = _service(FakeGalleryApiClient(fail_pages={1}))

    asyncio.run(service.fetch_initial())

    assert service.phase is GalleryPhase.ERROR
    assert service.error_message == INITIAL_ERROR_MESSAGE
    assert service.renderer.errors == [INITIAL_ERROR_MESSAGE]
    assert service.state.is_loading is False


def test_initial_failure_falls_back_to_stale_cache() -> None:
    api_client = FakeGalleryApiClient()
    clock = FakeClock()
    service = _service(api_client, clock)

    async def scenario() -> None:
        await service.fetch_initial()
        clock.advance(301)
        api_client.fail_pages = {1}
        await service.fetch_initial()

    asyncio.run(scenario())

    assert len(api_client.page_calls) == 2
    assert _ids(service) == list(range(1, 13))
    assert service.phase is GalleryPhase.READY
    assert service.state.page == 2
    assert (FALLBACK_WARNING, NotificationLevel.WARNING) in service.notifier.messages


def test_load_more_failure_keeps_photos_and_allows_retry() -> None:
    api_client = FakeGalleryApiClient(fail_pages={2})
    service = _service(api_client)

    async def scenario() -> None:
        await service.fetch_initial()
        await service.load_more()

    asyncio.run(scenario())

    assert _ids(service) == list(range(1, 13))
    assert service.phase is GalleryPhase.READY
    assert service.state.page == 2
    assert service.notifier.messages == [(LOAD_MORE_ERROR, NotificationLevel.ERROR)]

    api_client.fail_pages = set()
    asyncio.run(service.load_more())

    assert _ids(service) == list(range(1, 25))


def test_empty_catalog_is_exhausted() -> None:
    service = _service(FakeGalleryApiClient(photos=[]))

    asyncio.run(service.fetch_initial())

    assert service.phase is GalleryPhase.EXHAUSTED
    assert service.renderer.rendered == []
    assert service.renderer.counters[-1] == (0, 0)


def test_all_photos_mode() -> None:
    api_client = FakeGalleryApiClient()
    service = _service(api_client, use_infinite_scroll=False)

    async def scenario() -> None:
        await service.fetch_initial()
        await service.load_more()

    asyncio.run(scenario())

    assert api_client.all_calls == 1
    assert api_client.page_calls == []
    assert _ids(service) == list(range(1, 31))
    assert service.phase is GalleryPhase.EXHAUSTED
    assert service.cache.get(ALL_PHOTOS_KEY) is not None


def test_all_photos_mode_failure_shows_error() -> None:
    service = _service(FakeGalleryApiClient(fail_all=True), use_infinite_scroll=False)

    asyncio.run(service.fetch_initial())

    assert service.phase is GalleryPhase.ERROR
    assert service.renderer.errors == [INITIAL_ERROR_MESSAGE]


def test_stale_all_photos_are_served_then_revalidated() -> None:
    api_client = FakeGalleryApiClient()
    clock = FakeClock()
    service = _service(api_client, clock, use_infinite_scroll=False)

    async def scenario() -> None:
        await service.fetch_initial()
        clock.advance(301)
        api_client.photos = make_photos(31)
        await service.fetch_initial()
        assert _ids(service) == list(range(1, 31))
        await service.wait_for_background()

    asyncio.run(scenario())

    assert api_client.all_calls == 2
    assert _ids(service) == list(range(1, 32))
    assert service.notifier.messages[-1] == (
        "Photos updated!",
        NotificationLevel.SUCCESS,
    )
    cached = service.cache.get(ALL_PHOTOS_KEY)
    assert cached is not None
    assert cached.is_stale is False


def test_revalidate_without_changes_is_quiet() -> None:
    service = _service()

    async def scenario() -> None:
        await service.fetch_initial()
        await service.revalidate(page_key(1))

    asyncio.run(scenario())

    assert service.notifier.messages == []
    assert service.renderer.initial_calls == 1


def test_revalidate_page_one_with_changes_resets_view() -> None:
    api_client = FakeGalleryApiClient()
    service = _service(api_client)

    async def scenario() -> None:
        await service.fetch_initial()
        await service.load_more()
        api_client.photos = make_photos(40)
        await service.revalidate(page_key(1))

    asyncio.run(scenario())

    assert _ids(service) == list(range(1, 13))
    assert service.state.total == 40
    assert service.state.page == 2
    assert service.notifier.texts() == ["Photos updated!"]


def test_revalidate_failure_keeps_view() -> None:
    api_client = FakeGalleryApiClient()
    service = _service(api_client)

    async def scenario() -> None:
        await service.fetch_initial()
        api_client.fail_pages = {1}
        await service.revalidate(page_key(1))

    asyncio.run(scenario())

    assert _ids(service) == list(range(1, 13))
    assert service.notifier.messages == []


def test_revalidate_unknown_key_is_ignored() -> None:
    api_client = FakeGalleryApiClient()
    service = _service(api_client)

    asyncio.run(service.revalidate(page_key(3)))

    assert api_client.page_calls == []


def test_reload_discards_in_flight_page() -> None:
    api_client = FakeGalleryApiClient()
    service = _service(api_client)

    async def scenario() -> None:
        await service.fetch_initial()
        await asyncio.gather(service.load_more(), service.clear_cache_and_reload())

    asyncio.run(scenario())

    assert api_client.page_calls == [(1, 12), (2, 12), (1, 12)]
    assert service.renderer.batches == []
    assert _ids(service) == list(range(1, 13))
    assert service.state.page == 2
    assert service.state.is_loading is False
    assert "Cache cleared!" in service.notifier.texts()


def test_infinite_scroll_sentinel_drives_loading() -> None:
    observer = ManualViewportObserver()
    api_client = FakeGalleryApiClient()
    service = _service(api_client, scroll_observer=observer)

    async def scenario() -> None:
        await service.fetch_initial()
        assert service.scroll is not None
        assert service.scroll.attached is True
        observer.trigger_all()
        await service.wait_for_background()
        assert service.scroll.attached is True
        observer.trigger_all()
        await service.wait_for_background()

    asyncio.run(scenario())

    assert api_client.page_calls == [(1, 12), (2, 12), (3, 12)]
    assert service.phase is GalleryPhase.EXHAUSTED
    assert service.scroll is not None
    assert service.scroll.attached is False
    assert observer.pending == {}


def test_on_visible_revalidates_only_when_stale() -> None:
    api_client = FakeGalleryApiClient()
    clock = FakeClock()
    service = _service(api_client, clock)

    async def scenario() -> None:
        await service.fetch_initial()
        await service.on_visible()
        assert len(api_client.page_calls) == 1
        clock.advance(301)
        await service.on_visible()

    asyncio.run(scenario())

    assert len(api_client.page_calls) == 2


def test_connectivity_notifications() -> None:
    service = _service()

    async def scenario() -> None:
        service.on_offline()
        await service.on_online()

    asyncio.run(scenario())

    assert service.notifier.messages == [
        ("You are offline. Showing cached content.", NotificationLevel.WARNING),
        ("You are back online!", NotificationLevel.SUCCESS),
    ]


def test_cache_status() -> None:
    clock = FakeClock()
    service = _service(clock=clock)

    assert service.cache_status() == {
        "hasCachedData": False,
        "isStale": False,
        "cacheSize": 0,
    }

    asyncio.run(service.fetch_initial())
    clock.advance(301)

    assert service.cache_status() == {
        "hasCachedData": True,
        "isStale": True,
        "cacheSize": 1,
    }


class _MalformedApiClient(FakeGalleryApiClient):
    async def fetch_page(self, page: int, limit: int) -> ApiResult:
        self.page_calls.append((page, limit))
        return Success(payload={"unexpected": True})


def test_malformed_payload_is_a_failure() -> None:
    service = _service(_MalformedApiClient())

    asyncio.run(service.fetch_initial())

    assert service.phase is GalleryPhase.ERROR
    assert service.cache.get(page_key(1)) is None


def test_load_more_after_failed_initial_load_is_ignored() -> None:
    api_client = FakeGalleryApiClient(fail_pages={1})
    service = _service(api_client)

    async def scenario() -> None:
        await service.fetch_initial()
        api_client.fail_pages = set()
        await service.load_more()

    asyncio.run(scenario())

    assert api_client.page_calls == [(1, 12)]
    assert service.phase is GalleryPhase.ERROR
    assert service.renderer.batches == []

    asyncio.run(service.fetch_initial())

    assert service.phase is GalleryPhase.READY
    assert _ids(service) == list(range(1, 13))


def test_failed_reload_clears_previous_gallery() -> None:
    api_client = FakeGalleryApiClient()
    surface = RenderSurface()
    service = GalleryService(
        api_client=api_client,
        cache=PhotoCache(storage=InMemoryStorage(), clock=FakeClock()),
        renderer=GalleryRenderer(
            surface=surface,
            lazy_loader=LazyImageLoader(ImmediateViewportObserver()),
        ),
        notifier=RecordingNotifier(),
    )

    async def scenario() -> None:
        await service.fetch_initial()
        assert len(surface.cards) == 12
        api_client.fail_pages = {1}
        await service.clear_cache_and_reload()

    asyncio.run(scenario())

    assert service.phase is GalleryPhase.ERROR
    assert service.state.all_photos == []
    assert surface.cards == []
    assert surface.counter is None
    assert surface.message == INITIAL_ERROR_MESSAGE


def test_append_receives_only_unseen_photos() -> None:
    api_client = FakeGalleryApiClient()
    service = _service(api_client)

    async def scenario() -> None:
        await service.fetch_initial()
        api_client.photos = make_photos(6) + make_photos(30)[6:]
        api_client.photos.insert(12, api_client.photos[0])
        await service.load_more()

    asyncio.run(scenario())

    assert service.renderer.batches == [list(range(13, 24))]
    assert _ids(service) == list(range(1, 24))
    assert service.renderer.counters[-1] == (23, 31)
