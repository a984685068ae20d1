"""Shared test fixtures."""

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from photo_album.adapters.gallery_api_client import GalleryApiClient
from photo_album.adapters.json_photo_catalog import DEFAULT_PHOTOS_FILE
from photo_album.config import Settings
from photo_album.containers import AppContainer
from photo_album.domain.photos import PaginationParams, Photo
from photo_album.domain.results import ApiResult, ErrorKind, Failure, Success
from photo_album.services.cache import KeyValueStorage
from photo_album.services.catalog import PhotoStore
from photo_album.services.gallery import NotificationLevel, Notifier
from photo_album.services.pagination import paginate
from photo_album.services.rendering import PhotoRenderer, ViewportObserver


def make_photos(count: int) -> list[Photo]:
    return [Photo(id=index, url=f"/images/{index}.png") for index in range(1, count + 1)]


@dataclass
class InMemoryStorage(KeyValueStorage):
    """Dict-backed key-value storage for tests."""

    items: dict[str, str] = field(default_factory=dict)

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


@dataclass
class FailingStorage(KeyValueStorage):
    """Storage whose every operation fails like a full or missing disk."""

    def get_item(self, key: str) -> str | None:
        raise OSError("storage unavailable")

    def set_item(self, key: str, value: str) -> None:
        raise OSError("quota exceeded")

    def remove_item(self, key: str) -> None:
        raise OSError("storage unavailable")


@dataclass
class FakeClock:
    """Manually advanced clock in seconds."""

    now: float = 1_000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class RecordingNotifier(Notifier):
    """Notifier that records every message."""

    messages: list[tuple[str, NotificationLevel]] = field(default_factory=list)

    def notify(self, message: str, level: NotificationLevel) -> None:
        self.messages.append((message, level))

    def texts(self) -> list[str]:
        return [message for message, _ in self.messages]


@dataclass
class RecordingRenderer(PhotoRenderer):
    """Renderer that records calls instead of painting."""

    rendered: list[int] = field(default_factory=list)
    initial_calls: int = 0
    batches: list[list[int]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    counters: list[tuple[int, int]] = field(default_factory=list)

    def render_initial(self, photos: Sequence[Photo]) -> None:
        self.initial_calls += 1
        self.rendered = [photo.id for photo in photos]

    def append_batch(self, photos: Sequence[Photo]) -> int:
        self.batches.append([photo.id for photo in photos])
        added = [photo.id for photo in photos if photo.id not in self.rendered]
        self.rendered.extend(added)
        return len(added)

    def render_error(self, message: str) -> None:
        self.errors.append(message)
        self.rendered = []

    def render_counter(self, loaded: int, total: int) -> None:
        self.counters.append((loaded, total))


@dataclass
class FakeGalleryApiClient(GalleryApiClient):
    """API client serving an in-memory catalog with scripted failures."""

    photos: list[Photo] = field(default_factory=lambda: make_photos(30))
    fail_pages: set[int] = field(default_factory=set)
    fail_all: bool = False
    page_calls: list[tuple[int, int]] = field(default_factory=list)
    all_calls: int = 0

    async def fetch_photos(self) -> ApiResult:
        self.all_calls += 1
        await asyncio.sleep(0)
        if self.fail_all:
            return Failure(kind=ErrorKind.NETWORK, message="connection refused")
        return Success(payload=[photo.to_dict() for photo in self.photos])

    async def fetch_page(self, page: int, limit: int) -> ApiResult:
        self.page_calls.append((page, limit))
        await asyncio.sleep(0)
        if page in self.fail_pages:
            return Failure(
                kind=ErrorKind.INTERNAL,
                message="Internal Server Error",
                status_code=500,
            )
        photo_page = paginate(PaginationParams(page=page, limit=limit), self.photos)
        return Success(payload=photo_page.to_dict())

    async def fetch_photo(self, photo_id: int) -> ApiResult:
        for photo in self.photos:
            if photo.id == photo_id:
                return Success(payload=photo.to_dict())
        return Failure(
            kind=ErrorKind.NOT_FOUND, message="Photo not found", status_code=404
        )


@dataclass
class ManualViewportObserver(ViewportObserver):
    """Observer whose callbacks fire only when a test triggers them."""

    pending: dict[int, tuple[object, Callable[[], None]]] = field(
        default_factory=dict
    )
    disconnects: int = 0

    def register(self, element: object, callback: Callable[[], None]) -> None:
        self.pending[id(element)] = (element, callback)

    def unregister(self, element: object) -> None:
        self.pending.pop(id(element), None)

    def disconnect(self) -> None:
        self.disconnects += 1
        self.pending.clear()

    def trigger_all(self) -> None:
        for key, (_, callback) in list(self.pending.items()):
            self.pending.pop(key, None)
            callback()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        environment="test",
        photos_file=DEFAULT_PHOTOS_FILE,
        api_base_url="http://testserver",
        cache_file=tmp_path / "cache.json",
    )


@pytest.fixture
def photo_store() -> PhotoStore:
    return PhotoStore(photos=tuple(make_photos(18)))


@pytest.fixture
def container(settings: Settings, photo_store: PhotoStore) -> AppContainer:
    return AppContainer(settings=settings, photo_store=photo_store)
