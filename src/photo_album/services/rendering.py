"""Incremental gallery rendering with deferred image loading.

The renderer paints ``PhotoCard`` objects onto a ``RenderSurface`` instead of
a real widget tree. Image sources stay deferred until a ``ViewportObserver``
reports the card as close to view; without such a capability the
``ImmediateViewportObserver`` loads every image straight away.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from photo_album.domain.gallery import CardState, PhotoCard
from photo_album.domain.photos import Photo

EMPTY_MESSAGE = "No photos available"

_logger = logging.getLogger(__name__)


class ViewportObserver(Protocol):
    """Fires a callback once when a registered element becomes relevant."""

    def register(self, element: object, callback: Callable[[], None]) -> None:
        """Watch an element and call ``callback`` once it nears the viewport."""

    def unregister(self, element: object) -> None:
        """Stop watching an element."""

    def disconnect(self) -> None:
        """Stop watching every element."""


class ImmediateViewportObserver(ViewportObserver):
    """Fallback observer that treats every element as already visible."""

    def register(self, element: object, callback: Callable[[], None]) -> None:
        callback()

    def unregister(self, element: object) -> None:
        return None

    def disconnect(self) -> None:
        return None


def _always_available(url: str) -> bool:
    return True


@dataclass
class LazyImageLoader:
    """Defers setting a card's image source until its observer fires."""

    observer: ViewportObserver
    probe: Callable[[str], bool] = _always_available

    def observe(self, card: PhotoCard) -> None:
        """Register a card for deferred loading."""
        self.observer.register(card, lambda: self.load(card))

    def load(self, card: PhotoCard) -> None:
        """Preload the card image and swap in its real source."""
        if card.state is not CardState.PENDING:
            return
        if self.probe(card.data_src):
            card.src = card.data_src
            card.state = CardState.LOADED
        else:
            _logger.warning("Failed to load image %s", card.data_src)
            card.state = CardState.FAILED

    def disconnect(self) -> None:
        """Drop every pending registration."""
        self.observer.disconnect()


@dataclass
class RenderSurface:
    """In-memory stand-in for the gallery grid and its status regions."""

    cards: list[PhotoCard] = field(default_factory=list)
    message: str | None = None
    counter: str | None = None
    announcements: list[str] = field(default_factory=list)

    def card_ids(self) -> list[int]:
        """Return rendered photo ids in display order."""
        return [card.photo_id for card in self.cards]


class PhotoRenderer(Protocol):
    """Rendering contract used by the gallery service."""

    def render_initial(self, photos: Sequence[Photo]) -> None:
        """Replace the rendered gallery with ``photos``."""

    def append_batch(self, photos: Sequence[Photo]) -> int:
        """Append unseen photos and return how many were painted."""

    def render_error(self, message: str) -> None:
        """Show a blocking error message."""

    def render_counter(self, loaded: int, total: int) -> None:
        """Show loading progress."""


@dataclass
class GalleryRenderer(PhotoRenderer):
    """Paints photo cards on a surface, idempotent by photo id."""

    surface: RenderSurface
    lazy_loader: LazyImageLoader

    def render_initial(self, photos: Sequence[Photo]) -> None:
        """Clear prior output and paint one card per photo."""
        self.lazy_loader.disconnect()
        self.surface.cards.clear()
        self.surface.message = None
        if not photos:
            self.surface.message = EMPTY_MESSAGE
            return
        for photo in photos:
            self._paint(photo)

    def append_batch(self, photos: Sequence[Photo]) -> int:
        """Paint photos not already on the surface and announce the count."""
        if not photos:
            return 0
        rendered = set(self.surface.card_ids())
        added = 0
        for photo in photos:
            if photo.id in rendered:
                continue
            rendered.add(photo.id)
            self._paint(photo)
            added += 1
        self.surface.announcements.append(
            f"{added} more photos loaded. {len(self.surface.cards)} photos total."
        )
        return added

    def render_error(self, message: str) -> None:
        """Replace the gallery and its counter with an error message."""
        self.lazy_loader.disconnect()
        self.surface.cards.clear()
        self.surface.counter = None
        self.surface.message = message

    def render_counter(self, loaded: int, total: int) -> None:
        """Show how many photos are loaded out of the catalog total."""
        self.surface.counter = f"Showing {loaded} of {total} photos"

    def _paint(self, photo: Photo) -> None:
        if self.surface.message == EMPTY_MESSAGE:
            self.surface.message = None
        card = PhotoCard(
            photo_id=photo.id, data_src=photo.url, alt=f"Photo {photo.id}"
        )
        self.surface.cards.append(card)
        self.lazy_loader.observe(card)
