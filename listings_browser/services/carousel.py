"""Per-card image carousel with fade-out / swap / fade-in transitions."""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, Iterable, Optional, Protocol

from ..core.config import settings

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Schedule callbacks on the running asyncio loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class CarouselState:
    """Rotating index into a fixed list of image URLs.

    A move sets ``transitioning``, swaps the index after ``fade_out`` seconds and
    clears the flag ``fade_in`` seconds later. Moves requested while a transition
    is running are ignored.
    """

    def __init__(
        self,
        image_count: int,
        scheduler: Scheduler,
        *,
        fade_out: float | None = None,
        fade_in: float | None = None,
        swipe_threshold: float | None = None,
    ) -> None:
        self.image_count = max(0, image_count)
        self.current_index = 0
        self.transitioning = False
        self._scheduler = scheduler
        self._fade_out = fade_out if fade_out is not None else settings.carousel_fade_out_seconds
        self._fade_in = fade_in if fade_in is not None else settings.carousel_fade_in_seconds
        self._swipe_threshold = swipe_threshold if swipe_threshold is not None else settings.swipe_threshold_px
        self._pending: Optional[TimerHandle] = None
        self._closed = False

    def next(self) -> bool:
        if self.image_count < 2:
            return False
        return self._transition(lambda: (self.current_index + 1) % self.image_count)

    def prev(self) -> bool:
        if self.image_count < 2:
            return False
        return self._transition(lambda: (self.current_index - 1) % self.image_count)

    def goto(self, index: int) -> bool:
        if self.image_count == 0:
            return False
        target = min(max(index, 0), self.image_count - 1)
        return self._transition(lambda: target)

    def swipe(self, start_x: float, end_x: float) -> bool:
        """Handle a horizontal drag; the mapping is mirrored for right-to-left layout."""

        if self.image_count < 2:
            return False
        diff = start_x - end_x
        if abs(diff) <= self._swipe_threshold:
            return False
        return self.prev() if diff > 0 else self.next()

    def close(self) -> None:
        """Cancel pending timers; the card is going away."""

        self._closed = True
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self.transitioning = False

    def _transition(self, target: Callable[[], int]) -> bool:
        if self._closed or self.transitioning:
            return False

        self.transitioning = True

        def _swap() -> None:
            if self._closed:
                return
            self.current_index = target()
            self._pending = self._scheduler.call_later(self._fade_in, _settle)

        def _settle() -> None:
            self._pending = None
            self.transitioning = False

        self._pending = self._scheduler.call_later(self._fade_out, _swap)
        return True


class CarouselRegistry:
    """Carousels for the cards currently rendered in one browsing session."""

    def __init__(self, scheduler_factory: Callable[[], Scheduler] = AsyncioScheduler) -> None:
        self._scheduler_factory = scheduler_factory
        self._cards: Dict[str, CarouselState] = {}

    def mount(self, listing_id: str, image_count: int) -> CarouselState:
        card = self._cards.get(listing_id)
        if card is None or card.image_count != image_count:
            if card is not None:
                card.close()
            card = CarouselState(image_count, self._scheduler_factory())
            self._cards[listing_id] = card
        return card

    def get(self, listing_id: str) -> Optional[CarouselState]:
        return self._cards.get(listing_id)

    def unmount(self, listing_id: str) -> None:
        card = self._cards.pop(listing_id, None)
        if card is not None:
            card.close()

    def sync(self, visible_ids: Iterable[str]) -> None:
        """Unmount carousels whose cards left the visible window."""

        keep = set(visible_ids)
        for listing_id in [key for key in self._cards if key not in keep]:
            self.unmount(listing_id)

    def close(self) -> None:
        for listing_id in list(self._cards):
            self.unmount(listing_id)
        logger.debug("Closed all carousels")

    def __contains__(self, listing_id: object) -> bool:
        return listing_id in self._cards

    def __len__(self) -> int:
        return len(self._cards)
