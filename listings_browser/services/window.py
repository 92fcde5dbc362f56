"""Visible-window controller for infinite scrolling over ranked listings.

The controller owns the visitor's FilterState and the number of rendered
listings (``visible_count``). Both survive a trip to a detail page through the
session-scoped store: filters as JSON, the count and the pre-navigation scroll
offset as stringified integers. Stored values that fail to parse are ignored
and the defaults are used instead; nothing here raises to the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Sequence, TypeVar

from pydantic import ValidationError

from ..core.config import settings
from ..schemas.listings import FilterState
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

FILTERS_KEY = "propertyFilters"
VISIBLE_COUNT_KEY = "visibleCount"
SCROLL_POSITION_KEY = "scrollPosition"

T = TypeVar("T")


@dataclass(slots=True)
class ScrollResult:
    grew: bool
    visible_count: int
    show_filter_button: bool
    show_scroll_top: bool


class ViewWindowController:
    """Track filters and how much of the ranked result list is rendered."""

    def __init__(
        self,
        storage: KeyValueStore,
        *,
        page_size: int | None = None,
        increment: int | None = None,
        threshold_px: int | None = None,
        reset_on_filter_change: bool | None = None,
    ) -> None:
        self._storage = storage
        self.page_size = page_size if page_size is not None else settings.page_size
        self.increment = increment if increment is not None else settings.page_increment
        self.threshold_px = threshold_px if threshold_px is not None else settings.scroll_threshold_px
        self.reset_on_filter_change = (
            reset_on_filter_change
            if reset_on_filter_change is not None
            else settings.reset_window_on_filter_change
        )
        self.filters = FilterState()
        self.visible_count = self.page_size
        self.restore()

    # -- persistence -------------------------------------------------------

    def restore(self) -> None:
        """Load filters and window size from storage, keeping defaults on bad data."""

        self.filters = self._load_filters()
        self.visible_count = self._load_visible_count()

    def _load_filters(self) -> FilterState:
        raw = self._storage.get(FILTERS_KEY)
        if not raw:
            return FilterState()
        try:
            return FilterState.model_validate_json(raw)
        except ValidationError as exc:
            logger.debug("Ignoring corrupt stored filters: %s", exc.errors()[:1])
            return FilterState()

    def _load_visible_count(self) -> int:
        raw = self._storage.get(VISIBLE_COUNT_KEY)
        count = _parse_int(raw)
        if count is None or count <= 0:
            if raw is not None:
                logger.debug("Ignoring stored visible count %r", raw)
            return self.page_size
        return max(count, self.page_size)

    def _save_filters(self) -> None:
        self._storage.set(FILTERS_KEY, self.filters.model_dump_json())

    def _save_visible_count(self) -> None:
        self._storage.set(VISIBLE_COUNT_KEY, str(self.visible_count))

    # -- filter mutations --------------------------------------------------

    def update(self, **changes: Any) -> FilterState:
        """Apply filter changes, persist the full state and return it.

        Unknown or invalid values leave the current filters untouched.
        """

        merged = {**self.filters.model_dump(), **changes}
        try:
            updated = FilterState.model_validate(merged)
        except ValidationError as exc:
            logger.debug("Rejected filter change %s: %s", sorted(changes), exc.errors()[:1])
            return self.filters

        self.filters = updated
        self._save_filters()
        if self.reset_on_filter_change and self.visible_count != self.page_size:
            self.visible_count = self.page_size
            self._save_visible_count()
        return self.filters

    def set_query(self, query: str) -> FilterState:
        return self.update(query=query)

    def set_city(self, city: str | None) -> FilterState:
        return self.update(city=city)

    def set_direction(self, direction: str | None) -> FilterState:
        return self.update(direction=direction)

    def set_type(self, type_: str | None) -> FilterState:
        return self.update(type=type_)

    def set_facilities(self, facilities: Iterable[str]) -> FilterState:
        return self.update(facilities=set(facilities))

    def toggle_facility(self, facility: str) -> FilterState:
        selected = set(self.filters.facilities)
        if facility in selected:
            selected.discard(facility)
        else:
            selected.add(facility)
        return self.update(facilities=selected)

    def set_price_range(self, low: float, high: float) -> FilterState:
        return self.update(price_range=(low, high))

    def clear_filters(self) -> FilterState:
        return self.update(**FilterState().model_dump())

    # -- window ------------------------------------------------------------

    def on_scroll(
        self,
        scroll_y: float,
        viewport_height: float,
        content_height: float,
        total: int,
    ) -> ScrollResult:
        """Grow the window when the viewport bottom nears the end of the content."""

        distance_to_bottom = content_height - (scroll_y + viewport_height)
        grew = False
        if distance_to_bottom <= self.threshold_px and self.visible_count < total:
            self.visible_count = min(self.visible_count + self.increment, total)
            self._save_visible_count()
            grew = True

        return ScrollResult(
            grew=grew,
            visible_count=self.visible_count,
            show_filter_button=scroll_y > settings.filter_button_offset_px,
            show_scroll_top=scroll_y > settings.scroll_top_offset_px,
        )

    def visible(self, ranked: Sequence[T]) -> list[T]:
        return list(ranked[: self.visible_count])

    # -- navigation round-trip --------------------------------------------

    def remember_scroll(self, offset: float) -> None:
        """Store the scroll offset before leaving for a detail page."""

        self._storage.set(SCROLL_POSITION_KEY, str(max(0, int(offset))))
        self._save_visible_count()

    def take_scroll_restore(self) -> int | None:
        """Return the stored scroll offset once, clearing it."""

        raw = self._storage.get(SCROLL_POSITION_KEY)
        if raw is None:
            return None
        self._storage.remove(SCROLL_POSITION_KEY)
        offset = _parse_int(raw)
        if offset is None or offset < 0:
            logger.debug("Ignoring stored scroll position %r", raw)
            return None
        return offset


def _parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(float(raw.strip()))
    except (ValueError, OverflowError):
        return None
