"""Tests for the in-memory browsing session store."""
from __future__ import annotations

from listings_browser.services import session_store as session_module
from listings_browser.services.carousel import CarouselRegistry
from listings_browser.services.session_store import BrowsingSession, SessionStore
from listings_browser.services.window import VISIBLE_COUNT_KEY


class FakeClock:
    def __init__(self) -> None:
        self.now = 1_000.0

    def __call__(self) -> float:
        return self.now


class RecordingScheduler:
    def __init__(self) -> None:
        self.handles: list["RecordingHandle"] = []

    def call_later(self, delay, callback):
        handle = RecordingHandle()
        self.handles.append(handle)
        return handle


class RecordingHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


def test_get_or_create_returns_same_session() -> None:
    store = SessionStore(ttl_seconds=60)

    first = store.get_or_create("tab-1")
    first.window.set_city("بريدة")
    again = store.get_or_create("tab-1")

    assert again is first
    assert again.window.filters.city == "بريدة"
    assert store.get("missing") is None
    assert len(store) == 1


def test_sessions_are_isolated() -> None:
    store = SessionStore(ttl_seconds=60)

    store.get_or_create("tab-1").window.set_query("مسبح")

    assert store.get_or_create("tab-2").window.filters.query == ""


def test_idle_sessions_are_evicted(monkeypatch) -> None:
    clock = FakeClock()
    monkeypatch.setattr(session_module.time, "time", clock)
    store = SessionStore(ttl_seconds=60)
    store.get_or_create("idle")

    clock.now += 30
    store.get_or_create("active")
    clock.now += 45

    assert store.get("idle") is None
    assert store.get("active") is not None


def test_clear_stops_carousel_timers() -> None:
    store = SessionStore(ttl_seconds=60)
    scheduler = RecordingScheduler()
    session = BrowsingSession("tab-1", carousels=CarouselRegistry(scheduler_factory=lambda: scheduler))
    store.save(session)
    session.carousels.mount("101", 5).next()

    store.clear("tab-1")

    assert store.get("tab-1") is None
    assert scheduler.handles and all(handle.cancelled for handle in scheduler.handles)
    assert len(session.carousels) == 0


def test_new_session_restores_nothing_from_other_tabs() -> None:
    store = SessionStore(ttl_seconds=60)
    session = store.get_or_create("tab-1")
    session.storage.set(VISIBLE_COUNT_KEY, "64")

    assert store.get_or_create("tab-2").window.visible_count == session_module.settings.page_size
