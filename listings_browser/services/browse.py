"""Page-level controller for the public listings page.

Each call recomputes filter -> rank -> window over the cached listings
collection for one browsing session.
"""
from __future__ import annotations

from fastapi import HTTPException, status

from ..core.config import settings
from ..data.facilities import CITIES, DIRECTIONS, PRIORITY_FACILITIES, SMART_FILTERS, TYPES
from ..repositories.listings import Listing, ListingsSource
from ..schemas import listings as schemas
from . import contact as contact_service
from . import filters, ranking
from .carousel import CarouselState
from .session_store import BrowsingSession

TOP_FACILITIES = 3


async def browse(session: BrowsingSession, source: ListingsSource) -> schemas.BrowseResponse:
    """Return the current visible window of ranked, filtered listings."""

    listings = await source.fetch()
    ranked = ranking.rank(filters.apply(listings, session.window.filters))
    visible = session.window.visible(ranked)

    session.carousels.sync(listing.id for listing in visible)
    cards = [
        _to_card(listing, session.carousels.mount(listing.id, len(listing.image_urls)))
        for listing in visible
    ]

    return schemas.BrowseResponse(
        session_id=session.session_id,
        filters=session.window.filters,
        total=len(ranked),
        visible_count=session.window.visible_count,
        has_more=session.window.visible_count < len(ranked),
        results=cards,
    )


async def update_filters(
    payload: schemas.FilterUpdate,
    session: BrowsingSession,
    source: ListingsSource,
) -> schemas.BrowseResponse:
    """Apply a partial filter change; explicitly sent nulls clear a category."""

    changes = payload.model_dump(exclude_unset=True)
    if "query" in changes and changes["query"] is None:
        changes["query"] = ""
    if "facilities" in changes and changes["facilities"] is None:
        changes["facilities"] = set()
    if "price_range" in changes and changes["price_range"] is None:
        changes.pop("price_range")

    if changes:
        session.window.update(**changes)
    return await browse(session, source)


async def toggle_facility(
    facility: str,
    session: BrowsingSession,
    source: ListingsSource,
) -> schemas.BrowseResponse:
    session.window.toggle_facility(facility)
    return await browse(session, source)


async def clear_filters(session: BrowsingSession, source: ListingsSource) -> schemas.BrowseResponse:
    session.window.clear_filters()
    return await browse(session, source)


async def scroll(
    payload: schemas.ScrollRequest,
    session: BrowsingSession,
    source: ListingsSource,
) -> schemas.ScrollResponse:
    """Feed a scroll position to the window controller."""

    listings = await source.fetch()
    total = len(filters.apply(listings, session.window.filters))
    result = session.window.on_scroll(
        payload.scroll_y,
        payload.viewport_height,
        payload.content_height,
        total,
    )
    return schemas.ScrollResponse(
        session_id=session.session_id,
        grew=result.grew,
        visible_count=result.visible_count,
        total=total,
        show_filter_button=result.show_filter_button,
        show_scroll_top=result.show_scroll_top,
    )


async def open_listing(
    listing_id: str,
    payload: schemas.OpenListingRequest,
    session: BrowsingSession,
    source: ListingsSource,
) -> schemas.ListingDetail:
    """Remember where the visitor was, then return the detail view."""

    listing = await _require_listing(listing_id, source)
    session.window.remember_scroll(payload.scroll_y)
    return _to_detail(listing)


def scroll_restore(session: BrowsingSession) -> schemas.ScrollRestoreResponse:
    return schemas.ScrollRestoreResponse(
        session_id=session.session_id,
        scroll_y=session.window.take_scroll_restore(),
    )


async def get_listing(listing_id: str, source: ListingsSource) -> schemas.ListingDetail:
    listing = await _require_listing(listing_id, source)
    return _to_detail(listing)


async def carousel_action(
    listing_id: str,
    payload: schemas.CarouselRequest,
    session: BrowsingSession,
    source: ListingsSource,
) -> schemas.CarouselResponse:
    """Drive the carousel of a rendered card."""

    carousel = session.carousels.get(listing_id)
    if carousel is None:
        listing = await _require_listing(listing_id, source)
        carousel = session.carousels.mount(listing.id, len(listing.image_urls))

    if payload.action == "next":
        accepted = carousel.next()
    elif payload.action == "prev":
        accepted = carousel.prev()
    elif payload.action == "goto":
        accepted = carousel.goto(payload.index or 0)
    else:
        accepted = carousel.swipe(payload.start_x or 0.0, payload.end_x or 0.0)

    return schemas.CarouselResponse(
        listing_id=listing_id,
        accepted=accepted,
        carousel=_carousel_out(carousel),
    )


async def contact(listing_id: str, source: ListingsSource) -> schemas.ContactResponse:
    listing = await _require_listing(listing_id, source)
    url, tracked = await contact_service.contact_listing(listing)
    return schemas.ContactResponse(listing_id=listing.id, url=url, tracked=tracked)


def filter_options() -> schemas.FilterOptions:
    return schemas.FilterOptions(
        cities=list(CITIES),
        directions=list(DIRECTIONS),
        types=list(TYPES),
        priority_facilities=list(PRIORITY_FACILITIES),
        smart_categories=list(SMART_FILTERS),
        price_floor=settings.price_floor,
        price_ceiling=settings.price_ceiling,
    )


async def _require_listing(listing_id: str, source: ListingsSource) -> Listing:
    listing = await source.get(listing_id)
    if listing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")
    return listing


def display_price(listing: Listing) -> str:
    """Headline price on a card: weekend, then weekday, else "0"."""

    return listing.prices.weekend or listing.prices.weekday or "0"


def _carousel_out(carousel: CarouselState) -> schemas.CarouselOut:
    return schemas.CarouselOut(
        current_index=carousel.current_index,
        transitioning=carousel.transitioning,
        image_count=carousel.image_count,
    )


def _to_card(listing: Listing, carousel: CarouselState) -> schemas.ListingCard:
    return schemas.ListingCard(
        id=listing.id,
        title=listing.title,
        city=listing.city,
        direction=listing.direction,
        type=listing.type,
        tier=listing.tier,
        verified=listing.verified,
        display_price=display_price(listing),
        min_price=filters.min_price(listing),
        top_facilities=listing.facilities[:TOP_FACILITIES],
        image_urls=list(listing.image_urls),
        carousel=_carousel_out(carousel),
    )


def _to_detail(listing: Listing) -> schemas.ListingDetail:
    prices = listing.prices
    return schemas.ListingDetail(
        id=listing.id,
        title=listing.title,
        city=listing.city,
        direction=listing.direction,
        type=listing.type,
        tier=listing.tier,
        verified=listing.verified,
        facilities=list(listing.facilities),
        prices=schemas.PricesOut(
            weekday=prices.weekday,
            weekend=prices.weekend,
            overnight=prices.overnight,
            holidays=prices.holidays,
        ),
        min_price=filters.min_price(listing),
        image_urls=list(listing.image_urls),
        contact_url=contact_service.build_contact_link(listing),
    )
