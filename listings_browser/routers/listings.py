"""Listings page endpoints."""
from __future__ import annotations

from uuid import uuid4

from fastapi import APIRouter, Depends, Header, Response

from ..repositories.listings import ListingsSource, listings_source
from ..schemas import listings as listings_schema
from ..services import browse as browse_service
from ..services.session_store import BrowsingSession, session_store

router = APIRouter()

SESSION_HEADER = "X-Session-Id"


def get_listings_source() -> ListingsSource:
    """FastAPI dependency returning the shared listings source."""

    return listings_source


def get_browsing_session(
    response: Response,
    x_session_id: str | None = Header(default=None),
) -> BrowsingSession:
    """Resolve the visitor's browsing session, starting one when the header is absent."""

    session_id = (x_session_id or "").strip() or str(uuid4())
    response.headers[SESSION_HEADER] = session_id
    return session_store.get_or_create(session_id)


@router.get("", response_model=listings_schema.BrowseResponse)
async def browse(
    session: BrowsingSession = Depends(get_browsing_session),
    source: ListingsSource = Depends(get_listings_source),
) -> listings_schema.BrowseResponse:
    """Return the visible window of filtered, ranked listings."""

    return await browse_service.browse(session, source)


@router.get("/options", response_model=listings_schema.FilterOptions)
async def filter_options() -> listings_schema.FilterOptions:
    """Return the values the filter controls offer."""

    return browse_service.filter_options()


@router.put("/filters", response_model=listings_schema.BrowseResponse)
async def update_filters(
    payload: listings_schema.FilterUpdate,
    session: BrowsingSession = Depends(get_browsing_session),
    source: ListingsSource = Depends(get_listings_source),
) -> listings_schema.BrowseResponse:
    """Change one or more filters."""

    return await browse_service.update_filters(payload, session, source)


@router.post("/filters/clear", response_model=listings_schema.BrowseResponse)
async def clear_filters(
    session: BrowsingSession = Depends(get_browsing_session),
    source: ListingsSource = Depends(get_listings_source),
) -> listings_schema.BrowseResponse:
    """Reset every filter to its default."""

    return await browse_service.clear_filters(session, source)


@router.post("/filters/facilities/{facility}", response_model=listings_schema.BrowseResponse)
async def toggle_facility(
    facility: str,
    session: BrowsingSession = Depends(get_browsing_session),
    source: ListingsSource = Depends(get_listings_source),
) -> listings_schema.BrowseResponse:
    """Select or deselect a facility chip."""

    return await browse_service.toggle_facility(facility, session, source)


@router.post("/scroll", response_model=listings_schema.ScrollResponse)
async def scroll(
    payload: listings_schema.ScrollRequest,
    session: BrowsingSession = Depends(get_browsing_session),
    source: ListingsSource = Depends(get_listings_source),
) -> listings_schema.ScrollResponse:
    """Report the scroll position; grows the window near the bottom."""

    return await browse_service.scroll(payload, session, source)


@router.get("/scroll-restore", response_model=listings_schema.ScrollRestoreResponse)
async def scroll_restore(
    session: BrowsingSession = Depends(get_browsing_session),
) -> listings_schema.ScrollRestoreResponse:
    """Return the offset saved before opening a listing, once."""

    return browse_service.scroll_restore(session)


@router.get("/{listing_id}", response_model=listings_schema.ListingDetail)
async def get_listing(
    listing_id: str,
    source: ListingsSource = Depends(get_listings_source),
) -> listings_schema.ListingDetail:
    """Return the detail view for a listing."""

    return await browse_service.get_listing(listing_id, source)


@router.post("/{listing_id}/open", response_model=listings_schema.ListingDetail)
async def open_listing(
    listing_id: str,
    payload: listings_schema.OpenListingRequest,
    session: BrowsingSession = Depends(get_browsing_session),
    source: ListingsSource = Depends(get_listings_source),
) -> listings_schema.ListingDetail:
    """Navigate to a listing, remembering the list scroll offset."""

    return await browse_service.open_listing(listing_id, payload, session, source)


@router.post("/{listing_id}/carousel", response_model=listings_schema.CarouselResponse)
async def carousel(
    listing_id: str,
    payload: listings_schema.CarouselRequest,
    session: BrowsingSession = Depends(get_browsing_session),
    source: ListingsSource = Depends(get_listings_source),
) -> listings_schema.CarouselResponse:
    """Rotate a card's images."""

    return await browse_service.carousel_action(listing_id, payload, session, source)


@router.post("/{listing_id}/contact", response_model=listings_schema.ContactResponse)
async def contact(
    listing_id: str,
    source: ListingsSource = Depends(get_listings_source),
) -> listings_schema.ContactResponse:
    """Return the messaging deep link for a listing."""

    return await browse_service.contact(listing_id, source)
