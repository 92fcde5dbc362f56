"""Outbound contact action: messaging deep link plus best-effort request tracking."""
from __future__ import annotations

import logging
import re
from urllib.parse import quote

import httpx

from ..core.config import settings
from ..repositories.listings import Listing

logger = logging.getLogger(__name__)

MESSAGING_BASE_URL = "https://wa.me"
_NON_DIGITS = re.compile(r"\D+")


def resolve_handle(contact_handle: str | None) -> str:
    """Digits-only messaging handle, falling back to the platform number."""

    digits = _NON_DIGITS.sub("", contact_handle or "")
    return digits or _NON_DIGITS.sub("", settings.default_contact_handle)


def build_message(listing: Listing) -> str:
    if listing.contact_handle:
        return f"مرحباً، أريد الاستفسار عن عقار رقم {listing.id} - {listing.title}"
    return f"استفسار عن رقم العقار {listing.id}"


def build_contact_link(listing: Listing) -> str:
    handle = resolve_handle(listing.contact_handle)
    return f"{MESSAGING_BASE_URL}/{handle}?text={quote(build_message(listing), safe='')}"


async def track_request(
    listing_id: str,
    *,
    url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bool:
    """Record a contact request; returns False instead of raising on any failure."""

    target = url if url is not None else settings.contact_tracking_url
    if not target:
        return False

    try:
        async with httpx.AsyncClient(timeout=5.0, transport=transport) as client:
            response = await client.post(target, json={"propertyNumber": listing_id})
            response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.warning("Contact tracking failed for listing %s: %s", listing_id, exc)
        return False
    return True


async def contact_listing(
    listing: Listing,
    *,
    tracking_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[str, bool]:
    """Fire tracking, then return the deep link and whether tracking succeeded."""

    tracked = await track_request(listing.id, url=tracking_url, transport=transport)
    return build_contact_link(listing), tracked
