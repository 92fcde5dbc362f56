"""Listings source: fetches raw spreadsheet records and adapts them to listings."""
from __future__ import annotations

import enum
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import httpx

from ..core.config import settings

logger = logging.getLogger(__name__)

KEY_ID = "رقم العقار"
KEY_TITLE = "اسم العقار"
KEY_CITY = "المنطقة"
KEY_DIRECTION = "الاتجاه"
KEY_TYPE = "النوع"
KEY_FACILITIES = "المرافق"
KEY_CONTACT = "رقم الجوال"
PRICE_KEYS: dict[str, str] = {
    "weekday": "سعر وسط الأسبوع",
    "weekend": "سعر نهاية الأسبوع",
    "overnight": "سعر المبيت",
    "holidays": "سعر الإجازات",
}


class Tier(str, enum.Enum):
    STANDARD = "standard"
    VERIFIED = "verified"


@dataclass(slots=True)
class Prices:
    """Raw price strings as entered in the sheet; any of them may be empty."""

    weekday: str = ""
    weekend: str = ""
    overnight: str = ""
    holidays: str = ""

    def values(self) -> tuple[str, str, str, str]:
        return (self.weekday, self.weekend, self.overnight, self.holidays)


@dataclass(slots=True)
class Listing:
    """Rentable property as shown on the public listings page."""

    id: str
    title: str = ""
    city: str = ""
    direction: str = ""
    type: str = ""
    facilities: list[str] = field(default_factory=list)
    prices: Prices = field(default_factory=Prices)
    tier: Tier = Tier.STANDARD
    image_urls: list[str] = field(default_factory=list)
    contact_handle: str | None = None

    @property
    def verified(self) -> bool:
        return self.tier is Tier.VERIFIED


def parse_facilities(raw: object) -> list[str]:
    """Turn the facilities cell into a list of trimmed, non-empty labels.

    The cell is either a JSON array, an actual list, or comma-separated text.
    A JSON array that fails to parse falls back to the comma split.
    """

    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return _clean_labels(str(item) for item in raw)

    text = str(raw).strip()
    if not text:
        return []
    if text.startswith("["):
        try:
            parsed = json.loads(text)
        except ValueError:
            logger.debug("Facilities cell is not valid JSON, splitting on commas: %r", text)
        else:
            if isinstance(parsed, list):
                return _clean_labels(str(item) for item in parsed)
        text = text.strip("[]")
    return _clean_labels(text.split(","))


def _clean_labels(labels: Iterable[str]) -> list[str]:
    cleaned: list[str] = []
    for label in labels:
        value = label.replace('"', "").strip()
        if value:
            cleaned.append(value)
    return cleaned


def build_image_urls(listing_id: str, base_url: str | None = None, count: int | None = None) -> list[str]:
    """Public object-storage URLs for a listing's photos, in display order."""

    base = (base_url if base_url is not None else settings.image_base_url).rstrip("/")
    total = count if count is not None else settings.image_count
    return [f"{base}/{listing_id}/{index}.jpg" for index in range(1, total + 1)]


def parse_record(raw: object) -> Listing | None:
    """Adapt one raw sheet record to a Listing, or None when it has no id."""

    if not isinstance(raw, Mapping):
        return None

    listing_id = _cell(raw, KEY_ID)
    if not listing_id:
        return None

    title = _cell(raw, KEY_TITLE)
    contact = _cell(raw, KEY_CONTACT)
    return Listing(
        id=listing_id,
        title=title,
        city=_cell(raw, KEY_CITY),
        direction=_cell(raw, KEY_DIRECTION),
        type=_cell(raw, KEY_TYPE),
        facilities=parse_facilities(raw.get(KEY_FACILITIES)),
        prices=Prices(**{name: _cell(raw, key) for name, key in PRICE_KEYS.items()}),
        # A named listing belongs to a paying (verified) owner.
        tier=Tier.VERIFIED if title else Tier.STANDARD,
        image_urls=build_image_urls(listing_id),
        contact_handle=contact or None,
    )


def parse_records(raw: object) -> list[Listing]:
    """Adapt a raw payload, skipping malformed records and duplicate ids."""

    if not isinstance(raw, list):
        return []

    listings: list[Listing] = []
    seen: set[str] = set()
    for item in raw:
        listing = parse_record(item)
        if listing is None:
            continue
        if listing.id in seen:
            logger.debug("Skipping duplicate listing id %s", listing.id)
            continue
        seen.add(listing.id)
        listings.append(listing)
    return listings


def _cell(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


class ListingsSource:
    """Fetch listings once and serve the cached collection until it goes stale.

    Any failure yields an empty collection; the page treats "no data yet" and
    "fetch failed" alike.
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        ttl_seconds: float | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url if url is not None else settings.listings_source_url
        self._ttl = ttl_seconds if ttl_seconds is not None else settings.listings_cache_seconds
        self._timeout = timeout_seconds if timeout_seconds is not None else settings.listings_fetch_timeout_seconds
        self._transport = transport
        self._cached: list[Listing] | None = None
        self._fetched_at = 0.0

    async def fetch(self) -> list[Listing]:
        if self._cached is not None and time.monotonic() - self._fetched_at < self._ttl:
            return self._cached

        listings = await self._download()
        if listings is not None:
            self._cached = listings
            self._fetched_at = time.monotonic()
            return listings
        return self._cached if self._cached is not None else []

    async def get(self, listing_id: str) -> Listing | None:
        for listing in await self.fetch():
            if listing.id == listing_id:
                return listing
        return None

    def invalidate(self) -> None:
        self._cached = None
        self._fetched_at = 0.0

    async def _download(self) -> list[Listing] | None:
        if not self._url:
            logger.warning("LISTINGS_SOURCE_URL is not configured; serving no listings.")
            return None

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._url, params={"action": "getData"})
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Listings source unavailable (%s); serving cached or empty collection", exc)
            return None

        if not isinstance(payload, list):
            logger.warning("Listings source returned %s instead of a list", type(payload).__name__)
            return None

        listings = parse_records(payload)
        logger.info("Fetched %d listings (%d raw records)", len(listings), len(payload))
        return listings


listings_source = ListingsSource()
