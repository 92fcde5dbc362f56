"""Schemas for the public listings page."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from ..core.config import settings
from ..repositories.listings import Tier


def _default_price_range() -> tuple[float, float]:
    return (settings.price_floor, settings.price_ceiling)


class FilterState(BaseModel):
    """Visitor filter selections, persisted for the whole browsing session."""

    query: str = ""
    city: str | None = None
    direction: str | None = None
    type: str | None = None
    facilities: set[str] = Field(default_factory=set)
    price_range: tuple[float, float] = Field(default_factory=_default_price_range)

    @field_validator("facilities", mode="before")
    @classmethod
    def _drop_blank_facilities(cls, value: object) -> object:
        if isinstance(value, (list, tuple, set, frozenset)):
            return {str(item).strip() for item in value if str(item).strip()}
        return value

    @field_validator("price_range")
    @classmethod
    def _order_bounds(cls, value: tuple[float, float]) -> tuple[float, float]:
        low, high = value
        return (high, low) if low > high else (low, high)


class FilterUpdate(BaseModel):
    """Partial filter change; omitted fields keep their current value."""

    query: str | None = None
    city: str | None = None
    direction: str | None = None
    type: str | None = None
    facilities: list[str] | None = None
    price_range: tuple[float, float] | None = None


class PricesOut(BaseModel):
    weekday: str = ""
    weekend: str = ""
    overnight: str = ""
    holidays: str = ""


class CarouselOut(BaseModel):
    current_index: int = 0
    transitioning: bool = False
    image_count: int = 0


class ListingCard(BaseModel):
    id: str
    title: str
    city: str
    direction: str
    type: str
    tier: Tier
    verified: bool
    display_price: str
    min_price: float | None = None
    top_facilities: list[str] = Field(default_factory=list)
    image_urls: list[str] = Field(default_factory=list)
    carousel: CarouselOut = Field(default_factory=CarouselOut)


class ListingDetail(BaseModel):
    id: str
    title: str
    city: str
    direction: str
    type: str
    tier: Tier
    verified: bool
    facilities: list[str] = Field(default_factory=list)
    prices: PricesOut
    min_price: float | None = None
    image_urls: list[str] = Field(default_factory=list)
    contact_url: str


class BrowseResponse(BaseModel):
    session_id: str
    filters: FilterState
    total: int
    visible_count: int
    has_more: bool
    results: list[ListingCard]


class ScrollRequest(BaseModel):
    scroll_y: int = Field(ge=0)
    viewport_height: int = Field(ge=0)
    content_height: int = Field(ge=0)


class ScrollResponse(BaseModel):
    session_id: str
    grew: bool
    visible_count: int
    total: int
    show_filter_button: bool
    show_scroll_top: bool


class OpenListingRequest(BaseModel):
    scroll_y: int = Field(default=0, ge=0)


class ScrollRestoreResponse(BaseModel):
    session_id: str
    scroll_y: int | None = None


class CarouselRequest(BaseModel):
    action: Literal["next", "prev", "goto", "swipe"]
    index: int | None = None
    start_x: float | None = None
    end_x: float | None = None

    @model_validator(mode="after")
    def _require_action_fields(self) -> "CarouselRequest":
        if self.action == "goto" and self.index is None:
            raise ValueError("index is required for goto")
        if self.action == "swipe" and (self.start_x is None or self.end_x is None):
            raise ValueError("start_x and end_x are required for swipe")
        return self


class CarouselResponse(BaseModel):
    listing_id: str
    accepted: bool
    carousel: CarouselOut


class ContactResponse(BaseModel):
    listing_id: str
    url: str
    tracked: bool


class FilterOptions(BaseModel):
    cities: list[str]
    directions: list[str]
    types: list[str]
    priority_facilities: list[str]
    smart_categories: list[str]
    price_floor: float
    price_ceiling: float
