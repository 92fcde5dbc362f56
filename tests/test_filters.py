"""Tests for the filter predicates and the filter -> rank -> window pipeline."""
from __future__ import annotations

import pytest

from listings_browser.repositories.listings import Listing, Prices, Tier
from listings_browser.schemas.listings import FilterState
from listings_browser.services import filters, ranking
from listings_browser.services.storage import SessionStorage
from listings_browser.services.window import ViewWindowController


def make_listing(
    listing_id: str,
    *,
    title: str = "",
    city: str = "بريدة",
    direction: str = "شمال",
    type_: str = "قسم",
    facilities: list[str] | None = None,
    prices: Prices | None = None,
    tier: Tier = Tier.STANDARD,
) -> Listing:
    return Listing(
        id=listing_id,
        title=title,
        city=city,
        direction=direction,
        type=type_,
        facilities=facilities or [],
        prices=prices or Prices(),
        tier=tier,
    )


CATALOG = [
    make_listing("101", title="استراحة الندى", facilities=["مسبح", "ملعب"], prices=Prices(weekend="800")),
    make_listing("102", city="عنيزة", direction="جنوب", facilities=["تدفئة", "مشب"], prices=Prices(weekday="300")),
    make_listing("103", city="الرس", type_="قسمين", facilities=["قاعة مناسبات", "مسبح"], prices=Prices(holidays="1500")),
    make_listing("104", facilities=[], prices=Prices()),
    make_listing("205", title="Green Villa", facilities=["WiFi", "مكيف"], prices=Prices(weekday="abc", overnight="450")),
]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("500", 500.0),
        (" 750.5 ", 750.5),
        ("1,200", 1200.0),
        ("٣٥٠", 350.0),
        ("600 ريال", 600.0),
        ("", None),
        ("abc", None),
        ("0", None),
        ("-50", None),
        ("inf", None),
        (None, None),
    ],
)
def test_parse_price(raw, expected) -> None:
    assert filters.parse_price(raw) == expected


def test_min_price_ignores_malformed_fields() -> None:
    listing = make_listing("1", prices=Prices(weekday="abc", weekend="", overnight="450", holidays="900"))
    assert filters.min_price(listing) == 450.0


def test_min_price_none_without_price_data() -> None:
    assert filters.min_price(make_listing("1")) is None


def test_empty_state_keeps_everything_in_order() -> None:
    result = filters.apply(CATALOG, FilterState())
    assert [listing.id for listing in result] == ["101", "102", "103", "104", "205"]


def test_query_matches_title_id_city_and_facilities() -> None:
    assert [item.id for item in filters.apply(CATALOG, FilterState(query="الندى"))] == ["101"]
    assert [item.id for item in filters.apply(CATALOG, FilterState(query="20"))] == ["205"]
    assert [item.id for item in filters.apply(CATALOG, FilterState(query="عنيزة"))] == ["102"]
    assert [item.id for item in filters.apply(CATALOG, FilterState(query="wifi"))] == ["205"]
    assert [item.id for item in filters.apply(CATALOG, FilterState(query="green"))] == ["205"]


def test_whitespace_query_passes_everything() -> None:
    assert len(filters.apply(CATALOG, FilterState(query="   "))) == len(CATALOG)


def test_category_filters_treat_all_as_unset() -> None:
    assert [item.id for item in filters.apply(CATALOG, FilterState(city="الرس"))] == ["103"]
    assert len(filters.apply(CATALOG, FilterState(city="all", direction="", type=None))) == len(CATALOG)
    assert [item.id for item in filters.apply(CATALOG, FilterState(direction="جنوب"))] == ["102"]
    assert [item.id for item in filters.apply(CATALOG, FilterState(type="قسمين"))] == ["103"]


def test_facilities_are_combined_with_and() -> None:
    pool = filters.apply(CATALOG, FilterState(facilities={"مسبح"}))
    assert [item.id for item in pool] == ["101", "103"]

    narrowed = filters.apply(CATALOG, FilterState(facilities={"مسبح", "مناسبات"}))
    assert [item.id for item in narrowed] == ["103"]


def test_smart_category_filter() -> None:
    assert [item.id for item in filters.apply(CATALOG, FilterState(facilities={"شتاء"}))] == ["102"]


def test_listing_without_facilities_fails_any_facility_filter() -> None:
    result = filters.apply(CATALOG, FilterState(facilities={"صيف"}))
    assert "104" not in [item.id for item in result]


@pytest.mark.parametrize("extra", ["مسبح", "شتاء", "صيف", "مناسبات", "ألعاب", "مبيت", "جاكوزي"])
def test_adding_a_facility_never_grows_the_result(extra: str) -> None:
    base = FilterState(facilities={"ملعب"})
    narrowed = FilterState(facilities={"ملعب", extra})
    assert len(filters.apply(CATALOG, narrowed)) <= len(filters.apply(CATALOG, base))


def test_price_band_uses_cheapest_valid_price_inclusive() -> None:
    result = filters.apply(CATALOG, FilterState(price_range=(300, 800)))
    # 104 has no price data and is exempt.
    assert [item.id for item in result] == ["101", "102", "104", "205"]

    result = filters.apply(CATALOG, FilterState(price_range=(1000, 5000)))
    assert [item.id for item in result] == ["103", "104"]


@pytest.mark.parametrize("price_range", [(0, 0), (1, 2), (10_000, 20_000)])
def test_listing_without_price_data_is_exempt(price_range) -> None:
    assert filters.matches_price(make_listing("x"), price_range) is True


def test_end_to_end_scenario() -> None:
    listings = [
        make_listing("1", tier=Tier.VERIFIED, facilities=["مسبح"], prices=Prices(weekend="500")),
        make_listing("2", tier=Tier.STANDARD, facilities=[], prices=Prices(weekday="300")),
    ]
    state = FilterState(city="بريدة", facilities={"مسبح"})

    filtered = filters.apply(listings, state)
    assert [item.id for item in filtered] == ["1"]

    ranked = ranking.rank(filtered)
    narrow = ViewWindowController(SessionStorage(), page_size=1)
    assert [item.id for item in narrow.visible(ranked)] == ["1"]

    wide = ViewWindowController(SessionStorage(), page_size=24)
    assert [item.id for item in wide.visible(ranked)] == ["1"]
