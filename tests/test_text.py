import pytest

from listings_browser.services.text import normalize

SAMPLES = [
    "",
    "   ",
    "إجازة",
    "اجازة",
    "مبيت ",
    "  ألعاب مائية  ",
    "آخر",
    "مسؤول",
    "شاطئ",
    "مستشفى",
    "تـــدفئة",
    "مُكَيَّف",
    "Café WI-FI",
    "Straße",
    "ٱلبحر",
]


@pytest.mark.parametrize("text", SAMPLES)
def test_normalize_is_idempotent(text: str) -> None:
    once = normalize(text)
    assert normalize(once) == once


def test_hamza_seat_and_taa_marbuta_fold_together() -> None:
    assert normalize("إجازة") == normalize("اجازة")
    assert normalize("إجازة") == "اجازه"


def test_outer_whitespace_is_trimmed() -> None:
    assert normalize("مبيت ") == normalize("مبيت")


def test_tatweel_and_harakat_are_removed() -> None:
    assert normalize("تـــدفئة") == normalize("تدفئة")
    assert normalize("مُكَيَّف") == "مكيف"


def test_letter_variants_fold() -> None:
    assert normalize("آخر") == "اخر"
    assert normalize("ٱلبحر") == "البحر"
    assert normalize("مسؤول") == "مسوول"
    assert normalize("شاطئ") == "شاطو"
    assert normalize("مستشفى") == "مستشفي"


def test_latin_text_is_casefolded_and_stripped_of_accents() -> None:
    assert normalize("Café WI-FI") == "cafe wi-fi"
    assert normalize("Straße") == "strasse"


def test_empty_input() -> None:
    assert normalize("") == ""
    assert normalize("   ") == ""
