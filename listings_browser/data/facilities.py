"""Static filter catalogues for the public listings page."""
from __future__ import annotations

CITIES: tuple[str, ...] = ("بريدة", "عنيزة", "الرس", "البكيرية", "المذنب")
DIRECTIONS: tuple[str, ...] = ("شمال", "جنوب", "شرق", "غرب")
TYPES: tuple[str, ...] = ("قسم", "قسمين")

# Sentinel a category select sends when the visitor picks "everything".
ALL_OPTION = "all"


# Smart facility categories: a requested category matches any listing facility
# containing one of its keywords once both sides are normalised.
SMART_FILTERS: dict[str, tuple[str, ...]] = {
    "مبيت": ("غرف نوم", "غرفة نوم", "نوم", "مبيت"),
    "شتاء": ("خيمة", "مشب", "تدفئة", "شتاء", "شتوية"),
    "صيف": ("مسبح", "ألعاب مائية", "مكيف", "صيف", "صيفية"),
    "مناسبات": ("قاعة", "صالة", "مناسبات", "حفلات"),
    "ألعاب": ("ملعب", "ألعاب", "ترامبولين", "زحليقة"),
}


PRIORITY_FACILITIES: tuple[str, ...] = (
    "مسبح",
    "بدون مسبح",
    "مبيت",
    "ألعاب مائية",
    "ملعب",
    "مناسبات",
    "شتاء",
    "صيف",
    "مكيف",
    "واي فاي",
)
