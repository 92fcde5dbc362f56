"""Text canonicalisation for fuzzy Arabic facility matching."""
from __future__ import annotations

import re
import unicodedata

_DIACRITICS = re.compile(r"[\u0300-\u036f\u064b-\u0652\u0670\u06d6-\u06ed]")
_TATWEEL = "\u0640"
_LETTER_FOLDS = str.maketrans(
    {
        "أ": "ا",
        "إ": "ا",
        "آ": "ا",
        "ٱ": "ا",
        "ؤ": "و",
        "ئ": "و",
        "ى": "ي",
        "ة": "ه",
    }
)


def normalize(text: str) -> str:
    """Return a canonical form of ``text`` for substring comparison.

    Case-folds, trims, strips Latin and Arabic diacritics and the tatweel,
    then folds hamza seats, alef-maqsura and taa-marbuta to their bare letters.
    The result is a fixed point: ``normalize(normalize(x)) == normalize(x)``.
    """

    if not text:
        return ""

    # Seats are folded before NFD would split them into letter + hamza mark.
    folded = text.casefold().strip().translate(_LETTER_FOLDS)
    decomposed = unicodedata.normalize("NFD", folded)
    stripped = _DIACRITICS.sub("", decomposed).replace(_TATWEEL, "")
    stripped = "".join(char for char in stripped if not unicodedata.combining(char))
    composed = unicodedata.normalize("NFC", stripped)
    return composed.translate(_LETTER_FOLDS).strip()
