"""Ordering of filtered listings by subscription tier."""
from __future__ import annotations

from typing import Sequence

from ..repositories.listings import Listing


def rank(listings: Sequence[Listing]) -> list[Listing]:
    """Move verified listings ahead of standard ones.

    This is a stable partition: each tier keeps its input order, so identical
    input always renders identically.
    """

    verified = [listing for listing in listings if listing.verified]
    standard = [listing for listing in listings if not listing.verified]
    return verified + standard
