"""Relevance multiplier stored with every indexed place."""

from __future__ import annotations

from typing import AbstractSet, Mapping, Optional

BASE_BOOST = 1.0
COUNTRY_BOOST = 5.0
POPULATED_PLACE_BOOST = 2.0
POPULATED_PLACE_PREFIX = "PPL"


def compute_boost(
    record: Mapping[str, Optional[str]],
    country_boosts: AbstractSet[str] = frozenset(),
) -> float:
    """Multiply the country and populated-place factors that apply to ``record``."""
    boost = BASE_BOOST
    if country_boosts and record.get("country_code") in country_boosts:
        boost *= COUNTRY_BOOST
    feature_code = record.get("feature_code")
    if feature_code and feature_code.startswith(POPULATED_PLACE_PREFIX):
        boost *= POPULATED_PLACE_BOOST
    return boost
