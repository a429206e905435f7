"""Weighted query strings for place-name lookups.

The term is inserted into the query language as-is. Callers lower-case it
and unescape HTML entities, nothing more, so query syntax typed by a user
(parentheses, ``OR``, field prefixes) reaches the index unchanged and can
alter the clause structure. Do not expose this to untrusted input without a
filter in front of it.
"""

from __future__ import annotations

DEFAULT_FIELD = "basic_name"
ALTERNATE_NAMES = "alternate_names"
BOOST_WEIGHT = 10
OVERALL_WEIGHT = "0.2"
EXACT_TIER_WEIGHT = 10
LEFT_TIER_WEIGHT = 4


def boost_clause(weight: int = BOOST_WEIGHT) -> str:
    return f"boost:boost^{weight}"


DEFAULT_QUERY = boost_clause()


def build_weighted_query(
    term: str,
    field: str = DEFAULT_FIELD,
    boost_weight: int = BOOST_WEIGHT,
) -> str:
    """Build a tiered query for ``term``.

    Searching ``alternate_names`` matches that field only. Any other field
    gets three tiers: a forward and reversed prefix match on the normalised
    name (or an exact UTF-8 match), then a left-anchored prefix match, then
    anything in the name fields.
    """
    boost = boost_clause(boost_weight)
    if field == ALTERNATE_NAMES:
        name = f"(alternate_names:({term}*) OR alternate_names:({term}))"
        return f"({name})^{OVERALL_WEIGHT} AND {boost}"

    rev = term[::-1]
    both = (
        f"((basic_name_str:({term}*) AND basic_name_rev:({rev}*))"
        f" OR utf8_name:({term}))"
    )
    left = f"(basic_name_str:({term}*) OR utf8_name:({term}*))"
    name = (
        f"(basic_name:({term}*) OR basic_name:({term})"
        f" OR alternate_names:({term}*) OR alternate_names:({term}))"
    )
    return (
        f"({both}^{EXACT_TIER_WEIGHT} OR {left}^{LEFT_TIER_WEIGHT} OR {name})"
        f"^{OVERALL_WEIGHT} AND {boost}"
    )
