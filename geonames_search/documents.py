"""Turn a split GeoNames row into an indexable document."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import AbstractSet, Dict, List, Mapping, Optional, Sequence, Tuple

from .boost import compute_boost
from .errors import DocumentBuildError
from .schema import FIELD_NAMES, is_empty, resolve

# Every document carries boost:boost so that queries can AND it in and
# pick up the per-document factor.
BOOST_FIELD = "boost"
DATE_SUFFIX = "T00:00:00Z"
MULTI_VALUED = frozenset({"alternate_names"})


@dataclass(frozen=True)
class IndexableDocument:
    fields: Mapping[str, Tuple[str, ...]]
    boost: float

    def get(self, name: str) -> Tuple[str, ...]:
        return self.fields.get(name, ())

    def first(self, name: str) -> Optional[str]:
        values = self.fields.get(name)
        return values[0] if values else None


@dataclass(frozen=True)
class BuildResult:
    document: Optional[IndexableDocument] = None
    error: Optional[DocumentBuildError] = None

    @property
    def ok(self) -> bool:
        return self.document is not None


def _reverse(value: str) -> str:
    return value[::-1]


def _assemble(
    row: Sequence[str],
    exclusions: AbstractSet[str],
    country_boosts: AbstractSet[str],
) -> IndexableDocument:
    fields: Dict[str, List[str]] = {}

    def add(name: str, value: str) -> None:
        fields.setdefault(name, []).append(value)

    for name in FIELD_NAMES:
        if name in exclusions:
            continue
        value = resolve(row, name)
        if name == "date_modified":
            value += DATE_SUFFIX
        if name == "basic_name":
            # The ASCII name is sometimes missing from the dump
            if is_empty(value):
                value = resolve(row, "utf8_name")
            lowered = value.lower()
            add("basic_name_str", lowered)
            add("basic_name_rev", _reverse(lowered))
        if is_empty(value):
            continue
        if name in MULTI_VALUED:
            for token in value.split(","):
                add(name, token)
        else:
            add(name, value)

    boost = compute_boost(
        {
            "country_code": resolve(row, "country_code"),
            "feature_code": resolve(row, "feature_code"),
        },
        country_boosts,
    )
    fields[BOOST_FIELD] = [BOOST_FIELD]
    return IndexableDocument(
        fields=MappingProxyType({k: tuple(v) for k, v in fields.items()}),
        boost=boost,
    )


def build_document(
    row: Sequence[str],
    exclusions: AbstractSet[str] = frozenset(),
    country_boosts: AbstractSet[str] = frozenset(),
) -> BuildResult:
    """Build the document for one split row.

    Failures never propagate: the error is returned in the result so the
    caller can log the row and move on.
    """
    try:
        document = _assemble(row, exclusions, country_boosts)
    except Exception as exc:
        error = DocumentBuildError(f"{type(exc).__name__}: {exc}", record=list(row))
        error.__cause__ = exc
        return BuildResult(error=error)
    return BuildResult(document=document)
