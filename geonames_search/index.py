"""Whoosh-backed place index."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from whoosh import index, sorting
from whoosh.analysis import SimpleAnalyzer
from whoosh.fields import DATETIME, ID, KEYWORD, NUMERIC, TEXT, Schema
from whoosh.qparser import QueryParser

from .errors import IndexWriteError, QueryError, StartupError

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
DEFAULT_FIELDS = "*,score"
DEFAULT_SEARCH_FIELD = "basic_name"

# Place names keep their stop words ("La Paz", "The Hague").
SCHEMA = Schema(
    id=ID(stored=True, unique=True),
    utf8_name=TEXT(stored=True, analyzer=SimpleAnalyzer()),
    basic_name=TEXT(stored=True, analyzer=SimpleAnalyzer()),
    basic_name_str=ID(stored=True),
    basic_name_rev=ID(stored=True),
    alternate_names=KEYWORD(stored=True, commas=True, lowercase=True, scorable=True),
    latitude=NUMERIC(float, bits=64, stored=True),
    longitude=NUMERIC(float, bits=64, stored=True),
    feature_class=ID(stored=True, sortable=True),
    feature_code=ID(stored=True, sortable=True),
    country_code=ID(stored=True, sortable=True),
    population=NUMERIC(int, bits=64, stored=True),
    elevation=NUMERIC(int, stored=True),
    gtopo30=NUMERIC(int, stored=True),
    timezone=ID(stored=True),
    date_modified=DATETIME(stored=True),
    boost=ID(),
)

MULTI_VALUED = frozenset({"alternate_names"})


def _to_datetime(value: str) -> datetime:
    return datetime.strptime(value, DATE_FORMAT)


CONVERTERS = {
    "latitude": float,
    "longitude": float,
    "population": int,
    "elevation": int,
    "gtopo30": int,
    "date_modified": _to_datetime,
}


def prepare_fields(fields: Mapping[str, Sequence[str]]) -> Dict:
    """Convert string values to what each Whoosh field expects."""
    prepared: Dict = {}
    for name, values in fields.items():
        values = [v for v in values if v]
        if not values:
            continue
        if name in CONVERTERS:
            prepared[name] = CONVERTERS[name](values[0])
        elif name in MULTI_VALUED:
            prepared[name] = ",".join(values)
        else:
            prepared[name] = " ".join(values)
    return prepared


@dataclass
class ResultSet:
    total: int
    start: int
    rows: int
    hits: List[Dict] = field(default_factory=list)
    facets: Dict[str, List[Tuple[str, int]]] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.hits


def _stored(hit, names: List[str]) -> Dict:
    stored = dict(hit.fields())
    if "*" not in names:
        stored = {k: v for k, v in stored.items() if k in names}
    if "alternate_names" in stored:
        stored["alternate_names"] = stored["alternate_names"].split(",")
    if isinstance(stored.get("date_modified"), datetime):
        stored["date_modified"] = stored["date_modified"].strftime(DATE_FORMAT)
    if "score" in names:
        stored["score"] = hit.score
    return stored


def _top_counts(groups: Mapping, limit: int) -> List[Tuple[str, int]]:
    counts = [
        (key.decode("utf-8") if isinstance(key, bytes) else key, count)
        for key, count in groups.items()
        if key
    ]
    counts.sort(key=lambda item: (-item[1], item[0]))
    if limit > 0:
        counts = counts[:limit]
    return counts


class GeoIndex:
    """Add, commit, optimize and query against one Whoosh index directory."""

    def __init__(self, ix, limitmb: int = 256):
        self.ix = ix
        self.limitmb = limitmb
        self._writer = None

    @classmethod
    def open(cls, index_dir: str, create: bool = False, limitmb: int = 256) -> "GeoIndex":
        if not index.exists_in(index_dir):
            if not create:
                raise StartupError(f"Index not found in: {index_dir}")
            os.makedirs(index_dir, exist_ok=True)
            index.create_in(index_dir, SCHEMA)
            logger.info("Created index in %s", index_dir)
        return cls(index.open_dir(index_dir), limitmb=limitmb)

    def _get_writer(self):
        if self._writer is None:
            self._writer = self.ix.writer(limitmb=self.limitmb)
        return self._writer

    def add_document(self, fields: Mapping[str, Sequence[str]], boost: float = 1.0) -> None:
        try:
            prepared = prepare_fields(fields)
        except (TypeError, ValueError) as exc:
            raise IndexWriteError(f"Bad field value: {exc}") from exc
        prepared["_boost"] = boost
        try:
            # id is unique, re-harvesting a dump replaces existing places
            self._get_writer().update_document(**prepared)
        except Exception as exc:
            raise IndexWriteError(f"Failed to add document: {exc}") from exc

    def commit(self) -> None:
        writer, self._writer = self._writer, None
        if writer is None:
            return
        try:
            writer.commit()
        except Exception as exc:
            writer.cancel()
            raise IndexWriteError(f"Failed to commit: {exc}") from exc

    def optimize(self) -> None:
        self.commit()
        try:
            self.ix.optimize()
        except Exception as exc:
            raise IndexWriteError(f"Failed to optimize: {exc}") from exc

    def query(
        self,
        expression: str,
        start: int = 0,
        rows: int = 20,
        fields: str = DEFAULT_FIELDS,
        filter: Optional[str] = None,
        facet_fields: Optional[Sequence[str]] = None,
        facet_limit: int = 0,
    ) -> ResultSet:
        names = [name.strip() for name in fields.split(",") if name.strip()]
        parser = QueryParser(DEFAULT_SEARCH_FIELD, schema=self.ix.schema)
        try:
            q = parser.parse(expression)
            fq = parser.parse(filter) if filter else None
            kwargs = {}
            if facet_fields:
                kwargs["groupedby"] = list(facet_fields)
                kwargs["maptype"] = sorting.Count
            with self.ix.searcher() as searcher:
                results = searcher.search(q, limit=max(start + rows, 1), filter=fq, **kwargs)
                hits = [_stored(hit, names) for hit in results[start:start + rows]]
                facets = {
                    name: _top_counts(results.groups(name), facet_limit)
                    for name in facet_fields or ()
                }
                total = len(results)
        except Exception as exc:
            raise QueryError(str(exc)) from exc
        return ResultSet(total=total, start=start, rows=rows, hits=hits, facets=facets)

    def close(self) -> None:
        if self._writer is not None:
            self._writer.cancel()
            self._writer = None
        self.ix.close()
