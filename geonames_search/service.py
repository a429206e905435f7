"""Search request handling, independent of any web framework."""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import QueryError
from .index import DEFAULT_FIELDS, ResultSet
from .query import DEFAULT_FIELD, DEFAULT_QUERY, build_weighted_query
from .render import Renderer, select_renderer

logger = logging.getLogger(__name__)

DEFAULT_START = 0
DEFAULT_ROWS = 20
FACET_FIELDS = ("country_code", "feature_class", "feature_code")
FACET_LIMIT = 100


@dataclass(frozen=True)
class Response:
    status: int
    content_type: str
    body: str


def _param(params: Mapping[str, str], name: str) -> Optional[str]:
    value = params.get(name)
    if value is None or value == "":
        return None
    return value


def search_expression(q: Optional[str], field: Optional[str] = None) -> str:
    """Query string for a raw ``q`` parameter."""
    if not q:
        return DEFAULT_QUERY
    return build_weighted_query(html.unescape(q).lower(), field or DEFAULT_FIELD)


class SearchService:
    def __init__(self, index, default_rows: int = DEFAULT_ROWS):
        self.index = index
        self.default_rows = default_rows

    def handle(self, params: Mapping[str, str]) -> Response:
        func = _param(params, "func")
        renderer = select_renderer(_param(params, "format"), func)
        if func == "detail":
            return self.detail(params, renderer)
        if func in ("search", "debug"):
            return self.search(params, renderer)
        return Response(400, renderer.content_type, renderer.render_error("No 'func' parameter was supplied"))

    def detail(self, params: Mapping[str, str], renderer: Renderer) -> Response:
        place_id = _param(params, "id")
        if place_id is None:
            return Response(
                400, renderer.content_type, renderer.render_error("A detail query requires an 'id' parameter.")
            )
        context = {"id": place_id}
        try:
            result = self.index.query(f"id:{place_id}", 0, 1, DEFAULT_FIELDS)
        except QueryError as exc:
            return self._failure(renderer, exc)
        if result.is_empty():
            return Response(404, renderer.content_type, renderer.render_empty(context))
        return Response(200, renderer.content_type, renderer.render_response(context, result))

    def search(self, params: Mapping[str, str], renderer: Renderer) -> Response:
        q = _param(params, "q") or ""
        query = search_expression(q, _param(params, "f"))
        try:
            start = int(_param(params, "start") or DEFAULT_START)
            rows = int(_param(params, "rows") or self.default_rows)
            if start < 0 or rows < 0:
                raise ValueError(f"start and rows must not be negative, got {start} and {rows}")
        except ValueError as exc:
            return Response(400, renderer.content_type, renderer.render_error(f"Invalid paging parameter: {exc}"))

        context = {"q": q, "query": query, "start": start, "rows": rows}
        facets = FACET_FIELDS if params.get("func") == "debug" else None
        try:
            result = self.run_query(query, start, rows, _param(params, "fq"), facets)
        except QueryError as exc:
            return self._failure(renderer, exc)
        if result.is_empty():
            return Response(200, renderer.content_type, renderer.render_empty(context))
        return Response(200, renderer.content_type, renderer.render_response(context, result))

    def run_query(self, query: str, start: int, rows: int, fq: Optional[str] = None, facets=None) -> ResultSet:
        return self.index.query(
            query,
            start,
            rows,
            DEFAULT_FIELDS,
            fq,
            list(facets) if facets else None,
            FACET_LIMIT if facets else 0,
        )

    def _failure(self, renderer: Renderer, exc: QueryError) -> Response:
        logger.error("Query failed: %s", exc)
        return Response(500, renderer.content_type, renderer.render_error(f"An error occurred searching:\n{exc}"))
