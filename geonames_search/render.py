"""Response rendering for the search service.

One renderer exists per (format, func) pair the service accepts; anything
else falls back to the HTML search page.
"""

from __future__ import annotations

import html
import json
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .index import ResultSet

JSON = "json"
HTML = "html"

SUMMARY_FIELDS = ("id", "utf8_name", "country_code", "feature_code", "latitude", "longitude", "population")


def _dumps(payload) -> str:
    return json.dumps(payload, ensure_ascii=False, default=str)


def _json_search(context: Dict, result: ResultSet) -> str:
    return _dumps(
        {
            "query": context.get("q", ""),
            "totalResults": result.total,
            "startIndex": result.start,
            "itemsPerPage": result.rows,
            "results": result.hits,
        }
    )


def _json_search_empty(context: Dict) -> str:
    return _json_search(context, ResultSet(total=0, start=context.get("start", 0), rows=context.get("rows", 0)))


def _json_detail(context: Dict, result: ResultSet) -> str:
    return _dumps({"result": result.hits[0] if result.hits else None})


def _json_detail_empty(context: Dict) -> str:
    return _dumps({"result": None})


def _json_error(message: str) -> str:
    return _dumps({"error": message})


def _page(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html>\n<html><head><meta charset=\"utf-8\">"
        f"<title>{html.escape(title)}</title></head>\n<body>\n{body}\n</body></html>"
    )


def _table(rows, columns) -> str:
    head = "".join(f"<th>{html.escape(c)}</th>" for c in columns)
    body = []
    for row in rows:
        cells = "".join(f"<td>{html.escape(str(row.get(c, '')))}</td>" for c in columns)
        body.append(f"<tr>{cells}</tr>")
    return f"<table>\n<tr>{head}</tr>\n" + "\n".join(body) + "\n</table>"


def _html_search(context: Dict, result: ResultSet) -> str:
    columns = SUMMARY_FIELDS + ("score",)
    summary = (
        f"<p>{result.total} results for '{html.escape(context.get('q', ''))}',"
        f" showing {result.start + 1} to {result.start + len(result.hits)}</p>"
    )
    return _page("Place search", summary + "\n" + _table(result.hits, columns))


def _html_search_empty(context: Dict) -> str:
    return _page("Place search", f"<p>No results for '{html.escape(context.get('q', ''))}'</p>")


def _html_debug(context: Dict, result: ResultSet) -> str:
    parts = [
        f"<pre>{html.escape(context.get('query', ''))}</pre>",
        _table(result.hits, SUMMARY_FIELDS + ("basic_name_str", "basic_name_rev", "score")),
    ]
    for name, counts in result.facets.items():
        items = "".join(
            f"<li>{html.escape(str(value))} ({count})</li>" for value, count in counts
        )
        parts.append(f"<h3>{html.escape(name)}</h3>\n<ul>{items}</ul>")
    return _page("Place search debug", "\n".join(parts))


def _html_detail(context: Dict, result: ResultSet) -> str:
    hit = result.hits[0]
    rows = "".join(
        f"<tr><th>{html.escape(k)}</th><td>{html.escape(str(v))}</td></tr>"
        for k, v in hit.items()
    )
    return _page(str(hit.get("utf8_name", "Place")), f"<table>{rows}</table>")


def _html_detail_empty(context: Dict) -> str:
    return _page("Place not found", f"<p>No place with id '{html.escape(context.get('id', ''))}'</p>")


def _html_error(message: str) -> str:
    return _page("Error", f"<pre>{html.escape(message)}</pre>")


@dataclass(frozen=True)
class Renderer:
    name: str
    content_type: str
    render_response: Callable[[Dict, ResultSet], str]
    render_empty: Callable[[Dict], str]
    render_error: Callable[[str], str]


JSON_TYPE = "application/json; charset=utf-8"
HTML_TYPE = "text/html; charset=utf-8"

RENDERERS: Dict[Tuple[str, str], Renderer] = {
    (JSON, "search"): Renderer("json-search", JSON_TYPE, _json_search, _json_search_empty, _json_error),
    (JSON, "detail"): Renderer("json-detail", JSON_TYPE, _json_detail, _json_detail_empty, _json_error),
    (HTML, "search"): Renderer("html-search", HTML_TYPE, _html_search, _html_search_empty, _html_error),
    (HTML, "debug"): Renderer("html-debug", HTML_TYPE, _html_debug, _html_search_empty, _html_error),
    (HTML, "detail"): Renderer("html-detail", HTML_TYPE, _html_detail, _html_detail_empty, _html_error),
}


def select_renderer(fmt: Optional[str], func: Optional[str]) -> Renderer:
    """JSON has no debug page; unknown formats and functions render as HTML search."""
    fmt = JSON if fmt == JSON else HTML
    if func == "detail":
        return RENDERERS[(fmt, "detail")]
    if fmt == HTML and func == "debug":
        return RENDERERS[(HTML, "debug")]
    return RENDERERS[(fmt, "search")]
