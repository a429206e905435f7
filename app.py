import os
import sys

import streamlit as st

ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.append(ROOT)

from geonames_search.config import load_config  # noqa: E402
from geonames_search.errors import QueryError, StartupError  # noqa: E402
from geonames_search.index import GeoIndex  # noqa: E402
from geonames_search.render import select_renderer  # noqa: E402
from geonames_search.service import FACET_FIELDS, SearchService, search_expression  # noqa: E402


@st.cache_resource
def get_service(index_dir: str) -> SearchService:
    return SearchService(GeoIndex.open(index_dir))


st.set_page_config(page_title="GeoNames Search", layout="wide")

st.title("GeoNames Search")

cfg = load_config(os.path.join(ROOT, "config.json"))
params = st.query_params

with st.sidebar:
    st.header("Search Settings")
    index_dir = st.text_input("Index directory", value=os.path.join(ROOT, cfg["index_dir"]))
    field = st.selectbox("Field", ["basic_name", "alternate_names"], index=0)
    rows = st.number_input("Rows", min_value=1, max_value=100, value=int(cfg.get("rows", 20)))
    fq = st.text_input("Filter query", value=params.get("fq", ""), help="e.g. country_code:AU")
    debug = st.checkbox("Debug (facets and query)", value=params.get("func") == "debug")

q = st.text_input("Place name", value=params.get("q", ""))

try:
    service = get_service(index_dir)
except StartupError as exc:
    st.error(str(exc))
    st.stop()

query = search_expression(q, field)
with st.spinner("Searching..."):
    try:
        result = service.run_query(query, 0, int(rows), fq or None, FACET_FIELDS if debug else None)
    except QueryError as exc:
        st.error(f"Search failed: {exc}")
        st.stop()

if debug:
    st.code(query)
    cols = st.columns(len(result.facets) or 1)
    for col, (name, counts) in zip(cols, result.facets.items()):
        with col:
            st.caption(name)
            st.dataframe([{"value": v, "count": c} for v, c in counts], use_container_width=True)

st.subheader(f"Results ({result.total})")
for rank, hit in enumerate(result.hits, start=1):
    st.markdown(
        f"**{rank:02d}. {hit.get('utf8_name', '')}** [{hit.get('country_code', '')}]"
        f" {hit.get('feature_code', '')} | score: `{hit.get('score', 0.0):.4f}`"
    )
    st.caption(f"{hit.get('latitude', '')}, {hit.get('longitude', '')} | {hit.get('timezone', '')}")
    with st.expander("Details"):
        st.json(hit)

with st.expander("JSON response"):
    renderer = select_renderer("json", "search")
    st.code(renderer.render_response({"q": q, "query": query}, result), language="json")
