import pytest

from geonames_search.config import HarvestConfig
from geonames_search.index import GeoIndex

DEFAULT_ROW = {
    0: "2147714",
    1: "Sydney",
    2: "Sydney",
    3: "Sidney,Sydney,Sidnej",
    4: "-33.86785",
    5: "151.20732",
    6: "P",
    7: "PPLA",
    8: "AU",
    9: "",
    10: "02",
    11: "17200",
    12: "",
    13: "",
    14: "4627345",
    15: "",
    16: "58",
    17: "Australia/Sydney",
    18: "2012-03-01",
}


def make_row(**columns):
    """A 19 column row; override columns by position, e.g. ``c7="PPL"``."""
    row = dict(DEFAULT_ROW)
    for key, value in columns.items():
        row[int(key[1:])] = value
    return [row[i] for i in range(19)]


def make_line(**columns):
    return "\t".join(make_row(**columns)) + "\n"


@pytest.fixture
def harvest_config(tmp_path):
    return HarvestConfig(index_dir=str(tmp_path / "index"), batch_size=2, max_batches=500)


@pytest.fixture
def geo_index(tmp_path):
    ix = GeoIndex.open(str(tmp_path / "index"), create=True)
    yield ix
    ix.close()
