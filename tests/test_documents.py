import pytest

from conftest import make_row
from geonames_search.documents import BOOST_FIELD, build_document
from geonames_search.errors import DocumentBuildError

NO_ALT = frozenset({"alternate_names"})


def test_builds_all_non_empty_fields():
    result = build_document(make_row(), exclusions=frozenset())
    assert result.ok
    doc = result.document
    assert doc.first("id") == "2147714"
    assert doc.first("utf8_name") == "Sydney"
    assert doc.first("latitude") == "-33.86785"
    assert doc.first("population") == "4627345"
    # elevation is blank in the row
    assert "elevation" not in doc.fields
    assert doc.get(BOOST_FIELD) == ("boost",)


def test_date_modified_gets_midnight_suffix():
    doc = build_document(make_row(c18="2012-03-01")).document
    assert doc.first("date_modified") == "2012-03-01T00:00:00Z"


def test_basic_name_derived_fields():
    doc = build_document(make_row(c1="Le Havre", c2="Le Havre")).document
    assert doc.first("basic_name_str") == "le havre"
    assert doc.first("basic_name_rev") == "ervah el"


@pytest.mark.parametrize("blank", ["", " "])
def test_empty_basic_name_falls_back_to_utf8_name(blank):
    doc = build_document(make_row(c1="Tōkyō", c2=blank)).document
    assert doc.first("basic_name") == "Tōkyō"
    assert doc.first("basic_name_str") == "tōkyō"
    assert doc.first("basic_name_rev") == "ōykōt"


def test_derived_fields_written_when_both_names_empty():
    doc = build_document(make_row(c1="", c2="")).document
    assert doc.get("basic_name_str") == ("",)
    assert doc.get("basic_name_rev") == ("",)
    assert "basic_name" not in doc.fields
    assert "utf8_name" not in doc.fields


def test_alternate_names_are_multi_valued():
    doc = build_document(make_row(c3="Foo,Bar,Baz"), exclusions=frozenset()).document
    assert doc.get("alternate_names") == ("Foo", "Bar", "Baz")


def test_alternate_names_excluded():
    doc = build_document(make_row(c3="Foo,Bar,Baz"), exclusions=NO_ALT).document
    assert "alternate_names" not in doc.fields


def test_boost_factor():
    row = make_row(c7="PPLC", c8="AU")
    assert build_document(row, country_boosts=frozenset({"AU"})).document.boost == 10.0
    assert build_document(row, country_boosts=frozenset({"FR"})).document.boost == 2.0
    assert build_document(make_row(c7="MT", c8="FR")).document.boost == 1.0


def test_excluding_country_code_still_boosts():
    doc = build_document(
        make_row(c7="MT", c8="AU"),
        exclusions=frozenset({"country_code"}),
        country_boosts=frozenset({"AU"}),
    ).document
    assert "country_code" not in doc.fields
    assert doc.boost == 5.0


def test_document_is_read_only():
    doc = build_document(make_row()).document
    with pytest.raises(TypeError):
        doc.fields["id"] = ("1",)


def test_short_row_returns_error_instead_of_raising():
    result = build_document(["123", "Broken", "Broken"])
    assert not result.ok
    assert result.document is None
    assert isinstance(result.error, DocumentBuildError)
    assert isinstance(result.error.__cause__, IndexError)
    assert result.error.record == ["123", "Broken", "Broken"]
