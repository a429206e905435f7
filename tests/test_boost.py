import itertools

import pytest

from geonames_search.boost import compute_boost


def test_no_rule_applies():
    assert compute_boost({"country_code": "FR", "feature_code": "MT"}, frozenset({"AU"})) == 1.0


def test_country_only():
    assert compute_boost({"country_code": "AU", "feature_code": "MT"}, frozenset({"AU", "NZ"})) == 5.0


def test_populated_place_only():
    assert compute_boost({"country_code": "FR", "feature_code": "PPLC"}, frozenset()) == 2.0


def test_both_rules_in_any_order():
    record = {"country_code": "AU", "feature_code": "PPL"}
    for order in itertools.permutations(["country_code", "feature_code"]):
        ordered = {key: record[key] for key in order}
        assert compute_boost(ordered, frozenset({"AU"})) == 10.0


def test_empty_boost_list_never_matches():
    assert compute_boost({"country_code": "", "feature_code": "H"}, frozenset()) == 1.0


@pytest.mark.parametrize("code", ["ppl", "XPPL", "", None])
def test_prefix_is_case_sensitive_and_anchored(code):
    assert compute_boost({"country_code": "FR", "feature_code": code}) == 1.0
