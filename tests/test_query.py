from geonames_search.query import DEFAULT_QUERY, build_weighted_query


def test_alternate_names_query():
    assert build_weighted_query("x", "alternate_names") == (
        "((alternate_names:(x*) OR alternate_names:(x)))^0.2 AND boost:boost^10"
    )


def test_tiered_query_for_basic_name():
    query = build_weighted_query("paris", "basic_name")
    tier_a = "((basic_name_str:(paris*) AND basic_name_rev:(sirap*)) OR utf8_name:(paris))^10"
    tier_b = "(basic_name_str:(paris*) OR utf8_name:(paris*))^4"
    tier_c = (
        "(basic_name:(paris*) OR basic_name:(paris)"
        " OR alternate_names:(paris*) OR alternate_names:(paris))"
    )
    assert query == f"({tier_a} OR {tier_b} OR {tier_c})^0.2 AND boost:boost^10"


def test_default_field_is_basic_name():
    assert build_weighted_query("lyon") == build_weighted_query("lyon", "basic_name")


def test_other_fields_use_tiers():
    assert build_weighted_query("lyon", "utf8_name") == build_weighted_query("lyon")


def test_unicode_reversal():
    assert "basic_name_rev:(ōykōt*)" in build_weighted_query("tōkyō")


def test_boost_weight():
    assert build_weighted_query("x", "alternate_names", boost_weight=3).endswith("AND boost:boost^3")
    assert DEFAULT_QUERY == "boost:boost^10"


def test_term_is_not_escaped():
    query = build_weighted_query("a) OR id:(1", "alternate_names")
    assert "alternate_names:(a) OR id:(1*)" in query
