import json

from geonames_search.config import DEFAULT_CONFIG, HarvestConfig, load_config, parse_codes


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(str(tmp_path / "missing.json")) == DEFAULT_CONFIG


def test_file_values_override_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"batch_size": 500, "country_boosts": ["AU"]}), encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg["batch_size"] == 500
    assert cfg["country_boosts"] == ["AU"]
    assert cfg["max_batches"] == 500


def test_parse_codes():
    assert parse_codes("AU,FR") == frozenset({"AU", "FR"})
    assert parse_codes(" AU , ,NZ") == frozenset({"AU", "NZ"})
    assert parse_codes("") == frozenset()
    assert parse_codes(None) == frozenset()


def test_harvest_config_defaults_exclude_alternate_names():
    config = HarvestConfig.from_settings(dict(DEFAULT_CONFIG))
    assert config.exclusions == frozenset({"alternate_names"})
    assert config.country_boosts == frozenset()
    assert config.batch_size == 20000
    assert config.max_batches == 500


def test_cli_overrides_win():
    cfg = dict(DEFAULT_CONFIG, with_alternate_names=False, country_boosts=["NZ"])
    config = HarvestConfig.from_settings(
        cfg, with_alternate_names=True, country_boosts={"AU"}, index_dir="/tmp/ix"
    )
    assert config.exclusions == frozenset()
    assert config.country_boosts == frozenset({"AU"})
    assert config.index_dir == "/tmp/ix"


def test_file_settings_used_without_overrides():
    cfg = dict(DEFAULT_CONFIG, with_alternate_names=True, country_boosts=["NZ"])
    config = HarvestConfig.from_settings(cfg)
    assert config.exclusions == frozenset()
    assert config.country_boosts == frozenset({"NZ"})
