import json
import os
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional


DEFAULT_CONFIG = {
    "index_dir": "data/index",
    "download_dir": "data",
    "batch_size": 20000,
    "max_batches": 500,
    "rows": 20,
    "writer_limitmb": 256,
    "country_boosts": [],
    "with_alternate_names": False,
}


def load_config(path: str) -> Dict:
    if not os.path.exists(path):
        return dict(DEFAULT_CONFIG)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    cfg = dict(DEFAULT_CONFIG)
    cfg.update(data)
    return cfg


def parse_codes(value: Optional[str]) -> FrozenSet[str]:
    if not value:
        return frozenset()
    return frozenset(code.strip() for code in value.split(",") if code.strip())


@dataclass(frozen=True)
class HarvestConfig:
    index_dir: str
    batch_size: int = 20000
    max_batches: int = 500
    writer_limitmb: int = 256
    country_boosts: FrozenSet[str] = frozenset()
    exclusions: FrozenSet[str] = field(default_factory=lambda: frozenset({"alternate_names"}))

    @classmethod
    def from_settings(
        cls,
        cfg: Dict,
        with_alternate_names: Optional[bool] = None,
        country_boosts: Optional[Iterable[str]] = None,
        index_dir: Optional[str] = None,
    ) -> "HarvestConfig":
        """Merge CLI overrides over the loaded config file."""
        if with_alternate_names is None:
            with_alternate_names = bool(cfg.get("with_alternate_names", False))
        if country_boosts is None:
            country_boosts = cfg.get("country_boosts") or []
        exclusions = frozenset() if with_alternate_names else frozenset({"alternate_names"})
        return cls(
            index_dir=index_dir or cfg["index_dir"],
            batch_size=int(cfg.get("batch_size", 20000)),
            max_batches=int(cfg.get("max_batches", 500)),
            writer_limitmb=int(cfg.get("writer_limitmb", 256)),
            country_boosts=frozenset(country_boosts),
            exclusions=exclusions,
        )
