"""Column layout of the GeoNames tab-delimited dump."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

DELIMITER = "\t"

# Column 9 holds secondary country codes and 10-13 the admin codes;
# neither is indexed.
COLUMNS: Tuple[Tuple[str, int], ...] = (
    ("id", 0),
    ("utf8_name", 1),
    ("basic_name", 2),
    ("alternate_names", 3),
    ("latitude", 4),
    ("longitude", 5),
    ("feature_class", 6),
    ("feature_code", 7),
    ("country_code", 8),
    ("population", 14),
    ("elevation", 15),
    ("gtopo30", 16),
    ("timezone", 17),
    ("date_modified", 18),
)
SKIPPED_COLUMNS = frozenset({9, 10, 11, 12, 13})

FIELD_NAMES: Tuple[str, ...] = tuple(name for name, _ in COLUMNS)
_INDEX: Dict[str, int] = dict(COLUMNS)


def split_record(line: str) -> List[str]:
    return line.rstrip("\r\n").split(DELIMITER)


def resolve(fields: Sequence[str], name: str) -> Optional[str]:
    """Return the value stored in the column mapped to ``name``.

    Unknown names are a programming error: they are logged and ``None`` is
    returned. A row too short for the column raises ``IndexError``.
    """
    index = _INDEX.get(name)
    if index is None:
        logger.error("Field does not exist: %s", name)
        return None
    return fields[index]


def is_empty(value: Optional[str]) -> bool:
    """GeoNames leaves blanks as empty strings or a single space."""
    return value is None or value == "" or value == " "


def parse_record(fields: Sequence[str]) -> Dict[str, Optional[str]]:
    """Map every schema field to its value, ``None`` past the end of the row."""
    return {
        name: fields[index] if index < len(fields) else None
        for name, index in COLUMNS
    }


def format_record(fields: Sequence[str]) -> str:
    return "\n".join(
        f"{name:>17} => {value!s:>20}" for name, value in parse_record(fields).items()
    )
