"""
Type Mapper

Maps the free-text type column of a sheet ("numeric(5,2)", "VARCHAR(50)",
"int", "") onto a NormalizedType. Never raises: anything unrecognized
degrades to a fallback scalar named after the token.
"""

import re
from typing import Optional

from ..model.schema_model import NormalizedType, TypeKind

DEFAULT_TYPE = "varchar"

_PRECISION_SCALE = re.compile(r"\(\s*(\d+)\s*(?:,\s*(\d+)\s*)?\)")
_INTEGER_FAMILY = re.compile(r"^(smallint|integer|int)\b")


def map_type(raw: Optional[str]) -> NormalizedType:
    """Map a raw type token to a NormalizedType (first matching rule wins)."""
    token = "" if raw is None else str(raw).strip()
    lower = token.lower()

    if not lower:
        return NormalizedType(kind=TypeKind.TEXT, name=DEFAULT_TYPE, raw=DEFAULT_TYPE)

    if lower.startswith("numeric") or lower.startswith("decimal"):
        precision = scale = None
        match = _PRECISION_SCALE.search(lower)
        if match:
            precision = int(match.group(1))
            scale = int(match.group(2)) if match.group(2) is not None else 0
        return NormalizedType(
            kind=TypeKind.NUMERIC,
            name=_base_name(lower),
            raw=token,
            precision=precision,
            scale=scale,
        )

    if lower.startswith("bigint"):
        return NormalizedType(kind=TypeKind.BIGINT, name="bigint", raw=token)

    match = _INTEGER_FAMILY.match(lower)
    if match:
        return NormalizedType(kind=TypeKind.INTEGER, name=match.group(1), raw=token)

    if "char" in lower or lower == "text":
        return NormalizedType(kind=TypeKind.TEXT, name=_base_name(lower), raw=token)

    if lower.startswith("timestamp") or lower.startswith("datetime"):
        return NormalizedType(kind=TypeKind.TIMESTAMP, name="timestamp", raw=token)

    if lower.startswith("date"):
        return NormalizedType(kind=TypeKind.DATE, name="date", raw=token)

    if lower.startswith("bool"):
        return NormalizedType(kind=TypeKind.BOOLEAN, name="boolean", raw=token)

    if lower.startswith("money"):
        return NormalizedType(kind=TypeKind.MONEY, name="money", raw=token)

    return NormalizedType(
        kind=TypeKind.OTHER,
        name=_base_name(lower) or DEFAULT_TYPE,
        raw=token,
        recognized=False,
    )


def _base_name(lower: str) -> str:
    """Token text up to the first parenthesis."""
    return lower.split("(")[0].strip()
