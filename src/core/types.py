"""Shared type aliases and coercion helpers used across the core modules."""
from __future__ import annotations

import math
from typing import Annotated, Any, Iterable, Mapping, Optional

from pydantic import Field

FiniteFloat = Annotated[float, Field(allow_inf_nan=False)]
PositiveInt = Annotated[int, Field(ge=1)]


def ensure_number(value: Any, fallback: Optional[float] = None) -> Optional[float]:
    """Return ``value`` as a finite float, parsing numeric strings, else ``fallback``."""

    if isinstance(value, bool):
        return fallback
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return fallback
        return number if math.isfinite(number) else fallback
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return fallback
        return number if math.isfinite(number) else fallback
    return fallback


def first_present(data: Mapping[str, Any], keys: Iterable[str]) -> Any:
    """Return the first value under ``keys`` that is not ``None``."""

    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def as_text(value: Any) -> Optional[str]:
    """Render scalars as text; containers and ``None`` have no text form."""

    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    return None


def first_text(data: Mapping[str, Any], keys: Iterable[str]) -> Optional[str]:
    """Return the first non-blank string found under ``keys``."""

    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None
