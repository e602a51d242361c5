"""Helpers for the values stored in the datastore.

Values are plain Python objects: strings, booleans, ``None``, lists, sets,
dicts, and ``ConcatEntry`` records for pending append, prepend and remove
operations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from bytebraise.errors import DataConversionError
from bytebraise.utils import split_filter_empty


@dataclass(frozen=True)
class ConcatEntry:
    """A pending append/prepend/remove value and the override it applies under."""

    value: Any
    override: str | None = None


def as_string(value: Any) -> str:
    """Return ``value`` if it is a string, else raise DataConversionError."""
    if isinstance(value, str):
        return value
    raise DataConversionError()


def as_string_or_empty(value: Any) -> str:
    """Return ``value`` if it is a string, else the empty string."""
    return value if isinstance(value, str) else ""


def split_filter_empty_collect(value: Any, separator: str) -> list[str]:
    """Split a string value at ``separator`` dropping empty parts; [] otherwise."""
    if not isinstance(value, str):
        return []
    return list(split_filter_empty(value, separator))