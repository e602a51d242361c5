"""State gathered while expanding a value."""

from __future__ import annotations

import re
from typing import Any

from bytebraise.errors import DataConversionError, RecursiveReferenceError


class VariableParse:
    """Records the variables referenced while expanding one value."""

    def __init__(self, name: str | None, d: Any) -> None:
        self.name = name
        self.value: str | None = None
        self.d = d
        self.references: set[str] = set()
        self.removes: set[str] | None = None
        self.execs: set[str] = set()
        self.contains: dict[str, str] = {}

    def __repr__(self) -> str:
        return (
            f"VariableParse(name={self.name!r}, value={self.value!r}, "
            f"references={self.references!r}, removes={self.removes!r})"
        )

    def var_sub(self, match: re.Match[str]) -> str:
        """Return the replacement for a ``${VAR}`` match.

        An undefined variable leaves the reference as it is.
        """
        match_str = match.group(0)
        referenced = match_str[2:-1]
        if self.name is not None and self.name == referenced:
            raise RecursiveReferenceError(self.name)
        self.references.add(referenced)
        value = self.d.get_var(referenced)
        if value is None:
            return match_str
        if not isinstance(value, str):
            raise DataConversionError("Non-string value")
        return value