"""Bookkeeping of conditional (override) forms of variables."""

from __future__ import annotations

import re
from dataclasses import dataclass

from bytebraise.utils import rsplit_all

OVERRIDE_REGEX = re.compile(r"[a-z0-9]+")


@dataclass(frozen=True)
class VarAndOverride:
    """A full conditional variable name and the override part of it."""

    full_var: str
    override_str: str


def decompose_variable(var: str) -> list[tuple[str, VarAndOverride]]:
    """Break a conditional variable into its shorter forms.

    ``VAR_foo_bar`` gives ``[("VAR_foo", (VAR_foo_bar, "bar")),
    ("VAR", (VAR_foo_bar, "foo_bar"))]``.
    """
    result = []
    for shortvar, override in rsplit_all(var, "_"):
        if not shortvar or not OVERRIDE_REGEX.search(override):
            break
        result.append((shortvar, VarAndOverride(var, override)))
    return result


class PerVarOverrideData:
    """Maps each variable to the full conditional forms that refer to it."""

    def __init__(self) -> None:
        self._data: dict[str, list[VarAndOverride]] = {}

    def record_overrides(self, var: str) -> None:
        """Register every shorter form of ``var``."""
        for shortvar, entry in decompose_variable(var):
            self._data.setdefault(shortvar, []).append(entry)

    def remove_overrides(self, var: str) -> None:
        """Forget ``var`` and the entries it contributed to shorter forms."""
        self._data.pop(var, None)
        for shortvar, entry in decompose_variable(var):
            entries = self._data.get(shortvar)
            if entries is not None and entry in entries:
                entries.remove(entry)

    def remove(self, var: str) -> list[VarAndOverride] | None:
        """Drop and return the entries recorded for ``var``."""
        return self._data.pop(var, None)

    def get(self, var: str) -> list[VarAndOverride] | None:
        """Return the entries recorded for ``var``, if any."""
        return self._data.get(var)

    def collect(self) -> list[tuple[str, VarAndOverride]]:
        """Return every (variable, entry) pair."""
        return [(var, entry) for var, entries in self._data.items() for entry in entries]

    def copy(self) -> PerVarOverrideData:
        """Return an independent copy."""
        other = PerVarOverrideData()
        other._data = {var: list(entries) for var, entries in self._data.items()}
        return other