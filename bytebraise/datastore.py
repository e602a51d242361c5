"""The writable variable datastore."""

from __future__ import annotations

import copy
from typing import Any

from bytebraise.contents import ConcatEntry, as_string
from bytebraise.errors import DataSmartError
from bytebraise.lookup import (
    APPEND_FLAG,
    CONTENT_FLAG,
    DEFAULTVAL_FLAG,
    EXPORT_LIST_ITEM,
    PREPEND_FLAG,
    REMOVE_FLAG,
    SETVAR_REGEX,
    DataStoreBase,
    OverrideState,
)

_CONCAT_FLAGS = (APPEND_FLAG, PREPEND_FLAG, REMOVE_FLAG)


class DataSmart(DataStoreBase):
    """Variable datastore supporting assignment, flags, overrides and renames."""

    def set_var(self, var: str, value: Any, parsing: bool = False) -> None:
        """Set ``var`` to ``value``.

        Names ending in ``_append``, ``_prepend`` or ``_remove`` (optionally
        followed by ``_<override>``) queue a pending operation on the base name.
        Unless ``parsing`` is set, pending operations and active conditional
        forms of ``var`` are discarded.
        """
        match = SETVAR_REGEX.match(var)
        if match is not None:
            base = match.group("base")
            keyword = match.group("keyword")
            override = match.group("add")
            existing = self.get_var_flag(base, keyword, expand=False)
            entries = list(existing) if isinstance(existing, list) else []
            entries.append(ConcatEntry(value, override))
            self.set_var_flag(base, keyword, entries)
            self._setvar_update_overrides(base)
            self._setvar_update_overridevars(var, value)
            return

        if not parsing:
            flags = self._data.get(var)
            if flags is not None:
                for flag in _CONCAT_FLAGS:
                    flags.pop(flag, None)

            entries = self._per_var_override_data.get(var)
            if entries is not None:
                self.need_overrides()
                state = self._override_state
                active = [
                    entry.full_var
                    for entry in entries
                    if state.is_override_active(entry.override_str)
                ]
                for full_var in active:
                    self.del_var(full_var)
                self._per_var_override_data.remove(var)

        self._setvar_update_overrides(var)
        self.set_var_flag(var, CONTENT_FLAG, value)
        self._setvar_update_overridevars(var, value)

    def set_var_flag(self, var: str, flag: str, value: Any) -> None:
        """Set ``flag`` on ``var`` to ``value``."""
        self._find_or_create_var(var)[flag] = value

        if flag == DEFAULTVAL_FLAG:
            self._setvar_update_overrides(var)
            self._setvar_update_overridevars(var, value)
        elif flag in ("export", "unexport"):
            export_list = self._find_or_create_var(EXPORT_LIST_ITEM)
            export_list.setdefault(CONTENT_FLAG, set()).add(var)

    def del_var(self, var: str) -> None:
        """Delete ``var``; its name stays known but carries no flags."""
        self._data[var] = {}
        self._per_var_override_data.remove_overrides(var)

    def del_var_flag(self, var: str, flag: str) -> None:
        """Remove ``flag`` from ``var`` if present."""
        flags = self._data.get(var)
        if flags is not None:
            flags.pop(flag, None)

    def append_var(self, var: str, value: Any) -> None:
        """Queue ``value`` to be appended to ``var``."""
        self.set_var(f"{var}_append", value, True)

    def prepend_var(self, var: str, value: Any) -> None:
        """Queue ``value`` to be prepended to ``var``."""
        self.set_var(f"{var}_prepend", value, True)

    def rename_var(self, var: str, new_key: str) -> None:
        """Move ``var``, its pending operations and conditional forms to ``new_key``."""
        if var == new_key:
            return

        value = self.get_var(var, expand=False, parsing=True)
        if value is not None:
            self.set_var(new_key, value, True)

        for flag in _CONCAT_FLAGS:
            pending = self.get_var_flag(var, flag, expand=False)
            if pending is None:
                continue
            existing = self.get_var_flag(new_key, flag, expand=False)
            dest = list(existing) if isinstance(existing, list) else []
            dest.extend(pending)
            self.set_var_flag(new_key, flag, dest)

        entries = self._per_var_override_data.remove(var)
        for entry in entries or ():
            self.rename_var(entry.full_var, entry.full_var.replace(var, new_key))

        if value is None:
            self._setvar_update_overrides(new_key)

        self.del_var(var)

    def expand_varref(self, variable: str) -> None:
        """Replace ``${variable}`` by its unexpanded value in every stored value."""
        needle = f"${{{variable}}}"
        value = self.get_var(variable, expand=False)
        if value is None:
            raise DataSmartError(f"expand_varref: {variable} is not set")
        value = as_string(value)

        for key in list(self._data):
            referrer = self.get_var(key, expand=False)
            if isinstance(referrer, str) and needle in referrer:
                self.set_var(key, referrer.replace(needle, value), False)

    def create_copy(self) -> DataSmart:
        """Return an independent copy of this datastore."""
        other = DataSmart()
        other._data = copy.deepcopy(self._data)
        state = OverrideState()
        state.vars = set(self._override_state.vars)
        state.active_overrides = self._override_state.active_overrides
        other._override_state = state
        other._per_var_override_data = self._per_var_override_data.copy()
        return other

    def expand_keys(self) -> None:
        """Rename every variable whose name contains a reference to its expanded name."""
        expand_keys(self)

    def _setvar_update_overrides(self, var: str) -> None:
        self._per_var_override_data.record_overrides(var)

    def _setvar_update_overridevars(self, var: str, value: Any) -> None:
        state = self._override_state
        if not state.is_override_var(var):
            return

        vardata = self.expand_with_refs(as_string(value), var)
        new_refs = vardata.references | set(vardata.contains)
        while not new_refs <= state.vars:
            next_refs: set[str] = set()
            for ref in new_refs:
                ref_value = self.get_var(ref)
                if ref_value is not None:
                    refdata = self.expand_with_refs(as_string(ref_value), ref)
                    next_refs |= refdata.references
                    next_refs |= set(refdata.contains)
            new_refs = next_refs

        state.active_overrides = None


def expand_keys(data: DataSmart) -> None:
    """Rename variables with ``${...}`` in their names, in sorted order.

    Raises DataSmartError when the expanded name already holds a value.
    """
    todo = {key: data.expand(key) for key in data.keys() if "${" in key}

    for key in sorted(todo):
        expanded_key = todo[key]
        if (
            data.get_var(expanded_key, expand=False) is not None
            and data.get_var(key, expand=False) is not None
        ):
            raise DataSmartError(
                f"variable key {key} ({expanded_key}) replaces original key {expanded_key}"
            )
        data.rename_var(key, expanded_key)