"""Reading, expanding and override resolution for the variable datastore."""

from __future__ import annotations

import re
from typing import Any

from bytebraise.contents import (
    ConcatEntry,
    as_string,
    split_filter_empty_collect,
)
from bytebraise.errors import DataSmartError, RecursiveReferenceError
from bytebraise.overrides import PerVarOverrideData
from bytebraise.utils import split_filter_empty, split_keep
from bytebraise.variable_parse import VariableParse

VAR_EXPANSION_REGEX = re.compile(r"\$\{[a-zA-Z0-9\-_+./~]+?\}")
SETVAR_REGEX = re.compile(
    r"^(?P<base>.*?)(?P<keyword>_append|_prepend|_remove)(?:_(?P<add>[^A-Z]*))?$"
)
WHITESPACE_REGEX = re.compile(r"\s")

CONTENT_FLAG = "_content"
DEFAULTVAL_FLAG = "_defaultval"
EXPORT_LIST_ITEM = "__exportlist"
APPEND_FLAG = "_append"
PREPEND_FLAG = "_prepend"
REMOVE_FLAG = "_remove"

# Variables whose references are not tracked for recursion detection.
_UNTRACKED_REFERENCES = frozenset({"TOOLCHAIN", "RUNTIME"})
_OVERRIDE_ITERATIONS = 5


class OverrideState:
    """Which variables feed OVERRIDES, and the currently active overrides."""

    def __init__(self) -> None:
        self.vars: set[str] = {"OVERRIDES", "FILE"}
        self.active_overrides: tuple[str, ...] | None = None

    def __repr__(self) -> str:
        return f"OverrideState(vars={self.vars!r}, active_overrides={self.active_overrides!r})"

    def is_override_var(self, var: str) -> bool:
        """Return True if ``var`` affects the value of OVERRIDES."""
        return var in self.vars

    def is_override_active(self, override_str: str) -> bool:
        """Return True if ``override_str`` (possibly ``a_b`` combined) is active."""
        if not override_str:
            return True
        active = self.active_overrides
        if active is None:
            return False
        if override_str in active:
            return True
        if "_" in override_str:
            parts = set(split_filter_empty(override_str, "_"))
            if parts <= set(active):
                return True
        return False


def _ordered_unique(items: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


class DataStoreBase:
    """Variable storage with read access, expansion and override resolution."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}
        self._per_var_override_data = PerVarOverrideData()
        self._override_state = OverrideState()
        self._inside_need_overrides = False
        self._expand_visited: set[str] | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"

    def _find_var(self, var: str) -> dict[str, Any] | None:
        return self._data.get(var)

    def _find_or_create_var(self, var: str) -> dict[str, Any]:
        return self._data.setdefault(var, {})

    def keys(self) -> list[str]:
        """Return stored variable names plus names reachable via active overrides."""
        self.need_overrides()
        state = self._override_state
        overrides = {
            var
            for var, entry in self._per_var_override_data.collect()
            if state.is_override_active(entry.override_str)
        }
        result = [key for key in self._data if key not in overrides]
        result.extend(overrides)
        return result

    def expand_with_refs(self, text: str | None, var: str | None = None) -> VariableParse:
        """Expand ``${VAR}`` references in ``text``, recording what was referenced."""
        parser = VariableParse(var, self)
        if text is None:
            return parser

        owner = self._expand_visited is None
        if owner:
            self._expand_visited = set()
        try:
            visited = self._expand_visited

            def substitute(match: re.Match[str]) -> str:
                referenced = match.group(0)[2:-1]
                if referenced in visited:
                    raise RecursiveReferenceError(referenced)
                if referenced not in _UNTRACKED_REFERENCES:
                    visited.add(referenced)
                try:
                    return parser.var_sub(match)
                finally:
                    visited.discard(referenced)

            value = text
            while "${" in value:
                new_value = VAR_EXPANSION_REGEX.sub(substitute, value)
                if new_value == value:
                    break
                value = new_value
            parser.value = value
            return parser
        finally:
            if owner:
                self._expand_visited = None

    def expand(self, text: str, varname: str | None = None) -> str | None:
        """Return ``text`` with variable references expanded."""
        return self.expand_with_refs(text, varname).value

    def get_var(
        self,
        var: str,
        *,
        expand: bool = True,
        no_weak_default: bool = False,
        parsing: bool = False,
    ) -> Any:
        """Return the value of ``var``, or None if it is unset."""
        return self.get_var_flag(
            var,
            CONTENT_FLAG,
            expand=expand,
            no_weak_default=no_weak_default,
            parsing=parsing,
        )

    def get_var_flag(
        self,
        var: str,
        flag: str,
        *,
        expand: bool = True,
        no_weak_default: bool = False,
        parsing: bool = False,
    ) -> Any:
        """Return the value of ``flag`` on ``var``, or None if it is unset."""
        result = self._lookup(var, flag, expand, no_weak_default, parsing, want_parser=False)
        return None if result is None else result[0]

    def get_var_flag_with_parser(
        self,
        var: str,
        flag: str,
        *,
        expand: bool = True,
        no_weak_default: bool = False,
        parsing: bool = False,
    ) -> tuple[Any, VariableParse] | None:
        """Return ``(value, parser)`` for ``flag`` on ``var``, or None if unset."""
        return self._lookup(var, flag, expand, no_weak_default, parsing, want_parser=True)

    def get_var_flags(
        self,
        var: str,
        expand: set[str] | None = None,
        internal_flags: bool = False,
    ) -> dict[str, Any]:
        """Return the flags of ``var``; internal (``_``-prefixed) ones only on request."""
        var_flags = self._find_var(var)
        if var_flags is None:
            return {}
        result: dict[str, Any] = {}
        for flag, data in var_flags.items():
            if not internal_flags and flag.startswith("_"):
                continue
            if expand is not None and flag in expand:
                result[flag] = self.expand(flag, f"[{flag}]")
            else:
                result[flag] = data
        return result

    def need_overrides(self) -> None:
        """Compute the active overrides from OVERRIDES until they are stable."""
        if self._inside_need_overrides:
            return
        self._inside_need_overrides = True
        try:
            state = self._override_state
            if state.active_overrides is not None:
                return
            for _ in range(_OVERRIDE_ITERATIONS):
                state.active_overrides = _ordered_unique(
                    split_filter_empty_collect(self.get_var("OVERRIDES"), ":")
                )
                new_set = _ordered_unique(
                    split_filter_empty_collect(self.get_var("OVERRIDES"), ":")
                )
                if set(state.active_overrides) == set(new_set):
                    return
                state.active_overrides = new_set
            raise DataSmartError("OVERRIDES did not stabilise")
        finally:
            self._inside_need_overrides = False

    def _most_specific_override(self, var_overrides: list) -> str | None:
        state = self._override_state
        active = state.active_overrides
        if active is None:
            return None
        mapping: dict[str, str] = {
            entry.override_str: entry.full_var
            for entry in var_overrides
            if state.is_override_active(entry.override_str)
        }
        the_match = None
        modified = True
        while modified:
            modified = False
            for override in active:
                suffix = f"_{override}"
                for key in list(mapping):
                    if key not in mapping:
                        continue
                    if key.endswith(suffix):
                        full_var = mapping.pop(key)
                        # Only the trailing occurrence is stripped.
                        mapping[key[: -len(suffix)]] = full_var
                        modified = True
                    elif key == override:
                        the_match = mapping.pop(key)
        return the_match

    def _active_entries(self, entries: list[ConcatEntry]) -> list[ConcatEntry]:
        state = self._override_state
        return [entry for entry in entries if state.is_override_active(entry.override or "")]

    def _lookup(
        self,
        var: str,
        flag: str,
        expand: bool,
        no_weak_default: bool,
        parsing: bool,
        want_parser: bool,
    ) -> tuple[Any, VariableParse | None] | None:
        if not flag:
            return None

        is_content = flag == CONTENT_FLAG
        cache_name = var if is_content else f"{var}[{flag}]"
        value: Any = None
        removes: set[str] = set()

        var_overrides = self._per_var_override_data.get(var)
        if var_overrides and is_content and not parsing:
            self.need_overrides()
            the_match = self._most_specific_override(list(var_overrides))
            if the_match is not None:
                found = self.get_var_flag_with_parser(the_match, CONTENT_FLAG, expand=False)
                if found is not None:
                    value, subparser = found
                    removes = set(subparser.removes or ())

        var_flags = self._find_var(var)
        if var_flags is not None:
            if value is None:
                if flag in var_flags:
                    value = var_flags[flag]
                elif is_content and DEFAULTVAL_FLAG in var_flags and not no_weak_default:
                    value = var_flags[DEFAULTVAL_FLAG]

            if is_content and not parsing:
                if APPEND_FLAG in var_flags:
                    if value is None:
                        value = ""
                    self.need_overrides()
                    for entry in self._active_entries(var_flags[APPEND_FLAG]):
                        value = as_string(value) + as_string(entry.value)
                if PREPEND_FLAG in var_flags:
                    if value is None:
                        value = ""
                    self.need_overrides()
                    for entry in self._active_entries(var_flags[PREPEND_FLAG]):
                        value = as_string(entry.value) + as_string(value)

        parser: VariableParse | None = None
        if expand or want_parser:
            text = None if value is None else as_string(value)
            parser = self.expand_with_refs(text, cache_name)
        if expand:
            value = parser.value

        if value is not None and var_flags is not None and is_content and not parsing:
            if REMOVE_FLAG in var_flags:
                self.need_overrides()
                for entry in self._active_entries(var_flags[REMOVE_FLAG]):
                    removes.add(as_string(entry.value))

        if value is not None and parser is not None and removes and is_content and not parsing:
            expanded_removes = {item: (self.expand(item) or "").split() for item in removes}
            parser.removes = set()
            kept = []
            for piece in split_keep(WHITESPACE_REGEX, parser.value or ""):
                skip = False
                for item in removes:
                    if piece in expanded_removes[item]:
                        parser.removes.add(item)
                        skip = True
                if not skip:
                    kept.append(piece)
            parser.value = "".join(kept)
            if expand:
                value = parser.value

        if value is None:
            return None
        return value, parser