"""String splitting helpers used by the datastore."""

from __future__ import annotations

import re
from collections.abc import Iterator


def split_filter_empty(text: str, separator: str) -> Iterator[str]:
    """Split ``text`` at ``separator`` and yield the non-empty pieces."""
    return (part for part in text.split(separator) if part)


def rsplit_all(text: str, char: str) -> Iterator[tuple[str, str]]:
    """Yield every split of ``text`` at ``char``, moving from right to left.

    ``rsplit_all("VAR_foo_bar", "_")`` yields ``("VAR_foo", "bar")`` and then
    ``("VAR", "foo_bar")``.
    """
    index = text.rfind(char)
    while index != -1:
        yield text[:index], text[index + len(char):]
        index = text.rfind(char, 0, index)


def split_keep(pattern: str | re.Pattern[str], text: str) -> list[str]:
    """Split ``text`` at matches of ``pattern``, keeping the matches as pieces."""
    regex = re.compile(pattern)
    result: list[str] = []
    last = 0
    for match in regex.finditer(text):
        start, end = match.span()
        if start != last:
            result.append(text[last:start])
        result.append(match.group(0))
        last = end
    if last < len(text):
        result.append(text[last:])
    return result