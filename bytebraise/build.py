"""Task registration helpers."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from bytebraise.datastore import DataSmart

BBTASKS = "__BBTASKS"
TASK_PREFIX = "do_"


def add_task(
    task: Any,
    before: Sequence[str],
    after: Sequence[str],
    d: DataSmart,
) -> None:
    """Mark ``task`` as a task in ``d``.

    ``do_`` is added to the name if it is missing. ``before`` and ``after``
    are accepted for future ordering support and are currently unused.
    """
    name = str(task)
    if not name.startswith(TASK_PREFIX):
        name = TASK_PREFIX + name
    d.set_var_flag(name, "task", "1")