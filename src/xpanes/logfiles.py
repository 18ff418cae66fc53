import os
from collections.abc import Sequence
from datetime import datetime

from xpanes.constants import LOG_ARG_PLACEHOLDER, LOG_PID_PLACEHOLDER


def dedup_keys(targets: Sequence[str]) -> list[str]:
    """Return ``"<target>-<n>"`` for each target, n counting its occurrences so far.

    >>> dedup_keys(["aaa", "bbb", "aaa"])
    ['aaa-1', 'bbb-1', 'aaa-2']
    """
    counters: dict[str, int] = {}
    keys: list[str] = []
    for target in targets:
        counters[target] = counters.get(target, 0) + 1
        keys.append(f"{target}-{counters[target]}")
    return keys


def generate(
    targets: Sequence[str],
    log_format: str,
    *,
    now: datetime | None = None,
    pid: int | None = None,
) -> list[str]:
    """Build one log file name per target, in target order.

    Date directives in ``log_format`` are expanded once so that every name
    produced by a single call shares the same timestamp. Placeholders are
    substituted afterwards, which keeps a ``%`` inside a target literal.
    """
    stamp = now or datetime.now()
    pid_text = str(os.getpid() if pid is None else pid)
    expanded = stamp.strftime(log_format)

    names: list[str] = []
    for key in dedup_keys(targets):
        name = expanded.replace(LOG_PID_PLACEHOLDER, pid_text)
        names.append(name.replace(LOG_ARG_PLACEHOLDER, key))
    return names
