from __future__ import annotations

from typing import Iterable

from .types import RunResult


def aggregate_exit_code(results: Iterable[RunResult]) -> int:
    """
    Reduce finished runs to one process exit status.

    The first error carrying a non-zero code decides the status. Errors
    without a code are skipped, so a table of only uncoded failures exits 0.
    """
    status = 0
    for result in results:
        if result.error is None:
            continue
        if result.error.code:
            return result.error.code
    return status
