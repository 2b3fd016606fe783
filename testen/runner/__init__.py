from .aggregate import aggregate_exit_code
from .coordinator import DEFAULT_SELECT, NO_OUTPUT, Coordinator
from .types import ResultTable, RunError, RunResult, RunStatus

__all__ = [
    "Coordinator",
    "DEFAULT_SELECT",
    "NO_OUTPUT",
    "ResultTable",
    "RunError",
    "RunResult",
    "RunStatus",
    "aggregate_exit_code",
]
