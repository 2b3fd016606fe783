from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator


class RunStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (RunStatus.SUCCESS, RunStatus.FAILED)


class RunError(Exception):
    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


@dataclass
class RunResult:
    version: str
    status: RunStatus = RunStatus.PENDING
    duration_ms: int | None = None
    output: str | None = None
    error: RunError | None = None


@dataclass
class ResultTable:
    """One result per version, in version order, plus the message blocks
    collected from runs that retained output."""

    results: list[RunResult]
    messages: list[str] = field(default_factory=list)

    @classmethod
    def for_versions(cls, versions: list[str]) -> ResultTable:
        return cls([RunResult(version) for version in versions])

    def __iter__(self) -> Iterator[RunResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    def __getitem__(self, index: int) -> RunResult:
        return self.results[index]

    @property
    def versions(self) -> list[str]:
        return [r.version for r in self.results]

    @property
    def done(self) -> bool:
        return all(r.status.terminal for r in self.results)
