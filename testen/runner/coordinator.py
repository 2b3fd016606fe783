from __future__ import annotations

import asyncio
import logging
import os
import shlex
import time
from pathlib import Path
from typing import Callable, Mapping, Sequence

from testen.logger import log_event

from .types import ResultTable, RunError, RunStatus

logger = logging.getLogger(__name__)

# Sources nvm, switches to the requested version, then runs the test command.
# Anything that keeps the version from being selected exits 125; 127 stays with
# the test command.
DEFAULT_SELECT = (
    '. "${NVM_DIR:-$HOME/.nvm}/nvm.sh" && nvm use {version} >/dev/null || exit 125; {command}'
)
UNAVAILABLE_EXIT_CODE = 125
NO_OUTPUT = "no output"
VERSION_ENV_VAR = "TESTEN_NODE_VERSION"

Renderer = Callable[[ResultTable], None]


def _noop_render(table: ResultTable) -> None:
    return None


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


def _failure_message(headline: str, stderr: str) -> str:
    stderr = stderr.strip()
    if stderr:
        return f"{headline}\n{stderr}"
    return headline


class Coordinator:
    """
    Runs the test command once per version and keeps the result table current.

    The table is owned here. Every change to it happens under one lock and is
    followed by a call to ``render`` with the full, current table.
    """

    def __init__(
        self,
        versions: Sequence[str],
        command: str,
        *,
        select: str = DEFAULT_SELECT,
        verbose: bool = False,
        env: Mapping[str, str] | None = None,
        cwd: str | Path | None = None,
        render: Renderer | None = None,
        shell: str = "bash",
    ):
        self.versions = list(versions)
        self.command = command
        self.select = select
        self.verbose = verbose
        self.env = dict(env or {})
        self.cwd = cwd
        self.shell = shell
        self.table = ResultTable.for_versions(self.versions)
        self._render = render or _noop_render
        self._lock = asyncio.Lock()

    def script_for(self, version: str) -> str:
        return self.select.replace("{version}", shlex.quote(version)).replace(
            "{command}", self.command
        )

    async def run(self, *, sequential: bool = False) -> ResultTable:
        if sequential:
            return await self.run_sequential()
        return await self.run_parallel()

    def run_sync(self, *, sequential: bool = False) -> ResultTable:
        return asyncio.run(self.run(sequential=sequential))

    async def run_parallel(self) -> ResultTable:
        await self._start()
        await asyncio.gather(*(self._run_one(i) for i in range(len(self.table))))
        return self.table

    async def run_sequential(self) -> ResultTable:
        await self._start()
        for i in range(len(self.table)):
            await self._run_one(i)
        return self.table

    async def _start(self) -> None:
        # Lock must belong to the running loop.
        self._lock = asyncio.Lock()
        async with self._lock:
            self._render(self.table)

    async def _run_one(self, index: int) -> None:
        version = self.table[index].version
        await self._mark_running(index)
        log_event(logger, {"event": "run.start", "version": version})

        start = time.monotonic()
        stdout, error = await self._execute(version)
        duration_ms = int((time.monotonic() - start) * 1000)

        output = None
        if error is not None or self.verbose:
            output = stdout
            if error is None and not stdout.strip():
                output = NO_OUTPUT

        await self._mark_finished(index, duration_ms, output, error)
        log_event(
            logger,
            {
                "event": "run.finish",
                "version": version,
                "status": self.table[index].status.value,
                "duration_ms": duration_ms,
                "code": error.code if error else 0,
            },
        )

    async def _execute(self, version: str) -> tuple[str, RunError | None]:
        script = self.script_for(version)
        logger.debug("node %s: %s -c %s", version, self.shell, script)

        try:
            proc = await asyncio.create_subprocess_exec(
                self.shell,
                "-c",
                script,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self.cwd) if self.cwd else None,
                env={**os.environ, **self.env, VERSION_ENV_VAR: version},
            )
        except OSError as exc:
            return "", RunError(f"node {version} is not available: {exc}")

        out, err = await proc.communicate()
        stdout = _decode(out)
        stderr = _decode(err)
        returncode = proc.returncode
        if returncode < 0:
            # Killed by signal N, reported as 128+N.
            returncode = 128 - returncode

        if returncode == 0:
            return stdout, None

        if returncode == UNAVAILABLE_EXIT_CODE:
            headline = f"node {version} is not available"
        else:
            headline = f"Command failed with exit code {returncode}"

        return stdout, RunError(_failure_message(headline, stderr), returncode)

    async def _mark_running(self, index: int) -> None:
        async with self._lock:
            self.table[index].status = RunStatus.RUNNING
            self._render(self.table)

    async def _mark_finished(
        self,
        index: int,
        duration_ms: int,
        output: str | None,
        error: RunError | None,
    ) -> None:
        async with self._lock:
            result = self.table[index]
            result.status = RunStatus.FAILED if error else RunStatus.SUCCESS
            result.duration_ms = duration_ms
            result.output = output
            result.error = error

            if output is not None:
                self.table.messages.append(_message_block(result.version, output, error))

            self._render(self.table)


def _message_block(version: str, output: str, error: RunError | None) -> str:
    parts = [f"node {version}"]
    if output.strip():
        parts.append(output.rstrip())
    if error is not None:
        parts.append(error.message)
    return "\n".join(parts)
