from __future__ import annotations

from types import TracebackType

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.spinner import Spinner
from rich.table import Table
from rich.text import Text

from testen.runner.types import ResultTable, RunResult, RunStatus

GLYPHS = {
    RunStatus.PENDING: "○",
    RunStatus.RUNNING: "◐",
    RunStatus.SUCCESS: "✔",
    RunStatus.FAILED: "✖",
}

STYLES = {
    RunStatus.PENDING: "dim",
    RunStatus.RUNNING: "cyan",
    RunStatus.SUCCESS: "green",
    RunStatus.FAILED: "red",
}


def format_duration(duration_ms: int | None) -> str:
    if duration_ms is None:
        return ""
    return f"{duration_ms}ms"


def status_row(result: RunResult) -> list[str]:
    return [
        GLYPHS[result.status],
        result.version,
        result.status.value,
        format_duration(result.duration_ms),
    ]


def build_table(table: ResultTable) -> Table:
    grid = Table(box=None, show_header=False, padding=(0, 1), pad_edge=False)
    grid.add_column(no_wrap=True)
    grid.add_column(no_wrap=True)
    grid.add_column(no_wrap=True)
    grid.add_column(no_wrap=True, justify="right")

    for result in table:
        glyph, version, label, duration = status_row(result)
        style = STYLES[result.status]

        mark: RenderableType
        if result.status is RunStatus.RUNNING:
            mark = Spinner("dots", style=style)
        else:
            mark = Text(glyph, style=style)

        grid.add_row(mark, Text(version), Text(label, style=style), Text(duration, style="dim"))

    return grid


def build_messages(table: ResultTable) -> list[Text]:
    out = []
    for block in table.messages:
        header, _, body = block.partition("\n")
        text = Text(header, style="bold underline")
        if body:
            text.append("\n" + body)
        text.append("\n")
        out.append(text)
    return out


def build_view(table: ResultTable) -> RenderableType:
    """Message blocks (if any) stacked above the status table."""
    return Group(*build_messages(table), build_table(table))


class LiveDisplay:
    """
    Redraws the result table in place.

    Use as a context manager and pass the instance as the coordinator's
    renderer. If the block raises, the live region is cleared and the spinner
    stopped before the exception propagates.
    """

    def __init__(self, console: Console | None = None, refresh_per_second: float = 12):
        self.console = console or Console()
        self._live = Live(
            console=self.console,
            refresh_per_second=refresh_per_second,
            transient=False,
        )

    def __enter__(self) -> LiveDisplay:
        self._live.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            self.clear()
        self._live.stop()

    def __call__(self, table: ResultTable) -> None:
        self._live.update(build_view(table), refresh=True)

    def clear(self) -> None:
        self._live.update(Text(""), refresh=True)
