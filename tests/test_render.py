# tests/test_render.py
from __future__ import annotations

import io

import pytest
from rich.console import Console

from testen.display.render import GLYPHS, LiveDisplay, build_view, status_row
from testen.runner.types import ResultTable, RunError, RunResult, RunStatus


def _console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=80, force_terminal=False, color_system=None), buf


def _table() -> ResultTable:
    return ResultTable(
        [
            RunResult("8", RunStatus.SUCCESS, 12),
            RunResult("10", RunStatus.FAILED, 340, "", RunError("Command failed with exit code 1", 1)),
            RunResult("12", RunStatus.PENDING),
        ],
        messages=["node 10\nCommand failed with exit code 1"],
    )


def test_status_row_pending_has_no_duration() -> None:
    assert status_row(RunResult("14")) == [GLYPHS[RunStatus.PENDING], "14", "pending", ""]


def test_status_row_terminal_has_duration() -> None:
    row = status_row(RunResult("14", RunStatus.SUCCESS, 1520))
    assert row == ["✔", "14", "success", "1520ms"]


def test_view_puts_messages_above_rows() -> None:
    console, buf = _console()

    console.print(build_view(_table()))
    text = buf.getvalue()

    assert "✔" in text and "✖" in text
    assert "12ms" in text and "340ms" in text
    assert "pending" in text
    assert text.index("node 10") < text.index("success")
    assert text.index("Command failed with exit code 1") < text.rindex("failed")


def test_view_without_messages_is_just_the_table() -> None:
    console, buf = _console()
    table = ResultTable.for_versions(["14"])

    console.print(build_view(table))

    assert buf.getvalue().split() == ["○", "14", "pending"]


def test_live_display_prints_final_table() -> None:
    console, buf = _console()

    with LiveDisplay(console) as display:
        display(ResultTable([RunResult("14", RunStatus.SUCCESS, 5)]))

    assert "success" in buf.getvalue()


def test_live_display_clears_on_error() -> None:
    console, buf = _console()

    with pytest.raises(RuntimeError):
        with LiveDisplay(console) as display:
            display(ResultTable.for_versions(["14"]))
            raise RuntimeError("boom")

    assert "pending" not in buf.getvalue()
