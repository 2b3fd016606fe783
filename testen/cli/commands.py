from __future__ import annotations

import argparse
import logging
import shlex
import sys
from pathlib import Path

from rich.console import Console

from testen.config import ConfigError, ProjectConfig, find_project, load_project
from testen.display import LiveDisplay
from testen.logger import build_logger, log_event
from testen.runner import DEFAULT_SELECT, Coordinator, ResultTable, aggregate_exit_code
from testen.versions import VersionError, resolve_versions

from .args import build_parser, split_command

logger = logging.getLogger(__name__)


def run_cli(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    options, command = split_command(list(argv))
    parser = build_parser()
    console = Console()
    try:
        args = parser.parse_args(options)
        return cmd_run(args, command, console)

    except (ConfigError, VersionError) as exc:
        print(str(exc), file=sys.stderr)
        return 2

    except KeyboardInterrupt:
        return 130

    except Exception:
        console.print_exception()
        return 1


def cmd_run(args: argparse.Namespace, command_argv: list[str], console: Console) -> int:
    build_logger(Path(args.log_file) if args.log_file else None, debug=args.debug)

    project = _load(args)
    project_dir = project.source.parent if project.source else Path.cwd()

    versions = resolve_versions(
        args.node,
        use_system=args.system,
        project=project,
        project_dir=project_dir,
    )
    command = _test_command(command_argv, project)
    log_event(
        logger,
        {"event": "versions.resolved", "versions": versions, "command": command},
    )

    table = _run_with(args, project, project_dir, versions, command, console)
    return aggregate_exit_code(table)


def _load(args: argparse.Namespace) -> ProjectConfig:
    if args.config:
        return load_project(args.config)
    return find_project(Path.cwd())


def _test_command(command_argv: list[str], project: ProjectConfig) -> str:
    if len(command_argv) == 1:
        return command_argv[0]
    if command_argv:
        return shlex.join(command_argv)
    return project.test_command()


def _run_with(
    args: argparse.Namespace,
    project: ProjectConfig,
    project_dir: Path,
    versions: list[str],
    command: str,
    console: Console,
) -> ResultTable:
    with LiveDisplay(console) as display:
        coordinator = Coordinator(
            versions,
            command,
            select=project.select or DEFAULT_SELECT,
            verbose=args.verbose,
            env=project.env,
            cwd=project_dir,
            render=display,
        )
        return coordinator.run_sync(sequential=args.sequence)
