from __future__ import annotations

import argparse

from testen import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="testen",
        usage="%(prog)s [options] [-- command...]",
        description="Run your tests against multiple Node.js versions.",
    )

    # versions
    parser.add_argument(
        "-n",
        "--node",
        dest="node",
        action="append",
        default=[],
        metavar="VERSION",
        help="Node version to test against (repeatable)",
    )
    parser.add_argument(
        "--system",
        action="store_true",
        help="Test against the node version currently on PATH",
    )

    # run
    parser.add_argument(
        "-s",
        "--sequence",
        action="store_true",
        help="Run versions one after another instead of in parallel",
    )
    parser.add_argument(
        "-V",
        "--verbose",
        action="store_true",
        help="Always show command output",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config file (default: testen.* or package.json in cwd)",
    )

    # logging
    parser.add_argument(
        "--log-file",
        default=None,
        help="Write a run log to this file",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log debug records to the log file",
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def split_command(argv: list[str]) -> tuple[list[str], list[str]]:
    """Separate options from the test command given after `--`."""
    if "--" not in argv:
        return argv, []
    i = argv.index("--")
    return argv[:i], argv[i + 1 :]
