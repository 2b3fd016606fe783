from __future__ import annotations

import logging
import os
import re
import subprocess
from functools import partial
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Sequence

import yaml

from testen.config.types import ConfigError, ProjectConfig

from .compare import is_numeric_version, sort_versions

logger = logging.getLogger(__name__)

PRESET_VERSIONS: tuple[str, ...] = ("18", "20", "22")

CI_ENV_VAR = "TESTEN_NODE"
TRAVIS_FILE = ".travis.yml"

_SPLIT = re.compile(r"[,\s]+")

VersionSource = Callable[[], "list[str] | None"]


def current_node_version() -> str:
    try:
        result = subprocess.run(
            ["node", "--version"],
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as exc:
        raise ConfigError("--system: node executable not found on PATH") from exc

    if result.returncode != 0:
        raise ConfigError(
            f"--system: `node --version` exited with code {result.returncode}"
        )

    return result.stdout.strip()


def normalize_version(raw: Any) -> str:
    return str(raw).strip().removeprefix("v")


def _normalize_all(raw: Iterable[Any]) -> list[str]:
    out = []
    for item in raw:
        version = normalize_version(item)
        if version:
            out.append(version)
    return out


def _from_system(use_system: bool, query: Callable[[], str]) -> list[str] | None:
    if not use_system:
        return None
    return _normalize_all([query()]) or None


def _from_ci(env: Mapping[str, str], project_dir: Path | None) -> list[str] | None:
    raw = env.get(CI_ENV_VAR, "").strip()
    if raw:
        return _normalize_all(_SPLIT.split(raw)) or None

    if project_dir is None:
        return None

    travis = project_dir / TRAVIS_FILE
    if not travis.is_file():
        return None

    try:
        data = yaml.safe_load(travis.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{travis}: invalid YAML") from exc

    if not isinstance(data, Mapping) or data.get("node_js") is None:
        return None

    node_js = data["node_js"]
    if not isinstance(node_js, list):
        node_js = [node_js]

    return _normalize_all(node_js) or None


def _from_project(project: ProjectConfig | None) -> list[str] | None:
    if project is None:
        return None
    return _normalize_all(project.node) or None


def _dedupe(versions: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for version in versions:
        if version in seen:
            continue
        seen.add(version)
        out.append(version)
    return out


def resolve_versions(
    cli_versions: Sequence[str] | None = None,
    *,
    use_system: bool = False,
    project: ProjectConfig | None = None,
    project_dir: Path | None = None,
    env: Mapping[str, str] | None = None,
    system_version: Callable[[], str] = current_node_version,
) -> list[str]:
    """
    Work out which runtime versions to test, lowest first. Aliases such as
    lts/* cannot be ordered numerically and follow in the order given.

    The first source that yields anything among --system, CI detection and the
    project manifest is the base list. Versions given with -n are added to it
    rather than replacing it. Presets are used only when nothing else applies.
    """
    if env is None:
        env = os.environ

    sources: list[VersionSource] = [
        partial(_from_system, use_system, system_version),
        partial(_from_ci, env, project_dir),
        partial(_from_project, project),
    ]

    base: list[str] = []
    for source in sources:
        found = source()
        if found:
            base = found
            break

    explicit = _normalize_all(cli_versions or [])
    combined = explicit + base
    if not combined:
        combined = list(PRESET_VERSIONS)

    unique = _dedupe(combined)
    aliases = [v for v in unique if not is_numeric_version(v)]
    if aliases:
        logger.info("version aliases kept unsorted after numeric versions: %s", ", ".join(aliases))

    versions = sort_versions(v for v in unique if is_numeric_version(v)) + aliases

    if not versions:
        raise ConfigError("No versions to test")

    logger.debug("resolved versions: %s", ", ".join(versions))
    return versions
