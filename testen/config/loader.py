import json
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from .types import ConfigError, ProjectConfig, UnsupportedConfigFormatError

MANIFEST_NAME = "package.json"
MANIFEST_KEY = "testen"

CONFIG_CANDIDATES = (
    "testen.yml",
    "testen.yaml",
    "testen.toml",
    "testen.json",
    MANIFEST_NAME,
)


def find_project(directory: str | Path) -> ProjectConfig:
    base = Path(directory).expanduser().resolve()
    for name in CONFIG_CANDIDATES:
        candidate = base / name
        if candidate.is_file():
            return load_project(candidate)
    return ProjectConfig()


def load_project(path: str | Path) -> ProjectConfig:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)

    if pure_path.name == MANIFEST_NAME:
        raw_file = _manifest_section(pure_path, raw_file)

    project = _build_project_config(raw_file)
    project.source = pure_path
    return project


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .yml/.yaml, .toml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    match fmt:
        case "yaml":
            return _parse_yaml(path)
        case "toml":
            return _parse_toml(path)
        case "json":
            return _parse_json(path)
        case _:
            raise AssertionError("Unreachable")


def _parse_yaml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML") from exc

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: YAML parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _parse_toml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML") from exc

    return raw_file


def _parse_json(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON") from exc

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: JSON parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _manifest_section(path: Path, manifest: Mapping[str, Any]) -> Mapping[str, Any]:
    section = manifest.get(MANIFEST_KEY)
    if section is None:
        return {}

    if not isinstance(section, Mapping):
        raise ConfigError(
            f"{path}: '{MANIFEST_KEY}' must be a mapping, got {type(section)}"
        )

    return section


def _build_project_config(fields: Mapping[str, Any]) -> ProjectConfig:
    keys = {"test", "node", "select", "env"}
    project = ProjectConfig()

    for field in fields.keys():
        if field not in keys:
            raise ConfigError(f"Can't process: {field}")

    if "test" in fields:
        if not isinstance(fields["test"], str):
            raise ConfigError("The test command should be a string")

        if len(fields["test"].strip()) < 1:
            raise ConfigError("Test command missing")

        project.test = fields["test"].strip()

    if "node" in fields:
        project.node = _build_node_list(fields["node"])

    if "select" in fields:
        select = fields["select"]
        if not isinstance(select, str) or len(select.strip()) < 1:
            raise ConfigError("'select' should be a non-empty string")

        if "{command}" not in select:
            raise ConfigError("'select' must contain the {command} placeholder")

        project.select = select.strip()

    if "env" in fields:
        if not isinstance(fields["env"], Mapping):
            raise ConfigError("Env should be a mapping")

        for key, item in fields["env"].items():
            if not isinstance(key, str):
                raise ConfigError(f"{key} should be a string")

            if len(key.strip()) < 1:
                raise ConfigError("A key can't be empty")

            if not isinstance(item, str):
                raise ConfigError(f"{item} should be a string")

            project.env[key.strip()] = item

    return project


def _build_node_list(raw: Any) -> list[str]:
    if isinstance(raw, (str, int, float)) and not isinstance(raw, bool):
        raw = [raw]

    if not isinstance(raw, list):
        raise ConfigError(f"'node' should be a version or a list of versions, got {type(raw)}")

    versions = []
    seen = set()
    for item in raw:
        if isinstance(item, bool) or not isinstance(item, (str, int, float)):
            raise ConfigError(f"{item!r} should be a version string in the node list")

        version = str(item).strip()

        if len(version) < 1:
            raise ConfigError("A node version is empty")

        if version in seen:
            continue

        versions.append(version)
        seen.add(version)

    return versions
