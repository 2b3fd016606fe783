# tests/test_resolver.py
from __future__ import annotations

from pathlib import Path

import pytest

from testen.config.types import ConfigError, ProjectConfig
from testen.versions.resolver import PRESET_VERSIONS, resolve_versions


def _no_system() -> str:
    raise AssertionError("system version should not be queried")


def _resolve(*cli: str, **kwargs) -> list[str]:
    kwargs.setdefault("env", {})
    kwargs.setdefault("system_version", _no_system)
    return resolve_versions(list(cli), **kwargs)


def test_cli_versions_only() -> None:
    assert _resolve("12", "10") == ["10", "12"]


def test_cli_duplicates_collapse() -> None:
    assert _resolve("12", "12") == ["12"]


def test_leading_v_is_stripped() -> None:
    assert _resolve("v14", "14", " 16 ") == ["14", "16"]


def test_presets_when_nothing_resolves() -> None:
    assert _resolve() == list(PRESET_VERSIONS)


def test_system_version_is_queried() -> None:
    versions = _resolve(use_system=True, system_version=lambda: "v20.11.1")
    assert versions == ["20.11.1"]


def test_cli_versions_are_added_to_system_version() -> None:
    versions = _resolve("22", "18", use_system=True, system_version=lambda: "v20.11.1")
    assert versions == ["18", "20.11.1", "22"]


def test_ci_env_variable() -> None:
    assert _resolve(env={"TESTEN_NODE": "16, 14 18"}) == ["14", "16", "18"]


def test_ci_env_takes_priority_over_project() -> None:
    project = ProjectConfig(node=["8"])
    assert _resolve(env={"TESTEN_NODE": "20"}, project=project) == ["20"]


def test_travis_node_js_list(tmp_path: Path) -> None:
    (tmp_path / ".travis.yml").write_text(
        "language: node_js\nnode_js:\n  - '12'\n  - 10\n", encoding="utf-8"
    )
    assert _resolve(project_dir=tmp_path) == ["10", "12"]


def test_travis_node_js_scalar(tmp_path: Path) -> None:
    (tmp_path / ".travis.yml").write_text("node_js: '16'\n", encoding="utf-8")
    assert _resolve(project_dir=tmp_path) == ["16"]


def test_travis_without_node_js_falls_through(tmp_path: Path) -> None:
    (tmp_path / ".travis.yml").write_text("language: python\n", encoding="utf-8")
    project = ProjectConfig(node=["14"])
    assert _resolve(project_dir=tmp_path, project=project) == ["14"]


def test_invalid_travis_yaml_raises(tmp_path: Path) -> None:
    (tmp_path / ".travis.yml").write_text("node_js: [\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        _resolve(project_dir=tmp_path)


def test_project_versions_are_sorted() -> None:
    project = ProjectConfig(node=["16", "14", "8"])
    assert _resolve(project=project) == ["8", "14", "16"]


def test_cli_versions_are_added_to_project_versions() -> None:
    project = ProjectConfig(node=["14", "20"])
    assert _resolve("20", "18", project=project) == ["14", "18", "20"]


def test_system_takes_priority_over_ci() -> None:
    versions = _resolve(
        use_system=True,
        system_version=lambda: "v21.0.0",
        env={"TESTEN_NODE": "14"},
    )
    assert versions == ["21.0.0"]


def test_travis_aliases_follow_numeric_versions(tmp_path: Path) -> None:
    (tmp_path / ".travis.yml").write_text(
        "node_js:\n  - 'lts/*'\n  - '18'\n  - node\n", encoding="utf-8"
    )
    assert _resolve("20", project_dir=tmp_path) == ["18", "20", "lts/*", "node"]


def test_project_alias_does_not_block_explicit_versions() -> None:
    project = ProjectConfig(node=["lts/hydrogen", "16"])
    assert _resolve("20", project=project) == ["16", "20", "lts/hydrogen"]
