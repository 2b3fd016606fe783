from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_TEST_COMMAND = "npm test"


@dataclass
class ProjectConfig:
    test: str | None = None
    node: list[str] = field(default_factory=list)
    select: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    source: Path | None = None

    def test_command(self) -> str:
        return self.test or DEFAULT_TEST_COMMAND


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
