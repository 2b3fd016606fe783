from .loader import CONFIG_CANDIDATES, find_project, load_project
from .types import DEFAULT_TEST_COMMAND, ConfigError, ProjectConfig

__all__ = [
    "load_project",
    "find_project",
    "CONFIG_CANDIDATES",
    "ProjectConfig",
    "ConfigError",
    "DEFAULT_TEST_COMMAND",
]
