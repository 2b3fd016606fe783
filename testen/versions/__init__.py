from .compare import compare_versions, sort_versions
from .resolver import PRESET_VERSIONS, resolve_versions
from .types import VersionContractError, VersionError, VersionFormatError

__all__ = [
    "compare_versions",
    "sort_versions",
    "resolve_versions",
    "PRESET_VERSIONS",
    "VersionError",
    "VersionContractError",
    "VersionFormatError",
]
