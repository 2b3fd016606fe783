from __future__ import annotations

from functools import cmp_to_key
from typing import Iterable

from .types import VersionContractError, VersionFormatError


def _segments(version: str) -> list[int]:
    out: list[int] = []
    for part in version.split("."):
        try:
            out.append(int(part))
        except ValueError as exc:
            raise VersionFormatError(version) from exc
    return out


def compare_versions(left: str, right: str) -> int:
    """
    Order two dotted versions segment by segment.

    Missing segments count as zero, so "1.2" == "1.2.0" and "2" > "1.9.9".
    Returns -1, 0 or 1.
    """
    if not isinstance(left, str) or not isinstance(right, str):
        raise VersionContractError(left, right)

    a = _segments(left)
    b = _segments(right)

    for i in range(max(len(a), len(b))):
        x = a[i] if i < len(a) else 0
        y = b[i] if i < len(b) else 0
        if x > y:
            return 1
        if x < y:
            return -1

    return 0


def sort_versions(versions: Iterable[str]) -> list[str]:
    return sorted(versions, key=cmp_to_key(compare_versions))


def is_numeric_version(version: str) -> bool:
    return all(part.isdecimal() for part in version.split("."))
