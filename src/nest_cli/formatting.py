"""Presentation helpers for the dependency listing of the info command."""

from dataclasses import replace
from typing import Iterable, List

from .dependency import NestDependency

NAME_SUFFIX = " :"


def strip_range_prefix(value: str) -> str:
    """Drop a single leading ``^`` or ``~`` from a declared version."""
    if value[:1] in ("^", "~"):
        return value[1:]
    return value


def right_pad(name: str, length: int) -> str:
    return name.ljust(length)


def format_dependencies(dependencies: Iterable[NestDependency]) -> List[NestDependency]:
    """
    Align dependency records for display.

    Records are ordered longest display name first, every name is padded to
    the longest one and suffixed with ``" :"``, and version range prefixes
    are removed. New records are returned; the input is left untouched.
    """
    ordered = sorted(dependencies, key=lambda dep: len(dep.name), reverse=True)
    if not ordered:
        return []

    length = len(ordered[0].name)
    return [
        replace(
            dependency,
            name=right_pad(dependency.name, length) + NAME_SUFFIX,
            value=strip_range_prefix(dependency.value),
        )
        for dependency in ordered
    ]
