"""
Version reconciliation for Nest framework packages.

Groups the core framework packages of a project by their ``major.minor``
version and reports the groups when they disagree, since mixing minor
versions of these packages leads to runtime incompatibilities.
"""

import math
import re
from typing import Dict, Iterable, List, Tuple

from .dependency import NestDependency

# Packages whose version skew is reported by the info command
DEPENDENCIES_ALLOW_LIST: Tuple[str, ...] = (
    "@nestjs/core",
    "@nestjs/common",
    "@nestjs/schematics",
    "@nestjs/platform-express",
    "@nestjs/platform-fastify",
    "@nestjs/platform-socket.io",
    "@nestjs/platform-ws",
    "@nestjs/websockets",
)

_ALLOW_LIST = frozenset(DEPENDENCIES_ALLOW_LIST)

_LEADING_FLOAT = re.compile(
    r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)

WarningReport = Dict[str, List[NestDependency]]


def parse_leading_float(text: str) -> float:
    """
    Parse the longest numeric prefix of ``text``.

    Anything after the prefix is ignored; text without a numeric prefix
    (``"^9"``, ``"x"``, ``""``) gives NaN instead of raising.
    """
    match = _LEADING_FLOAT.match(text)
    if not match:
        return math.nan
    return float(match.group(1).replace("Infinity", "inf"))


def _format_component(number: float) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number.is_integer():
        return str(int(number))
    return repr(number)


def parse_minor_version(value: str) -> Tuple[float, float]:
    """Return the (major, minor) numbers of a version string."""
    parts = value.split(".")
    major = parse_leading_float(parts[0])
    # "9" has no minor component; it lands in the NaN minor group
    minor = parse_leading_float(parts[1]) if len(parts) > 1 else math.nan
    return major, minor


def minor_version_key(value: str) -> str:
    """Build the ``"<major>.<minor>"`` group key of a version string."""
    major, minor = parse_minor_version(value)
    return f"{_format_component(major)}.{_format_component(minor)}"


def _descending(version: Tuple[float, float]) -> Tuple[bool, float, bool, float]:
    # NaN components sort after every numeric one
    major, minor = version
    return (
        math.isnan(major),
        0.0 if math.isnan(major) else -major,
        math.isnan(minor),
        0.0 if math.isnan(minor) else -minor,
    )


def reconcile(dependencies: Iterable[NestDependency]) -> WarningReport:
    """
    Build the minor-version warning report.

    Only allow-listed packages are considered. When they all share one
    minor version (or there are none) the report is empty; otherwise the
    groups are returned highest version first, each listing its packages
    in encounter order.

    Values are read as they are, so records should come from
    ``format_dependencies``: a declared ``"^9.0.0"`` has no numeric prefix
    and would land in the ``"NaN.0"`` group instead of ``"9.0"``.

    Args:
        dependencies: Formatted records to reconcile

    Returns:
        WarningReport: Ordered mapping of version key to records
    """
    groups: WarningReport = {}
    versions: Dict[str, Tuple[float, float]] = {}

    for dependency in dependencies:
        if dependency.full_name not in _ALLOW_LIST:
            continue

        key = minor_version_key(dependency.value)
        versions.setdefault(key, parse_minor_version(dependency.value))
        groups.setdefault(key, []).append(dependency)

    if len(groups) <= 1:
        return {}

    ordered_keys = sorted(groups, key=lambda key: _descending(versions[key]))
    return {key: groups[key] for key in ordered_keys}
