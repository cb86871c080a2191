"""
Project manifest reading and installed-version resolution.

Reads the declared dependencies of the project in the working directory and
resolves the installed version of each Nest package from ``node_modules``.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from .dependency import NestDependency
from .error_handling import ErrorCategory, ErrorLevel, ManifestError, get_error_handler
from .formatting import format_dependencies
from .structured_logging import log_version_skew
from .versions import WarningReport, reconcile

NEST_NAMESPACE = "@nestjs"

PathLike = Union[str, Path]


@dataclass
class NestReport:
    """Formatted listing and warning report for the info command."""

    dependencies: List[NestDependency] = field(default_factory=list)
    warnings: WarningReport = field(default_factory=dict)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


def _read_json_object(path: Path) -> Dict:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a JSON object")
    return data


def read_project_dependencies(cwd: Optional[PathLike] = None) -> Dict[str, str]:
    """
    Read the declared dependencies of the project in ``cwd``.

    ``dependencies`` and ``devDependencies`` are merged, the dev entry
    winning when a package appears in both.

    Args:
        cwd: Project directory, the current directory by default

    Returns:
        Dict[str, str]: Package name to declared version string

    Raises:
        ManifestError: If package.json is missing or unreadable
    """
    manifest_path = Path(cwd or Path.cwd()) / "package.json"

    try:
        pack = _read_json_object(manifest_path)
    except (OSError, ValueError) as e:
        get_error_handler().handle_error(
            ErrorLevel.INFO,
            ErrorCategory.MANIFEST,
            f"Cannot read project manifest: {e}",
            "manifest",
            "read_project_dependencies",
            exception=e,
            details={"file_path": manifest_path.name},
            suggestions=["Run the command from the root of a Nest project"],
        )
        raise ManifestError(f"Cannot read {manifest_path}: {e}") from e

    dependencies: Dict[str, str] = {}
    for section in ("dependencies", "devDependencies"):
        section_deps = pack.get(section) or {}
        if isinstance(section_deps, dict):
            for package, version in section_deps.items():
                dependencies[package] = str(version)
    return dependencies


def resolve_installed_version(
    package: str, cwd: Optional[PathLike] = None
) -> Optional[str]:
    """
    Find the installed version of ``package``.

    ``node_modules/<package>/package.json`` is looked up in ``cwd`` and then
    in each parent directory, the way Node resolves modules.
    """
    start = Path(cwd or Path.cwd()).resolve()
    for directory in [start, *start.parents]:
        package_file = directory / "node_modules" / package / "package.json"
        if not package_file.is_file():
            continue
        try:
            version = _read_json_object(package_file).get("version")
        except (OSError, ValueError) as e:
            get_error_handler().warning(
                ErrorCategory.MANIFEST,
                f"Cannot read installed manifest of {package}",
                "manifest",
                "resolve_installed_version",
                exception=e,
            )
            return None
        return str(version) if version else None
    return None


def display_name(package: str) -> str:
    """``@nestjs/platform-express@next`` becomes ``platform-express version``."""
    short_name = re.sub(r"@.*", "", package.replace(f"{NEST_NAMESPACE}/", "", 1))
    return f"{short_name} version"


def collect_nest_dependencies(
    dependencies: Dict[str, str], cwd: Optional[PathLike] = None
) -> List[NestDependency]:
    """Build a record for every Nest package, preferring installed versions."""
    nest_dependencies = []
    for package, declared in dependencies.items():
        if NEST_NAMESPACE not in package:
            continue
        installed = resolve_installed_version(package, cwd)
        nest_dependencies.append(
            NestDependency(
                name=display_name(package),
                full_name=package,
                value=installed or declared,
            )
        )
    return nest_dependencies


def build_nest_report(
    dependencies: Dict[str, str], cwd: Optional[PathLike] = None
) -> NestReport:
    """
    Build the formatted listing and the minor-version warning report.

    The warning report is computed from the formatted records, so range
    prefixes such as ``^`` are already stripped from the versions it shows.
    """
    formatted = format_dependencies(collect_nest_dependencies(dependencies, cwd))
    warnings = reconcile(formatted)
    if warnings:
        log_version_skew(
            list(warnings),
            packages=sum(len(members) for members in warnings.values()),
        )
    return NestReport(dependencies=formatted, warnings=warnings)
