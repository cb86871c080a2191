"""
Reporting and output formatting for the info command.

Gathers environment diagnostics and prints them, together with the Nest
package listing and version warnings, using the Rich library.
"""

import json
import platform
from dataclasses import dataclass
from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape

from .error_handling import PackageManagerError
from .manifest import NestReport
from .package_managers import AbstractPackageManager
from .runner import run_command
from .ui import BANNER, MESSAGES, WARNING_EXPLANATION, WARNING_HEADER


@dataclass
class SystemInformation:
    """Environment facts shown in the system section."""

    os_version: str
    node_version: Optional[str]
    package_manager: str
    package_manager_version: Optional[str]


def get_os_version() -> str:
    return f"{platform.system()} {platform.release()}".strip()


def get_node_version() -> Optional[str]:
    """Return ``node --version`` or None when Node.js is not available."""
    try:
        stdout, _, returncode = run_command(["node", "--version"])
    except OSError:
        return None
    return stdout.strip() if returncode == 0 else None


def collect_system_information(manager: AbstractPackageManager) -> SystemInformation:
    try:
        manager_version: Optional[str] = manager.version()
    except PackageManagerError:
        manager_version = None

    return SystemInformation(
        os_version=get_os_version(),
        node_version=get_node_version(),
        package_manager=manager.name,
        package_manager_version=manager_version,
    )


class InfoReporter:
    """Prints the diagnostics of the info command."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def print_banner(self) -> None:
        self.console.print(escape(BANNER), style="red", highlight=False)

    def print_system_information(self, system: SystemInformation) -> None:
        self.console.print("[green]\\[System Information][/green]")
        self._print_value("OS Version     :", system.os_version)
        self._print_value("NodeJS Version :", system.node_version)
        self._print_value(
            f"{system.package_manager} Version    :", system.package_manager_version
        )
        self.console.print()

    def print_cli_version(self, cli_version: str) -> None:
        self.console.print("[green]\\[Nest CLI][/green]")
        self._print_value("Nest CLI Version :", cli_version)
        self.console.print()

    def print_nest_information(
        self, report: Optional[NestReport], error: Optional[str] = None
    ) -> None:
        """
        Print the Nest package listing and the version warnings.

        Args:
            report: Listing and warnings, None when the manifest failed
            error: Set when the project manifest could not be read
        """
        self.console.print("[green]\\[Nest Platform Information][/green]")
        if report is None or error:
            self.console.print(
                escape(MESSAGES["NEST_INFORMATION_PACKAGE_MANAGER_FAILED"]),
                style="red",
            )
            return

        for dependency in report.dependencies:
            self._print_value(dependency.name, dependency.value)

        if report.has_warnings:
            self._print_warnings(report)

    def _print_warnings(self, report: NestReport) -> None:
        self.console.print()
        self.console.print(f"[yellow]{escape(WARNING_HEADER)}[/yellow]")
        for line in WARNING_EXPLANATION:
            self.console.print(line)
        for minor_version, dependencies in report.warnings.items():
            self.console.print(
                f"[bold]* Under version {escape(minor_version)}[/bold]"
            )
            for dependency in dependencies:
                self.console.print(
                    escape(f"- {dependency.full_name} {dependency.value}"),
                    highlight=False,
                )

    def _print_value(self, label: str, value: Optional[str]) -> None:
        if value is None:
            self.console.print(
                f"{escape(label)} [red]{MESSAGES['UNKNOWN_VERSION']}[/red]",
                highlight=False,
            )
        else:
            self.console.print(
                f"{escape(label)} [blue]{escape(value)}[/blue]", highlight=False
            )


def build_info_document(
    system: SystemInformation,
    cli_version: str,
    report: Optional[NestReport],
    error: Optional[str] = None,
) -> Dict[str, Any]:
    """Build the JSON document printed by ``info --output-format json``."""
    document: Dict[str, Any] = {
        "system": {
            "os_version": system.os_version,
            "node_version": system.node_version,
            "package_manager": system.package_manager,
            "package_manager_version": system.package_manager_version,
        },
        "cli": {"version": cli_version},
        "dependencies": [],
        "warnings": {},
    }

    if report is not None:
        document["dependencies"] = [
            {
                "name": dependency.full_name,
                "version": dependency.value,
            }
            for dependency in report.dependencies
        ]
        document["warnings"] = {
            minor_version: [
                {"name": dependency.full_name, "version": dependency.value}
                for dependency in dependencies
            ]
            for minor_version, dependencies in report.warnings.items()
        }

    if error:
        document["error"] = error

    return document


def output_json_info(document: Dict[str, Any]) -> None:
    print(json.dumps(document, indent=2, ensure_ascii=False))
