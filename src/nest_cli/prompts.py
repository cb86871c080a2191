"""
Interactive questions asked by the new command.
"""

from dataclasses import dataclass
from typing import Dict, Optional

import click
from rich.console import Console

from .cli_config import SUPPORTED_PACKAGE_MANAGERS, get_config
from .ui import MESSAGES


@dataclass
class ProjectInformation:
    """Metadata of the project to generate."""

    name: str
    description: str
    version: str
    author: str

    def as_schematic_args(self) -> Dict[str, Optional[str]]:
        return {
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "author": self.author,
        }


def ask_for_missing_information(
    name: Optional[str] = None,
    description: Optional[str] = None,
    version: Optional[str] = None,
    author: Optional[str] = None,
    console: Optional[Console] = None,
) -> ProjectInformation:
    """Prompt for every project field not given on the command line."""
    console = console or Console()
    defaults = get_config().project

    console.print()
    console.print(MESSAGES["PROJECT_INFORMATION_START"])
    console.print(MESSAGES["ADDITIONAL_INFORMATION"])
    console.print()

    if name is None:
        name = click.prompt("name", default=defaults.default_name)
    if description is None:
        description = click.prompt("description", default=defaults.default_description)
    if version is None:
        version = click.prompt("version", default=defaults.default_version)
    if author is None:
        author = click.prompt(
            "author", default=defaults.default_author, show_default=False
        )

    console.print()
    console.print(MESSAGES["PROJECT_INFORMATION_COLLECTED"])
    console.print()

    return ProjectInformation(
        name=name, description=description, version=version, author=author
    )


def select_package_manager() -> str:
    """Ask which package manager should install the project."""
    return click.prompt(
        MESSAGES["PACKAGE_MANAGER_QUESTION"],
        type=click.Choice(list(SUPPORTED_PACKAGE_MANAGERS), case_sensitive=False),
        default=SUPPORTED_PACKAGE_MANAGERS[0],
    ).lower()
