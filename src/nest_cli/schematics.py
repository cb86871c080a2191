"""
Delegation to the schematics runner that generates project files.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from rich.console import Console

from .cli_config import get_config
from .error_handling import ErrorCategory, SchematicsError, get_error_handler
from .runner import run_command
from .ui import MESSAGES


def decamelize(text: str) -> str:
    """``innerHTML`` becomes ``inner_html``."""
    return re.sub(r"([a-z\d])([A-Z])", r"\1_\2", text).lower()


def dasherize(text: str) -> str:
    """``My App_name`` becomes ``my-app-name``."""
    return re.sub(r"[ _]", "-", decamelize(text))


@dataclass(frozen=True)
class SchematicOption:
    """A single ``--option`` passed to a schematic."""

    name: str
    value: Union[str, bool]

    @property
    def normalized_name(self) -> str:
        return dasherize(self.name)

    def to_command_string(self) -> str:
        if isinstance(self.value, bool):
            prefix = "" if self.value else "no-"
            return f"--{prefix}{self.normalized_name}"
        if self.name == "name":
            return f"--name={dasherize(self.value)}"
        return f"--{self.normalized_name}={self.value}"


def parse_schematic_options(
    args: Dict[str, Optional[str]], flags: Dict[str, bool]
) -> List[SchematicOption]:
    """
    Turn command arguments and flags into schematic options.

    Every argument becomes a string option; every flag becomes a boolean
    option telling whether it was set.
    """
    options = [
        SchematicOption(key, value if value is not None else "")
        for key, value in args.items()
    ]
    options.extend(SchematicOption(key, bool(value)) for key, value in flags.items())
    return options


class SchematicCollection:
    """Runs schematics of one collection through the schematics runner."""

    def __init__(
        self,
        collection: str,
        binary: Optional[str] = None,
        extra_args: Optional[List[str]] = None,
        console: Optional[Console] = None,
    ):
        config = get_config()
        self.collection = collection
        self.binary = binary or config.schematics.binary
        self.extra_args = (
            list(extra_args) if extra_args is not None else list(config.schematics.extra_args)
        )
        self.console = console or Console()

    def build_command(self, schematic: str, options: List[SchematicOption]) -> List[str]:
        return [
            self.binary,
            f"{self.collection}:{schematic}",
            *(option.to_command_string() for option in options),
            *self.extra_args,
        ]

    def execute(self, schematic: str, options: List[SchematicOption]) -> None:
        """
        Execute ``schematic`` with ``options``.

        Raises:
            SchematicsError: If the runner is missing or exits with an error
        """
        command = self.build_command(schematic, options)
        try:
            _, _, returncode = run_command(command, capture_output=False, tool="schematics")
        except OSError as e:
            self._report_failure(schematic, command, e)
            raise SchematicsError(f"Cannot start {self.binary}: {e}") from e

        if returncode != 0:
            self._report_failure(schematic, command)
            raise SchematicsError(
                f"{self.collection}:{schematic} exited with status {returncode}"
            )

    def _report_failure(
        self, schematic: str, command: List[str], exception: Optional[Exception] = None
    ) -> None:
        get_error_handler().error(
            ErrorCategory.SCHEMATICS,
            f"Schematic {self.collection}:{schematic} failed",
            "schematics",
            "execute",
            exception=exception,
            details={"command": command[0]},
            suggestions=[
                "Install the schematics runner: npm i -g @angular-devkit/schematics-cli",
                f"Install the collection: npm i -g {self.collection}",
            ],
        )
        self.console.print(
            MESSAGES["SCHEMATICS_FAILED"].format(schematic=f"{self.collection}:{schematic}"),
            style="red",
        )


class CollectionFactory:
    @staticmethod
    def create(
        collection: Optional[str] = None, **kwargs: Any
    ) -> SchematicCollection:
        name = collection or get_config().schematics.collection
        return SchematicCollection(name, **kwargs)
