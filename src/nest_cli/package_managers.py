"""
Package managers used to report versions and install generated projects.
"""

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Type, Union

from rich.console import Console

from .error_handling import ErrorCategory, PackageManagerError, get_error_handler
from .runner import run_command
from .ui import MESSAGES


class PackageManager(Enum):
    """Supported package managers."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"


class AbstractPackageManager(ABC):
    """Base class wrapping a package manager executable."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name of the package manager."""

    @property
    @abstractmethod
    def cli(self) -> str:
        """Executable of the package manager."""

    @property
    def install_command(self) -> str:
        return "install"

    @property
    def start_command(self) -> str:
        return f"{self.cli} run start"

    def version(self) -> str:
        """
        Return the version reported by the package manager.

        Raises:
            PackageManagerError: If the executable is missing or fails
        """
        try:
            stdout, stderr, returncode = run_command([self.cli, "--version"])
        except OSError as e:
            raise PackageManagerError(f"{self.cli} is not available: {e}") from e
        if returncode != 0:
            raise PackageManagerError(
                f"{self.cli} --version exited with {returncode}: {stderr.strip()}"
            )
        return stdout.strip()

    def install(self, directory: Union[str, Path]) -> None:
        """
        Install the dependencies of the project in ``directory``.

        Raises:
            PackageManagerError: If the installation fails
        """
        self.console.print(MESSAGES["PACKAGE_MANAGER_INSTALLATION_IN_PROGRESS"])
        returncode: Optional[int] = None
        failure: Optional[Exception] = None
        try:
            _, _, returncode = run_command(
                [self.cli, self.install_command],
                cwd=directory,
                capture_output=False,
            )
        except OSError as e:
            failure = e

        if failure is not None or returncode != 0:
            get_error_handler().error(
                ErrorCategory.PACKAGE_MANAGER,
                f"{self.cli} {self.install_command} failed",
                "package_managers",
                "install",
                exception=failure,
                details={"directory": str(directory), "returncode": returncode},
            )
            self.console.print(MESSAGES["PACKAGE_MANAGER_INSTALLATION_FAILED"], style="red")
            raise PackageManagerError(
                f"{self.cli} {self.install_command} failed in {directory}"
            )

        self.console.print()
        self.console.print(
            MESSAGES["PACKAGE_MANAGER_INSTALLATION_SUCCEED"].format(name=Path(directory).name),
            style="green",
        )
        self.console.print(MESSAGES["GET_STARTED_INFORMATION"])
        self.console.print()
        self.console.print(f"   $ cd {directory}", style="dim")
        self.console.print(f"   $ {self.start_command}", style="dim")
        self.console.print()


class NpmPackageManager(AbstractPackageManager):
    name = "NPM"
    cli = "npm"


class YarnPackageManager(AbstractPackageManager):
    name = "YARN"
    cli = "yarn"

    @property
    def start_command(self) -> str:
        return "yarn start"


class PnpmPackageManager(AbstractPackageManager):
    name = "PNPM"
    cli = "pnpm"


_MANAGERS: Dict[PackageManager, Type[AbstractPackageManager]] = {
    PackageManager.NPM: NpmPackageManager,
    PackageManager.YARN: YarnPackageManager,
    PackageManager.PNPM: PnpmPackageManager,
}

# Lock files checked in order when detecting the manager of a project
_LOCK_FILES = (
    ("yarn.lock", PackageManager.YARN),
    ("pnpm-lock.yaml", PackageManager.PNPM),
    ("package-lock.json", PackageManager.NPM),
)


class PackageManagerFactory:
    """Creates package manager wrappers by name or by project lock file."""

    @staticmethod
    def create(
        name: Union[str, PackageManager], console: Optional[Console] = None
    ) -> AbstractPackageManager:
        try:
            manager = name if isinstance(name, PackageManager) else PackageManager(name.lower())
        except ValueError:
            raise PackageManagerError(f"Package manager {name} is not managed.")
        return _MANAGERS[manager](console)

    @staticmethod
    def find(
        cwd: Optional[Union[str, Path]] = None, console: Optional[Console] = None
    ) -> AbstractPackageManager:
        """Detect the package manager of the project in ``cwd``, npm by default."""
        directory = Path(cwd or Path.cwd())
        for lock_file, manager in _LOCK_FILES:
            if (directory / lock_file).exists():
                return PackageManagerFactory.create(manager, console)
        return PackageManagerFactory.create(PackageManager.NPM, console)
