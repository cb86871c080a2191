import json
import sys
import time
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.panel import Panel

from .cli_config import (
    SUPPORTED_PACKAGE_MANAGERS,
    ComprehensiveConfig,
    apply_config_section,
    create_sample_config,
    get_config,
    load_config,
    load_config_file,
    validate_config_values,
)
from .error_handling import (
    ErrorCategory,
    ErrorLevel,
    ManifestError,
    NestCliError,
    get_error_handler,
)
from .manifest import NestReport, build_nest_report, read_project_dependencies
from .package_managers import PackageManagerFactory
from .prompts import ask_for_missing_information, select_package_manager
from .reporting import (
    InfoReporter,
    build_info_document,
    collect_system_information,
    output_json_info,
)
from .schematics import CollectionFactory, dasherize, parse_schematic_options
from .structured_logging import (
    configure_logging,
    log_command_complete,
    log_command_start,
)
from .ui import MESSAGES

__version__ = "1.0.0"

console = Console()


def gather_nest_report(cwd: Path) -> Tuple[Optional[NestReport], Optional[str]]:
    """Read the project manifest and build the Nest report."""
    try:
        dependencies = read_project_dependencies(cwd)
    except ManifestError as e:
        return None, str(e)
    return build_nest_report(dependencies, cwd), None


def _elapsed_ms(start: float) -> int:
    return int((time.time() - start) * 1000)


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version information")
@click.pass_context
def cli(ctx, version):
    """
    Nest CLI: scaffold and inspect Nest applications.
    """
    if version:
        console.print(f"Nest CLI version {__version__}", style="bold blue")
        ctx.exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        return

    config = get_config()
    configure_logging(
        config.logging.log_level,
        log_file_path=(
            config.logging.log_file_path
            if config.logging.enable_file_logging
            else None
        ),
        log_format=config.logging.log_format,
    )


@cli.command()
@click.option(
    "--output-format",
    type=click.Choice(["console", "json"], case_sensitive=False),
    default="console",
    help="Output format for the diagnostics",
    show_default=True,
)
def info(output_format: str) -> None:
    """
    Display Nest project details.

    Shows the system, the CLI version and the installed Nest packages, and
    warns when core Nest packages are not on the same minor version.

    Examples:

      nest-py info

      nest-py info --output-format json
    """
    start = time.time()
    cwd = Path.cwd()
    log_command_start("info", str(cwd), output_format=output_format)

    manager = PackageManagerFactory.find(cwd, console=console)
    system = collect_system_information(manager)
    report, error = gather_nest_report(cwd)

    if output_format.lower() == "json":
        output_json_info(build_info_document(system, __version__, report, error))
    else:
        reporter = InfoReporter(console)
        reporter.print_banner()
        reporter.print_system_information(system)
        reporter.print_cli_version(__version__)
        reporter.print_nest_information(report, error)

    log_command_complete(
        "info",
        _elapsed_ms(start),
        manifest_found=report is not None,
        minor_versions=list(report.warnings) if report else [],
    )


@cli.command()
@click.argument("name", required=False)
@click.argument("description", required=False)
@click.argument("version", required=False)
@click.argument("author", required=False)
@click.option(
    "--dry-run",
    "-d",
    is_flag=True,
    help="Report the changes that would be made without writing files",
)
@click.option(
    "--skip-install",
    "-s",
    is_flag=True,
    help="Skip installing the project dependencies",
)
@click.option(
    "--package-manager",
    "-p",
    type=click.Choice(list(SUPPORTED_PACKAGE_MANAGERS), case_sensitive=False),
    help="Package manager used to install dependencies",
)
@click.option(
    "--collection",
    "-c",
    help="Schematics collection used to generate the project",
)
def new(
    name: Optional[str],
    description: Optional[str],
    version: Optional[str],
    author: Optional[str],
    dry_run: bool,
    skip_install: bool,
    package_manager: Optional[str],
    collection: Optional[str],
) -> None:
    """
    Generate a new Nest application.

    Missing project information is asked for interactively.

    Examples:

      nest-py new

      nest-py new my-app "My application" 0.0.1 "Jane Doe"

      nest-py new my-app --dry-run

      nest-py new my-app -p yarn
    """
    start = time.time()
    config = get_config()
    log_command_start("new", str(Path.cwd()), dry_run=dry_run)

    try:
        project = ask_for_missing_information(
            name, description, version, author, console=console
        )
        options = parse_schematic_options(
            project.as_schematic_args(), {"dry-run": dry_run}
        )
        CollectionFactory.create(collection, console=console).execute(
            "application", options
        )

        if dry_run:
            console.print(MESSAGES["DRY_RUN_MODE"], style="green")
        elif not (skip_install or config.install.skip_install):
            console.print()
            manager_name = (
                package_manager
                or config.install.package_manager
                or select_package_manager()
            )
            directory = Path.cwd() / dasherize(project.name)
            PackageManagerFactory.create(manager_name, console=console).install(
                directory
            )
    except click.Abort:
        get_error_handler().handle_error(
            ErrorLevel.INFO,
            ErrorCategory.PROMPT,
            "Project creation aborted at a prompt",
            "main",
            "new",
        )
        raise
    except KeyboardInterrupt:
        Console(stderr=True).print("\n⚠️  Interrupted by user", style="yellow")
        sys.exit(130)
    except NestCliError as e:
        raise click.ClickException(str(e))
    finally:
        log_command_complete("new", _elapsed_ms(start), dry_run=dry_run)


@cli.group()
def config():
    """Configuration management commands."""
    pass


@config.command("init")
@click.option(
    "--path",
    type=click.Path(),
    default=".nest-cli.json",
    help="Path where to create the config file",
    show_default=True,
)
@click.option("--force", is_flag=True, help="Overwrite existing config file")
def config_init(path: str, force: bool):
    """Create a sample configuration file."""
    config_path = Path(path)

    if config_path.exists() and not force:
        console.print(f"⚠️  Config file already exists at {config_path}", style="yellow")
        console.print("Use --force to overwrite", style="dim")
        return

    try:
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_sample_config())
    except OSError as e:
        raise click.ClickException(f"Failed to create config file: {e}")

    console.print(f"✅ Created configuration file at {config_path}", style="green")
    console.print("Edit this file to customize your settings", style="dim")


@config.command("show")
@click.option(
    "--output-format",
    type=click.Choice(["console", "json"], case_sensitive=False),
    default="console",
    show_default=True,
)
def config_show(output_format: str):
    """Show current configuration settings."""
    current_config = load_config()

    if output_format.lower() == "json":
        print(
            json.dumps(
                {
                    "project": vars(current_config.project),
                    "install": vars(current_config.install),
                    "schematics": vars(current_config.schematics),
                    "logging": vars(current_config.logging),
                },
                indent=2,
            )
        )
        return

    console.print(Panel("[bold blue]🔧 Configuration[/bold blue]", border_style="blue"))

    console.print("\n[bold cyan]📝 Project Defaults:[/bold cyan]")
    console.print(f"  Name: {current_config.project.default_name}")
    console.print(f"  Description: {current_config.project.default_description}")
    console.print(f"  Version: {current_config.project.default_version}")
    console.print(f"  Author: {current_config.project.default_author or '-'}")

    console.print("\n[bold cyan]📦 Install Settings:[/bold cyan]")
    console.print(f"  Package Manager: {current_config.install.package_manager or 'ask'}")
    console.print(f"  Skip Install: {current_config.install.skip_install}")

    console.print("\n[bold cyan]🧩 Schematics Settings:[/bold cyan]")
    console.print(f"  Collection: {current_config.schematics.collection}", highlight=False)
    console.print(f"  Runner: {current_config.schematics.binary}")

    console.print("\n[bold cyan]📝 Logging Settings:[/bold cyan]")
    console.print(f"  Log Level: {current_config.logging.log_level}")
    console.print(f"  File Logging: {current_config.logging.enable_file_logging}")


@config.command("validate")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
def config_validate(config_file: str):
    """Validate a configuration file."""
    config_data = load_config_file(Path(config_file))

    if not isinstance(config_data, dict):
        raise click.ClickException(f"Could not load config from {config_file}")

    candidate = ComprehensiveConfig()
    for section_name in ("project", "install", "schematics", "logging"):
        if isinstance(config_data.get(section_name), dict):
            apply_config_section(
                getattr(candidate, section_name), config_data[section_name], section_name
            )

    errors = validate_config_values(candidate)
    if errors:
        get_error_handler().warning(
            ErrorCategory.CONFIGURATION,
            "Configuration file failed validation",
            "main",
            "config_validate",
            details={"file_path": config_file, "errors": errors},
        )
        console.print("❌ Configuration validation failed:", style="red")
        for error in errors:
            console.print(f"  • {error}", style="red")
        sys.exit(1)

    console.print(f"✅ Configuration file {config_file} is valid", style="green")


if __name__ == "__main__":
    cli()
