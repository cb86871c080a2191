"""
Configuration management for nest-cli.

Provides configurable prompt defaults, package-manager selection, the
schematics collection used to generate projects, and logging settings.
Values come from a config file, then ``NEST_CLI_*`` environment variables.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml
import yaml
from rich.console import Console

from .error_handling import ErrorCategory, get_error_handler

console = Console(stderr=True)

SUPPORTED_PACKAGE_MANAGERS = ("npm", "yarn", "pnpm")


@dataclass
class ProjectConfig:
    """Defaults offered when prompting for project information."""

    default_name: str = "nestjs-app-name"
    default_description: str = "description"
    default_version: str = "1.0.0"
    default_author: str = ""


@dataclass
class InstallConfig:
    """Package installation configuration."""

    package_manager: Optional[str] = None
    skip_install: bool = False


@dataclass
class SchematicsConfig:
    """Template generation configuration."""

    collection: str = "@nestjs/schematics"
    binary: str = "schematics"
    extra_args: List[str] = field(default_factory=list)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    log_level: str = "WARNING"
    enable_file_logging: bool = False
    log_file_path: Optional[str] = None
    # None writes JSON records; a logging format string writes plain lines
    log_format: Optional[str] = None


@dataclass
class ComprehensiveConfig:
    """Main configuration containing all subsections."""

    project: ProjectConfig = field(default_factory=ProjectConfig)
    install: InstallConfig = field(default_factory=InstallConfig)
    schematics: SchematicsConfig = field(default_factory=SchematicsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Global configuration instance
_global_config: Optional[ComprehensiveConfig] = None


def validate_config_values(config: ComprehensiveConfig) -> List[str]:
    """
    Validate configuration values and return any errors.

    Args:
        config: Configuration to validate

    Returns:
        List[str]: List of validation errors (empty if valid)
    """
    errors = []

    if (
        config.install.package_manager is not None
        and config.install.package_manager not in SUPPORTED_PACKAGE_MANAGERS
    ):
        errors.append(
            "install.package_manager must be one of "
            f"{', '.join(SUPPORTED_PACKAGE_MANAGERS)}"
        )
    if not config.schematics.collection:
        errors.append("schematics.collection must not be empty")
    if not config.schematics.binary:
        errors.append("schematics.binary must not be empty")
    if config.logging.log_level.upper() not in (
        "DEBUG",
        "INFO",
        "WARNING",
        "ERROR",
        "CRITICAL",
    ):
        errors.append(f"logging.log_level is not a valid level: {config.logging.log_level}")
    if config.logging.enable_file_logging and not config.logging.log_file_path:
        errors.append("logging.log_file_path is required when file logging is enabled")

    return errors


def load_config_file(config_path: Path) -> Optional[Dict[str, Any]]:
    """Load config from a JSON, YAML or TOML file."""
    if not config_path.exists():
        return None

    try:
        with open(config_path, encoding="utf-8") as f:
            suffix = config_path.suffix.lower()
            if suffix in [".yaml", ".yml"]:
                return yaml.safe_load(f)
            elif suffix == ".toml":
                return toml.load(f)
            elif suffix == ".json":
                return json.load(f)
    except Exception as e:
        get_error_handler().warning(
            ErrorCategory.CONFIGURATION,
            f"Cannot load config file: {e}",
            "cli_config",
            "load_config_file",
            exception=e,
            details={"file_path": str(config_path)},
        )
        console.print(
            f"⚠️  Error loading config from {config_path}: {e}", style="yellow"
        )

    return None


def find_config_file() -> Optional[Path]:
    """Find config file in standard locations."""
    locations = [
        Path.cwd() / ".nest-cli.json",
        Path.cwd() / ".nest-cli.yaml",
        Path.cwd() / ".nest-cli.yml",
        Path.cwd() / ".nest-cli.toml",
        Path.home() / ".config" / "nest-cli" / "config.json",
        Path.home() / ".nest-cli.json",
    ]

    for location in locations:
        if location.exists():
            return location

    return None


def load_environment_overrides(config: ComprehensiveConfig) -> None:
    """Load environment variable overrides."""

    def get_env_bool(key: str, default: bool = False) -> bool:
        value = os.environ.get(key, "").lower()
        return value in ["true", "1", "yes", "on"] if value else default

    if package_manager := os.environ.get("NEST_CLI_PACKAGE_MANAGER"):
        config.install.package_manager = package_manager.lower()
    config.install.skip_install = get_env_bool(
        "NEST_CLI_SKIP_INSTALL", config.install.skip_install
    )

    if collection := os.environ.get("NEST_CLI_COLLECTION"):
        config.schematics.collection = collection
    if binary := os.environ.get("NEST_CLI_SCHEMATICS_BIN"):
        config.schematics.binary = binary

    if author := os.environ.get("NEST_CLI_DEFAULT_AUTHOR"):
        config.project.default_author = author

    if log_level := os.environ.get("NEST_CLI_LOG_LEVEL"):
        config.logging.log_level = log_level.upper()
    if log_file := os.environ.get("NEST_CLI_LOG_FILE"):
        config.logging.log_file_path = log_file
        config.logging.enable_file_logging = True


def apply_config_section(
    config: Any, section_data: Dict[str, Any], section_name: str
) -> None:
    """Apply configuration from dictionary to config section."""
    for key, value in section_data.items():
        if hasattr(config, key):
            setattr(config, key, value)
        else:
            console.print(
                f"⚠️  Unknown config key in {section_name}: {key}", style="yellow"
            )


def load_config() -> ComprehensiveConfig:
    """Load configuration from file and environment."""
    global _global_config

    if _global_config is not None:
        return _global_config

    config = ComprehensiveConfig()

    config_file = find_config_file()
    if config_file:
        file_config = load_config_file(config_file)
        if file_config:
            for section_name in ("project", "install", "schematics", "logging"):
                if isinstance(file_config.get(section_name), dict):
                    apply_config_section(
                        getattr(config, section_name),
                        file_config[section_name],
                        section_name,
                    )

    load_environment_overrides(config)

    validation_errors = validate_config_values(config)
    if validation_errors:
        get_error_handler().warning(
            ErrorCategory.CONFIGURATION,
            "Invalid configuration values replaced by defaults",
            "cli_config",
            "load_config",
            details={
                "errors": validation_errors,
                "file_path": str(config_file) if config_file else None,
            },
        )
        console.print("⚠️  Configuration validation errors:", style="red")
        for error in validation_errors:
            console.print(f"  • {error}", style="red")
        console.print("Using default values for invalid settings.", style="yellow")
        defaults = ComprehensiveConfig()
        if any(error.startswith("install.") for error in validation_errors):
            config.install = defaults.install
        if any(error.startswith("schematics.") for error in validation_errors):
            config.schematics = defaults.schematics
        if any(error.startswith("logging.") for error in validation_errors):
            config.logging = defaults.logging

    _global_config = config
    return config


def get_config() -> ComprehensiveConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _global_config
    _global_config = None


def create_sample_config() -> str:
    """Generate sample configuration."""
    sample_config = {
        "project": {
            "default_name": "nestjs-app-name",
            "default_description": "description",
            "default_version": "1.0.0",
            "default_author": "",
        },
        "install": {
            "package_manager": None,
            "skip_install": False,
        },
        "schematics": {
            "collection": "@nestjs/schematics",
            "binary": "schematics",
            "extra_args": [],
        },
        "logging": {
            "log_level": "WARNING",
            "enable_file_logging": False,
            "log_file_path": None,
            "log_format": None,
        },
    }

    return json.dumps(sample_config, indent=2)
