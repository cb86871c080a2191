"""
Shared fixtures for nest-cli tests.
"""

import json
import logging
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from nest_cli.cli_config import reset_config
from nest_cli.structured_logging import configure_logging


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Run every test from an empty directory with default configuration."""
    home = tmp_path / "home"
    home.mkdir()
    workdir = tmp_path / "work"
    workdir.mkdir()

    monkeypatch.setenv("HOME", str(home))
    for key in [
        "NEST_CLI_PACKAGE_MANAGER",
        "NEST_CLI_SKIP_INSTALL",
        "NEST_CLI_COLLECTION",
        "NEST_CLI_SCHEMATICS_BIN",
        "NEST_CLI_DEFAULT_AUTHOR",
        "NEST_CLI_LOG_LEVEL",
        "NEST_CLI_LOG_FILE",
    ]:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(workdir)

    reset_config()
    yield workdir
    reset_config()
    _drop_file_handlers()
    configure_logging("WARNING")


def _drop_file_handlers():
    names = [name for name in logging.root.manager.loggerDict if name.startswith("nest_cli")]
    for logger in [logging.getLogger(name) for name in names]:
        for handler in list(logger.handlers):
            if isinstance(handler, logging.FileHandler):
                logger.removeHandler(handler)
                handler.close()


@pytest.fixture
def temp_dir(isolated_environment):
    """The working directory of the test."""
    return isolated_environment


def write_package_json(directory: Path, content: dict) -> Path:
    path = directory / "package.json"
    path.write_text(json.dumps(content, indent=2), encoding="utf-8")
    return path


def install_package(directory: Path, name: str, version: str) -> Path:
    """Create ``node_modules/<name>/package.json`` below ``directory``."""
    package_dir = directory / "node_modules" / name
    package_dir.mkdir(parents=True)
    return write_package_json(package_dir, {"name": name, "version": version})


@pytest.fixture
def installed_package(temp_dir):
    """Factory creating installed packages in the working directory."""

    def install(name: str, version: str, directory: Path = None) -> Path:
        return install_package(directory or temp_dir, name, version)

    return install


@pytest.fixture
def sample_package_json(temp_dir):
    """A Nest project manifest with skewed minor versions."""
    return write_package_json(
        temp_dir,
        {
            "name": "sample-app",
            "version": "0.0.1",
            "dependencies": {
                "@nestjs/common": "^9.1.2",
                "@nestjs/core": "^9.0.0",
                "@nestjs/platform-express": "~9.0.5",
                "reflect-metadata": "^0.1.13",
                "rxjs": "^7.2.0",
            },
            "devDependencies": {
                "@nestjs/cli": "^9.0.0",
                "@nestjs/testing": "^8.4.0",
                "typescript": "^4.7.4",
            },
        },
    )


@pytest.fixture
def aligned_package_json(temp_dir):
    """A Nest project manifest whose core packages agree on 9.0."""
    return write_package_json(
        temp_dir,
        {
            "dependencies": {
                "@nestjs/common": "9.0.3",
                "@nestjs/core": "9.0.0",
            }
        },
    )


@pytest.fixture
def fake_tools():
    """
    Replace external tools with canned answers.

    ``node --version`` reports v18.12.0 and every package manager 9.8.1;
    any other command succeeds silently. The mock records every call.
    """

    def run(command, **kwargs):
        if command[-1] == "--version":
            stdout = "v18.12.0\n" if command[0] == "node" else "9.8.1\n"
        else:
            stdout = ""
        return subprocess.CompletedProcess(command, 0, stdout=stdout, stderr="")

    with patch("nest_cli.runner.subprocess.run", side_effect=run) as mock_run:
        yield mock_run


@pytest.fixture
def missing_tools():
    """Every external tool is missing from PATH."""
    with patch(
        "nest_cli.runner.subprocess.run",
        side_effect=FileNotFoundError("No such file or directory"),
    ) as mock_run:
        yield mock_run
