"""
CLI interface tests for nest-cli.
Tests the command-line interface and main entry points.
"""

import json
from unittest.mock import patch

import click
import pytest
from click.testing import CliRunner

from nest_cli.error_handling import ErrorCategory, PackageManagerError, SchematicsError
from nest_cli.main import cli
from nest_cli.structured_logging import get_info_logger, get_new_logger


def command_strings(execute_mock):
    schematic, options = execute_mock.call_args[0]
    return schematic, [option.to_command_string() for option in options]


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "info" in result.output
        assert "new" in result.output

    def test_cli_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_no_command_shows_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, [])

        assert result.exit_code == 0
        assert "Usage" in result.output


class TestInfoCommand:
    """Test the info command output."""

    def test_system_and_cli_sections(self, sample_package_json, fake_tools):
        runner = CliRunner()
        result = runner.invoke(cli, ["info"])

        assert result.exit_code == 0
        assert "[System Information]" in result.output
        assert "NodeJS Version : v18.12.0" in result.output
        assert "NPM Version    : 9.8.1" in result.output
        assert "Nest CLI Version : 1.0.0" in result.output

    def test_dependency_listing_is_aligned(self, sample_package_json, fake_tools):
        runner = CliRunner()
        result = runner.invoke(cli, ["info"])

        assert "[Nest Platform Information]" in result.output
        assert "platform-express version : 9.0.5" in result.output
        assert "core version             : 9.0.0" in result.output
        assert "testing version          : 8.4.0" in result.output

    def test_minor_version_warnings(self, sample_package_json, fake_tools):
        runner = CliRunner()
        result = runner.invoke(cli, ["info"])
        output = result.output

        assert "[Warnings]" in output
        assert "The following packages are not in the same minor version" in output
        assert output.index("* Under version 9.1") < output.index("* Under version 9.0")
        assert "- @nestjs/common 9.1.2" in output
        assert "- @nestjs/core 9.0.0" in output
        assert "- @nestjs/platform-express 9.0.5" in output
        assert "- @nestjs/testing" not in output
        assert "- @nestjs/cli" not in output

    def test_no_warnings_for_aligned_versions(self, aligned_package_json, fake_tools):
        runner = CliRunner()
        result = runner.invoke(cli, ["info"])

        assert result.exit_code == 0
        assert "common version : 9.0.3" in result.output
        assert "[Warnings]" not in result.output

    def test_missing_manifest(self, fake_tools):
        runner = CliRunner()
        result = runner.invoke(cli, ["info"])

        assert result.exit_code == 0
        assert "cannot read your project package.json file" in result.output
        assert "[Warnings]" not in result.output

    def test_unknown_package_manager_version(self, sample_package_json, missing_tools):
        runner = CliRunner()
        result = runner.invoke(cli, ["info"])

        assert result.exit_code == 0
        assert "NodeJS Version : Unknown" in result.output
        assert "NPM Version    : Unknown" in result.output

    def test_json_output(self, sample_package_json, fake_tools):
        runner = CliRunner()
        result = runner.invoke(cli, ["info", "--output-format", "json"])

        assert result.exit_code == 0
        document = json.loads(result.output)
        assert document["cli"]["version"] == "1.0.0"
        assert document["system"]["node_version"] == "v18.12.0"
        assert list(document["warnings"]) == ["9.1", "9.0"]
        assert document["warnings"]["9.1"] == [
            {"name": "@nestjs/common", "version": "9.1.2"}
        ]
        assert "error" not in document

    def test_json_output_without_manifest(self, fake_tools):
        runner = CliRunner()
        result = runner.invoke(cli, ["info", "--output-format", "json"])

        document = json.loads(result.output)
        assert document["dependencies"] == []
        assert "package.json" in document["error"]


class TestNewCommand:
    """Test the new command flow."""

    @patch("nest_cli.main.PackageManagerFactory.create")
    @patch("nest_cli.main.CollectionFactory.create")
    def test_dry_run(self, mock_collection, mock_manager):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["new", "MyApp", "An app", "0.0.1", "Jane", "--dry-run"]
        )

        assert result.exit_code == 0
        schematic, options = command_strings(mock_collection.return_value.execute)
        assert schematic == "application"
        assert options == [
            "--name=my-app",
            "--description=An app",
            "--version=0.0.1",
            "--author=Jane",
            "--dry-run",
        ]
        assert "dry run mode" in result.output
        mock_manager.assert_not_called()

    @patch("nest_cli.main.PackageManagerFactory.create")
    @patch("nest_cli.main.CollectionFactory.create")
    def test_prompts_for_missing_information(self, mock_collection, mock_manager):
        runner = CliRunner()
        result = runner.invoke(cli, ["new", "--skip-install"], input="\n\n\n\n")

        assert result.exit_code == 0
        _, options = command_strings(mock_collection.return_value.execute)
        assert options == [
            "--name=nestjs-app-name",
            "--description=description",
            "--version=1.0.0",
            "--author=",
            "--no-dry-run",
        ]
        mock_manager.assert_not_called()

    @patch("nest_cli.main.PackageManagerFactory.create")
    @patch("nest_cli.main.CollectionFactory.create")
    def test_prompt_answers_are_used(self, mock_collection, mock_manager):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["new", "given-name", "--skip-install"], input="My desc\n2.0.0\nBob\n"
        )

        assert result.exit_code == 0
        _, options = command_strings(mock_collection.return_value.execute)
        assert options[:4] == [
            "--name=given-name",
            "--description=My desc",
            "--version=2.0.0",
            "--author=Bob",
        ]

    @patch("nest_cli.main.PackageManagerFactory.create")
    @patch("nest_cli.main.CollectionFactory.create")
    def test_installs_with_selected_package_manager(
        self, mock_collection, mock_manager, temp_dir
    ):
        runner = CliRunner()
        result = runner.invoke(cli, ["new", "my-app", "d", "1.0.0", "a", "-p", "yarn"])

        assert result.exit_code == 0
        assert mock_manager.call_args[0][0] == "yarn"
        directory = mock_manager.return_value.install.call_args[0][0]
        assert directory.name == "my-app"
        assert directory.parent.resolve() == temp_dir.resolve()

    @patch("nest_cli.main.PackageManagerFactory.create")
    @patch("nest_cli.main.CollectionFactory.create")
    def test_asks_for_package_manager(self, mock_collection, mock_manager):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["new", "my-app", "d", "1.0.0", "a"], input="pnpm\n"
        )

        assert result.exit_code == 0
        assert mock_manager.call_args[0][0] == "pnpm"
        mock_manager.return_value.install.assert_called_once()

    @patch("nest_cli.main.PackageManagerFactory.create")
    @patch("nest_cli.main.CollectionFactory.create")
    def test_configured_package_manager(
        self, mock_collection, mock_manager, monkeypatch
    ):
        monkeypatch.setenv("NEST_CLI_PACKAGE_MANAGER", "yarn")

        runner = CliRunner()
        result = runner.invoke(cli, ["new", "my-app", "d", "1.0.0", "a"])

        assert result.exit_code == 0
        assert mock_manager.call_args[0][0] == "yarn"

    @patch("nest_cli.main.PackageManagerFactory.create")
    @patch("nest_cli.main.CollectionFactory.create")
    def test_configured_skip_install(self, mock_collection, mock_manager, monkeypatch):
        monkeypatch.setenv("NEST_CLI_SKIP_INSTALL", "true")

        runner = CliRunner()
        result = runner.invoke(cli, ["new", "my-app", "d", "1.0.0", "a"])

        assert result.exit_code == 0
        mock_manager.assert_not_called()

    @patch("nest_cli.main.CollectionFactory.create")
    def test_custom_collection(self, mock_collection):
        runner = CliRunner()
        runner.invoke(
            cli, ["new", "app", "d", "1.0.0", "a", "-c", "@acme/schematics", "-d"]
        )

        assert mock_collection.call_args[0][0] == "@acme/schematics"

    @patch("nest_cli.main.CollectionFactory.create")
    def test_schematic_failure(self, mock_collection):
        mock_collection.return_value.execute.side_effect = SchematicsError(
            "runner exploded"
        )

        runner = CliRunner()
        result = runner.invoke(cli, ["new", "app", "d", "1.0.0", "a"])

        assert result.exit_code == 1
        assert "runner exploded" in result.output
        assert get_new_logger().command_context == {}
        assert get_info_logger().command_context == {}

    @patch("nest_cli.main.get_error_handler")
    @patch("nest_cli.main.ask_for_missing_information")
    def test_aborted_prompt_is_reported(self, mock_ask, mock_handler):
        mock_ask.side_effect = click.Abort()

        runner = CliRunner()
        result = runner.invoke(cli, ["new"])

        assert result.exit_code == 1
        assert "Aborted" in result.output
        category = mock_handler.return_value.handle_error.call_args[0][1]
        assert category == ErrorCategory.PROMPT
        assert get_new_logger().command_context == {}

    @patch("nest_cli.main.PackageManagerFactory.create")
    @patch("nest_cli.main.CollectionFactory.create")
    def test_install_failure(self, mock_collection, mock_manager):
        mock_manager.return_value.install.side_effect = PackageManagerError(
            "npm install failed"
        )

        runner = CliRunner()
        result = runner.invoke(cli, ["new", "app", "d", "1.0.0", "a", "-p", "npm"])

        assert result.exit_code == 1
        assert "npm install failed" in result.output


class TestConfigCommands:
    """Test configuration management commands."""

    def test_config_init(self, temp_dir):
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "init"])

        assert result.exit_code == 0
        created = json.loads((temp_dir / ".nest-cli.json").read_text())
        assert created["schematics"]["collection"] == "@nestjs/schematics"

    def test_config_init_keeps_existing_file(self, temp_dir):
        (temp_dir / ".nest-cli.json").write_text("{}")

        runner = CliRunner()
        result = runner.invoke(cli, ["config", "init"])

        assert "already exists" in result.output
        assert (temp_dir / ".nest-cli.json").read_text() == "{}"

    def test_config_show(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0
        assert "@nestjs/schematics" in result.output

    def test_config_show_json(self, temp_dir):
        (temp_dir / ".nest-cli.json").write_text(
            json.dumps({"install": {"package_manager": "pnpm"}})
        )

        runner = CliRunner()
        result = runner.invoke(cli, ["config", "show", "--output-format", "json"])

        assert json.loads(result.output)["install"]["package_manager"] == "pnpm"

    @pytest.mark.parametrize(
        "content,exit_code",
        [
            ({"install": {"package_manager": "yarn"}}, 0),
            ({"install": {"package_manager": "bower"}}, 1),
            ({"logging": {"log_level": "LOUD"}}, 1),
        ],
    )
    def test_config_validate(self, temp_dir, content, exit_code):
        config_file = temp_dir / "candidate.json"
        config_file.write_text(json.dumps(content))

        runner = CliRunner()
        result = runner.invoke(cli, ["config", "validate", str(config_file)])

        assert result.exit_code == exit_code

    @patch("nest_cli.main.get_error_handler")
    def test_config_validate_reports_errors(self, mock_handler, temp_dir):
        config_file = temp_dir / "candidate.yaml"
        config_file.write_text("install:\n  package_manager: bower\n")

        runner = CliRunner()
        result = runner.invoke(cli, ["config", "validate", str(config_file)])

        assert result.exit_code == 1
        category = mock_handler.return_value.warning.call_args[0][0]
        assert category == ErrorCategory.CONFIGURATION
