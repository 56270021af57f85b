"""
Integration tests for CLI commands.

Tests the basic functionality of CLI commands and error handling.
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from gallery_provider.cli import app

runner = CliRunner()


@pytest.fixture
def db_args(tmp_path: Path) -> list[str]:
    return ["--db", str(tmp_path / "gallery_source.db")]


class TestCLIHelp:
    """Test CLI help and usage information."""

    def test_main_help(self):
        """Main help should display available commands."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("add", "list", "remove", "cache", "metadata", "type", "info"):
            assert command in result.stdout

    def test_remove_help(self):
        result = runner.invoke(app, ["remove", "--help"])

        assert result.exit_code == 0
        assert "--where" in result.stdout
        assert "--arg" in result.stdout


class TestChosenPhotoCommands:
    def test_add_then_list(self, db_args):
        result = runner.invoke(app, db_args + ["add", "content://a", "content://b"])
        assert result.exit_code == 0
        assert result.stdout.count("Added") == 2

        result = runner.invoke(app, db_args + ["list"])
        assert result.exit_code == 0
        assert "content://a" in result.stdout
        assert "content://b" in result.stdout

    def test_list_empty(self, db_args):
        result = runner.invoke(app, db_args + ["list"])

        assert result.exit_code == 0
        assert "No chosen photos" in result.stdout

    def test_remove_with_filter(self, db_args):
        runner.invoke(app, db_args + ["add", "content://a", "content://b"])

        result = runner.invoke(app, db_args + ["remove", "--where", "uri = ?", "--arg", "content://a"])
        assert result.exit_code == 0
        assert "Removed 1 photo(s)" in result.stdout

        result = runner.invoke(app, db_args + ["list"])
        assert "content://a" not in result.stdout
        assert "content://b" in result.stdout


class TestMetadataCommands:
    def test_cache_then_metadata(self, db_args):
        result = runner.invoke(
            app, db_args + ["cache", "content://a", "--datetime", "1500", "--location", "Oslo"]
        )
        assert result.exit_code == 0

        result = runner.invoke(app, db_args + ["metadata"])
        assert result.exit_code == 0
        assert "1500" in result.stdout
        assert "Oslo" in result.stdout

    def test_info_reports_counts(self, db_args):
        runner.invoke(app, db_args + ["add", "content://a"])

        result = runner.invoke(app, db_args + ["info"])
        assert result.exit_code == 0
        assert "Schema Version:" in result.stdout
        assert "Chosen Photos:" in result.stdout


class TestCLIErrorHandling:
    """Test CLI error handling for invalid inputs."""

    def test_type_of_table(self, db_args):
        result = runner.invoke(
            app, db_args + ["type", "content://com.google.android.apps.muzei.gallery/chosen_photos"]
        )

        assert result.exit_code == 0
        assert "vnd.android.cursor.dir" in result.stdout

    def test_type_of_unknown_uri_fails(self, db_args):
        result = runner.invoke(app, db_args + ["type", "content://elsewhere/things"])

        assert result.exit_code == 1
        assert "Unknown URI" in result.stdout

    def test_bad_filter_fails(self, db_args):
        result = runner.invoke(app, db_args + ["remove", "--where", "no_such_column = 1"])

        assert result.exit_code == 1
        assert "Error" in result.stdout
