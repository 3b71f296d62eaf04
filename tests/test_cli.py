"""Tests for CLI commands."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from bibfinder.cli import _setup_logging, app


runner = CliRunner()

SMITH_PDF = "/Users/alex/Documents/Bibliography/storage/ABC12345/Smith2024.pdf"


class TestSetupLogging:
    """Tests for _setup_logging helper."""

    def test_setup_logging_verbose(self) -> None:
        """Verbose mode sets DEBUG level."""
        with patch("bibfinder.cli.logging.basicConfig") as mock_config:
            _setup_logging(verbose=True)
            mock_config.assert_called_once()
            assert mock_config.call_args[1]["level"] == logging.DEBUG

    def test_setup_logging_normal(self) -> None:
        """Normal mode sets INFO level."""
        with patch("bibfinder.cli.logging.basicConfig") as mock_config:
            _setup_logging(verbose=False)
            mock_config.assert_called_once()
            assert mock_config.call_args[1]["level"] == logging.INFO


class TestPathCommand:
    """Tests for the path command."""

    def test_path_found(self, json_export: Path, bib_export: Path) -> None:
        """Shows the descriptor of the matching entry."""
        result = runner.invoke(
            app,
            ["path", SMITH_PDF, "--json-export", str(json_export), "--bib-export", str(bib_export)],
        )
        assert result.exit_code == 0
        assert "smith2024deep" in result.stdout
        assert "structured" in result.stdout

    def test_path_raw_output(self, json_export: Path) -> None:
        """Prints the result envelope as JSON."""
        result = runner.invoke(app, ["path", SMITH_PDF, "--json-export", str(json_export), "--raw"])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["success"] is True
        assert payload["descriptor"]["citationKey"] == "smith2024deep"

    def test_path_not_found(self, json_export: Path, bib_export: Path) -> None:
        """Lists every source error and exits non-zero."""
        result = runner.invoke(
            app,
            [
                "path",
                "/nowhere/item.pdf",
                "--json-export",
                str(json_export),
                "--bib-export",
                str(bib_export),
            ],
        )
        assert result.exit_code == 1
        assert result.stdout.count("No matching entry") == 2

    def test_path_not_configured(self) -> None:
        """Reports missing configuration."""
        result = runner.invoke(app, ["path", SMITH_PDF])
        assert result.exit_code == 1
        assert "No bibliography metadata files configured" in result.stdout


class TestCiteCommand:
    """Tests for the cite command."""

    def test_cite_found_in_text_export(self, json_export: Path, bib_export: Path) -> None:
        """Falls back to the BibTeX export."""
        result = runner.invoke(
            app,
            [
                "cite",
                "garcia2021context",
                "--json-export",
                str(json_export),
                "--bib-export",
                str(bib_export),
                "-v",
            ],
        )
        assert result.exit_code == 0
        assert "garcia2021context" in result.stdout
        assert "text" in result.stdout

    def test_cite_raw_failure(self, json_export: Path) -> None:
        """Prints the failure envelope and exits non-zero."""
        result = runner.invoke(app, ["cite", "unknown-key", "--json-export", str(json_export), "--raw"])
        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["success"] is False
        assert len(payload["errors"]) == 1


class TestWebCommand:
    """Tests for the web command."""

    def test_web_starts_server(self) -> None:
        """Starts uvicorn server with correct parameters."""
        with patch("uvicorn.run") as mock_uvicorn_run:
            result = runner.invoke(app, ["web", "--host", "0.0.0.0", "--port", "9000"])
            assert result.exit_code == 0
            mock_uvicorn_run.assert_called_once()
            call_kwargs = mock_uvicorn_run.call_args[1]
            assert call_kwargs["host"] == "0.0.0.0"
            assert call_kwargs["port"] == 9000
