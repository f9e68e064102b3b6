"""CLI command tests using Click's CliRunner

Tests argument parsing, help text, JSON output, and mock-mode execution
paths for all CLI commands (no real API calls).
"""

import json
import pytest
from unittest.mock import patch
from pathlib import Path
from click.testing import CliRunner

from cli import main
from core.config import get_settings


# ============================================================
# Fixtures
# ============================================================

@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def isolated_runner(tmp_path, monkeypatch):
    """CliRunner in an isolated filesystem with settings pointed at it"""
    monkeypatch.setenv("CLIPFLOW_PROVIDER_MODE", "mock")
    monkeypatch.setenv("CLIPFLOW_STORAGE_DIR", str(tmp_path / "storage"))
    monkeypatch.setenv("CLIPFLOW_EXPORT_DIR", "exports")
    get_settings.cache_clear()

    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        Path("demo.mp4").write_bytes(b"\x00" * 1024)
        yield runner
    get_settings.cache_clear()


# ============================================================
# Main CLI Group
# ============================================================

class TestMainGroup:
    """Tests for the top-level CLI group."""

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "ClipFlow Studio" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_unknown_command(self, runner):
        result = runner.invoke(main, ["nonexistent"])
        assert result.exit_code != 0
        assert "No such command" in result.output or "Error" in result.output

    def test_all_commands_registered(self, runner):
        result = runner.invoke(main, ["--help"])
        for cmd in ["run", "templates", "exports", "agents", "secrets"]:
            assert cmd in result.output, f"Command '{cmd}' not found in help output"


# ============================================================
# Run Command
# ============================================================

class TestRunCommand:
    """Tests for the 'run' command."""

    def test_help(self, runner):
        result = runner.invoke(main, ["run", "--help"])
        assert result.exit_code == 0
        assert "--template" in result.output
        assert "--ai-clip" in result.output
        assert "--no-export" in result.output

    def test_requires_video(self, runner):
        result = runner.invoke(main, ["run"])
        assert result.exit_code != 0

    def test_mock_run(self, isolated_runner):
        result = isolated_runner.invoke(main, ["run", "demo.mp4", "--mock", "--storage", "memory"])
        assert result.exit_code == 0, result.output
        assert "Run Summary" in result.output
        assert "exports/default_" in result.output

    def test_mock_run_without_export(self, isolated_runner):
        result = isolated_runner.invoke(main, [
            "run", "demo.mp4", "--mock", "--storage", "memory",
            "--no-export", "--no-dedup", "--no-uniqueness", "-t", "story-arc",
        ])
        assert result.exit_code == 0, result.output
        assert "Timeline" in result.output
        assert "Export" not in result.output.split("Run Summary")[-1]

    def test_mock_run_with_ai_clip(self, isolated_runner):
        result = isolated_runner.invoke(main, [
            "run", "demo.mp4", "--mock", "--storage", "memory",
            "--no-export", "--ai-clip", "--target-duration", "30",
        ])
        assert result.exit_code == 0, result.output
        assert "Clip plan" in result.output

    def test_config_file(self, isolated_runner):
        Path("config.json").write_text(json.dumps({
            "autoExport": False,
            "scriptParams": {"length": "short"},
        }))
        result = isolated_runner.invoke(main, [
            "run", "demo.mp4", "--mock", "--storage", "memory", "-c", "config.json",
        ])
        assert result.exit_code == 0, result.output
        assert "exports/default_" not in result.output

    def test_invalid_config_exits(self, isolated_runner):
        Path("config.json").write_text(json.dumps({"uniquenessConfig": {"maxRewriteAttempts": 0}}))
        result = isolated_runner.invoke(main, [
            "run", "demo.mp4", "--mock", "--storage", "memory", "-c", "config.json",
        ])
        assert result.exit_code == 1
        assert "max_rewrite_attempts" in result.output

    def test_live_without_key_exits(self, isolated_runner):
        with patch("core.claude_client.get_api_key", return_value=None):
            result = isolated_runner.invoke(main, ["run", "demo.mp4", "--live", "--storage", "memory"])
        assert result.exit_code == 1
        assert "ANTHROPIC_API_KEY" in result.output

    def test_local_storage_then_exports(self, isolated_runner):
        result = isolated_runner.invoke(main, ["run", "demo.mp4", "--mock", "--storage", "local", "-p", "trip"])
        assert result.exit_code == 0, result.output

        result = isolated_runner.invoke(main, ["exports", "--json"])
        assert result.exit_code == 0
        records = json.loads(result.output)
        assert [r["project_id"] for r in records] == ["trip"]
        assert records[0]["file_path"].startswith("exports/trip_")


# ============================================================
# Catalog Commands
# ============================================================

class TestTemplatesCommand:
    """Tests for the 'templates' command."""

    def test_table(self, runner):
        result = runner.invoke(main, ["templates"])
        assert result.exit_code == 0
        assert "Script Templates" in result.output
        assert "story-arc" in result.output

    def test_json(self, runner):
        result = runner.invoke(main, ["templates", "--json"])
        assert result.exit_code == 0
        templates = json.loads(result.output)
        assert len(templates) >= 1
        assert all(t["sections"] for t in templates)

    def test_sections(self, runner):
        result = runner.invoke(main, ["templates", "--sections"])
        assert result.exit_code == 0
        assert "words" in result.output


class TestExportsCommand:
    """Tests for the 'exports' command."""

    def test_empty(self, isolated_runner):
        result = isolated_runner.invoke(main, ["exports"])
        assert result.exit_code == 0
        assert "No exports yet" in result.output

    def test_empty_json(self, isolated_runner):
        result = isolated_runner.invoke(main, ["exports", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == []


# ============================================================
# Agents Command
# ============================================================

class TestAgentsCommand:
    """Tests for the 'agents' command group."""

    def test_help(self, runner):
        result = runner.invoke(main, ["agents", "--help"])
        assert result.exit_code == 0
        assert "list" in result.output
        assert "schema" in result.output

    def test_list_agents(self, runner):
        result = runner.invoke(main, ["agents", "list"])
        assert result.exit_code == 0
        assert "script_writer" in result.output

    def test_list_agents_json(self, runner):
        result = runner.invoke(main, ["agents", "list", "--json"])
        assert result.exit_code == 0
        names = [a["name"] for a in json.loads(result.output)]
        assert names == ["script_writer", "clip_planner"]

    def test_schema(self, runner):
        result = runner.invoke(main, ["agents", "schema", "script_writer"])
        assert result.exit_code == 0
        assert "ScriptWriterAgent" in result.output
        assert "Inputs" in result.output

    def test_schema_unknown_agent(self, runner):
        result = runner.invoke(main, ["agents", "schema", "FakeAgent"])
        assert result.exit_code == 1
        assert "not found" in result.output


# ============================================================
# Secrets Command
# ============================================================

class TestSecretsCommand:
    """Tests for the 'secrets' command group."""

    def test_help(self, runner):
        result = runner.invoke(main, ["secrets", "--help"])
        assert result.exit_code == 0
        assert "set" in result.output

    def test_list(self, runner):
        status = {"ANTHROPIC_API_KEY": {"source": "env", "preview": "sk-a...wxyz"}}
        with patch("core.secrets.list_api_keys", return_value=status):
            result = runner.invoke(main, ["secrets", "list"])
        assert result.exit_code == 0
        assert "ANTHROPIC_API_KEY" in result.output
        assert "sk-a...wxyz" in result.output
        assert "Live runs need a key" not in result.output

    def test_list_hint_when_missing(self, runner):
        status = {"ANTHROPIC_API_KEY": {"source": "not_set", "preview": "-"}}
        with patch("core.secrets.list_api_keys", return_value=status):
            result = runner.invoke(main, ["secrets", "list"])
        assert result.exit_code == 0
        assert "CLIPFLOW_ANTHROPIC_API_KEY" in result.output

    def test_set_normalizes_name(self, runner):
        with patch("core.secrets.set_api_key", return_value=True) as mock_set:
            result = runner.invoke(main, ["secrets", "set", "anthropic", "--value", "sk-test"])
        assert result.exit_code == 0
        mock_set.assert_called_once_with("ANTHROPIC_API_KEY", "sk-test")
