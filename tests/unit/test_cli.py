"""Tests for the command-line interface."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner
from rich.console import Console

from jobquarry import cli as cli_module
from jobquarry.cli import cli


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli_module, "configure_logging", MagicMock())
    monkeypatch.setattr(cli_module, "console", Console(width=200))
    return CliRunner()


@pytest.mark.unit
class TestCli:
    def test_catalog_lists_rules(self, runner):
        result = runner.invoke(cli, ["catalog"])
        assert result.exit_code == 0
        assert "Selector Catalog" in result.output
        assert "show-more-less-html__markup" in result.output

    def test_log_level_override(self, runner):
        result = runner.invoke(cli, ["--log-level", "DEBUG", "catalog"])
        assert result.exit_code == 0
        monitoring = cli_module.configure_logging.call_args.args[0]
        assert monitoring.log_level == "DEBUG"

    def test_invalid_config_exits(self, runner, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("extraction:\n  fallback_order: [guesswork]\n", encoding="utf-8")
        result = runner.invoke(cli, ["--config", str(bad), "catalog"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_selector_entry_without_pattern_exits(self, runner, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("extraction:\n  selectors:\n    - {kind: css, priority: 5}\n", encoding="utf-8")
        result = runner.invoke(cli, ["--config", str(bad), "catalog"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert not isinstance(result.exception, KeyError)

    def test_classify_relevant(self, runner, tmp_path, make_filler):
        text_file = tmp_path / "text.txt"
        text_file.write_text(make_filler(400), encoding="utf-8")
        result = runner.invoke(cli, ["classify", str(text_file)])
        assert result.exit_code == 0
        assert "RELEVANT" in result.output

    def test_classify_rejected(self, runner, tmp_path, make_filler):
        text_file = tmp_path / "text.txt"
        text_file.write_text(make_filler(400) + " Sign in to apply.", encoding="utf-8")
        result = runner.invoke(cli, ["classify", str(text_file)])
        assert result.exit_code == 0
        assert "REJECTED" in result.output
        assert "sign in" in result.output

    def test_classify_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["classify", str(tmp_path / "missing.txt")])
        assert result.exit_code == 1

    def test_extract_from_saved_page(self, runner, tmp_path, page, make_filler):
        html = tmp_path / "posting.html"
        html.write_text(page(f"<div class='show-more-less-html__markup'><p>{make_filler(900)}</p></div>"), encoding="utf-8")
        result = runner.invoke(cli, ["extract", "https://www.linkedin.com/jobs/view/5", "--html", str(html)])
        assert result.exit_code == 0
        assert "strategy=catalog" in result.output

    def test_extract_not_found_exit_code(self, runner, tmp_path, page):
        html = tmp_path / "posting.html"
        html.write_text(page("<p>Nothing to see here.</p>"), encoding="utf-8")
        result = runner.invoke(cli, ["extract", "https://example.com/job", "--html", str(html)])
        assert result.exit_code == 2
        assert "Description not found" in result.output

    def test_run_with_missing_posting_list(self, runner, tmp_path):
        result = runner.invoke(cli, ["run", str(tmp_path / "missing.csv"), "--no-rewrite"])
        assert result.exit_code == 1
        assert "Posting list not found" in result.output
