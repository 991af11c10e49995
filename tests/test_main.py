"""Tests for the CLI commands."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml
from typer.testing import CliRunner

from rskills.main import app
from rskills.ui import console

runner = CliRunner()


def _mock_run(returncode: int = 0) -> MagicMock:
    mock = MagicMock()
    mock.returncode = returncode
    return mock


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch):
    """Keep Rich from wrapping table cells and paths."""
    monkeypatch.setattr(console, "width", 200)


@pytest.fixture
def which():
    with patch("rskills.toolchain.cargo.shutil.which", return_value="/usr/bin/cargo") as mock_which:
        yield mock_which


class TestCompareCommand:
    def test_compare(self, tmp_path: Path):
        original = tmp_path / "zh"
        translated = tmp_path / "en"
        original.mkdir()
        translated.mkdir()
        (original / "a.md").write_text("# A\n\ntext\n", encoding="utf-8")
        (original / "b.md").write_text("# B\n", encoding="utf-8")
        (translated / "a.md").write_text("# A\n\ntext\n", encoding="utf-8")
        output = tmp_path / "report.md"

        result = runner.invoke(app, ["compare", str(original), str(translated), "-o", str(output)])

        assert result.exit_code == 0
        assert "Comparison complete!" in result.output
        assert f"Report saved to: {output}" in result.output
        assert "**STATUS: MISSING TRANSLATION**" in result.output
        assert output.exists()

    def test_compare_without_arguments(self):
        result = runner.invoke(app, ["compare"])
        assert result.exit_code == 1
        assert "Usage: rskills compare" in result.output

    def test_compare_missing_directory(self, tmp_path: Path):
        result = runner.invoke(app, ["compare", str(tmp_path / "nope"), str(tmp_path)])
        assert result.exit_code == 1
        assert "Both directories must exist" in result.output

    def test_compare_threshold_option(self, tmp_path: Path):
        original = tmp_path / "zh"
        translated = tmp_path / "en"
        original.mkdir()
        translated.mkdir()
        (original / "a.md").write_text("line\n" * 20, encoding="utf-8")
        (translated / "a.md").write_text("line\n" * 10, encoding="utf-8")

        result = runner.invoke(
            app, ["compare", str(original), str(translated), "-t", "5", "-o", str(tmp_path / "r.md")]
        )
        assert result.exit_code == 0
        assert "Significant line count difference (10 lines)" in result.output


class TestCargoCommands:
    @patch("rskills.toolchain.cargo.subprocess.run")
    def test_check_passes_extra_args(self, mock_run, which):
        mock_run.return_value = _mock_run(0)
        result = runner.invoke(app, ["check", "-p", "demo"])
        assert result.exit_code == 0
        assert mock_run.call_args.args[0][-2:] == ["-p", "demo"]

    @patch("rskills.toolchain.cargo.subprocess.run")
    def test_test_threads_option(self, mock_run, which):
        mock_run.return_value = _mock_run(0)
        result = runner.invoke(app, ["test", "-j", "2", "--nocapture"])
        assert result.exit_code == 0
        argv = mock_run.call_args.args[0]
        assert "--test-threads=2" in argv
        assert argv[-1] == "--nocapture"

    @patch("rskills.toolchain.cargo.subprocess.run")
    def test_failure_exit_code(self, mock_run, which):
        mock_run.return_value = _mock_run(101)
        result = runner.invoke(app, ["test", "-j", "1"])
        assert result.exit_code == 101

    @patch("rskills.toolchain.cargo.subprocess.run")
    def test_signal_exit_code(self, mock_run, which):
        mock_run.return_value = _mock_run(-9)
        result = runner.invoke(app, ["check"])
        assert result.exit_code == 137

    @patch("rskills.toolchain.cargo.subprocess.run")
    def test_clippy(self, mock_run, which):
        mock_run.return_value = _mock_run(0)
        result = runner.invoke(app, ["clippy"])
        assert result.exit_code == 0
        assert mock_run.call_args.args[0][1:] == ["clippy", "--all-targets", "--", "-D", "warnings"]

    @patch("rskills.toolchain.cargo.subprocess.run")
    def test_fmt_fallback(self, mock_run, which):
        mock_run.side_effect = [_mock_run(1), _mock_run(0)]
        result = runner.invoke(app, ["fmt"])
        assert result.exit_code == 0
        assert mock_run.call_count == 2

    def test_cargo_missing(self):
        with patch("rskills.toolchain.cargo.shutil.which", return_value=None):
            result = runner.invoke(app, ["check"])
        assert result.exit_code == 127
        assert "rustup" in result.output


class TestSkillsCommands:
    def test_list(self, skills_dir: Path):
        result = runner.invoke(app, ["skills", "list", "-d", str(skills_dir)])
        assert result.exit_code == 0
        assert "rust-ownership" in result.output
        assert "rust-async" in result.output

    def test_list_missing_directory(self, tmp_path: Path):
        result = runner.invoke(app, ["skills", "list", "-d", str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "Skills directory not found" in result.output

    def test_show_raw(self, skills_dir: Path):
        result = runner.invoke(app, ["skills", "show", "rust-ownership", "--raw", "-d", str(skills_dir)])
        assert result.exit_code == 0
        assert "# Active Skills" in result.output
        assert "## rust-ownership" in result.output
        assert "## rust-smart-pointers" not in result.output

    def test_show_related(self, skills_dir: Path):
        result = runner.invoke(
            app, ["skills", "show", "rust-ownership", "--raw", "--related", "-d", str(skills_dir)]
        )
        assert "## rust-smart-pointers" in result.output

    def test_show_unknown(self, skills_dir: Path):
        result = runner.invoke(app, ["skills", "show", "rust-macros", "-d", str(skills_dir)])
        assert result.exit_code == 1
        assert "Skill not found: rust-macros" in result.output

    def test_match(self, skills_dir: Path):
        result = runner.invoke(app, ["skills", "match", "why does tokio need async", "-d", str(skills_dir)])
        assert result.exit_code == 0
        assert "rust-async" in result.output
        assert "rust-ownership" not in result.output

    def test_match_nothing(self, skills_dir: Path):
        result = runner.invoke(app, ["skills", "match", "hello world", "-d", str(skills_dir)])
        assert result.exit_code == 0
        assert "No skills triggered" in result.output

    def test_lint_clean(self, skills_dir: Path):
        result = runner.invoke(app, ["skills", "lint", "-d", str(skills_dir)])
        assert result.exit_code == 0
        assert "3 skills checked" in result.output

    def test_lint_errors(self, tmp_path: Path):
        skill_dir = tmp_path / "rust-macros"
        skill_dir.mkdir()
        (skill_dir / "SKILL.md").write_text(
            "---\nname: rust-macros\ndescription: Macros\ntriggers: [macro]\n---\n```rust\n",
            encoding="utf-8",
        )
        result = runner.invoke(app, ["skills", "lint", "-d", str(tmp_path)])
        assert result.exit_code == 1
        assert "unclosed code block" in result.output

    def test_new(self, tmp_path: Path):
        args = ["skills", "new", "rust-macros", "Declarative macros", "--trigger", "macro_rules", "-d", str(tmp_path)]
        result = runner.invoke(app, args)
        assert result.exit_code == 0
        assert (tmp_path / "rust-macros" / "SKILL.md").exists()

        again = runner.invoke(app, args)
        assert again.exit_code == 1
        assert "already exists" in again.output


class TestConfigCommands:
    def test_init_writes_file(self, isolated_home: Path):
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        data = yaml.safe_load((isolated_home / "config.yaml").read_text(encoding="utf-8"))
        assert data["translation"]["line_delta_threshold"] == 50

    def test_config_path(self, isolated_home: Path):
        result = runner.invoke(app, ["config", "--path"])
        assert result.exit_code == 0
        assert "config.yaml" in result.output

    def test_config_get(self):
        result = runner.invoke(app, ["config", "--get", "cargo.cargo"])
        assert result.exit_code == 0
        assert result.output.strip() == "cargo"

    def test_config_get_unknown(self):
        result = runner.invoke(app, ["config", "--get", "cargo.nope"])
        assert result.exit_code == 1

    def test_config_file_values_used(self, isolated_home: Path, tmp_path: Path):
        isolated_home.mkdir(parents=True, exist_ok=True)
        (isolated_home / "config.yaml").write_text(
            "translation:\n  line_delta_threshold: 7\n", encoding="utf-8"
        )
        result = runner.invoke(app, ["config", "--get", "translation.line_delta_threshold"])
        assert result.output.strip() == "7"

    def test_config_show(self):
        result = runner.invoke(app, ["config", "--show"])
        assert result.exit_code == 0
        assert "translation.pattern" in result.output

    def test_stray_config_dir_key_does_not_crash(self, isolated_home: Path, tmp_path: Path):
        isolated_home.mkdir(parents=True, exist_ok=True)
        (isolated_home / "config.yaml").write_text(f"config_dir: {tmp_path}\n", encoding="utf-8")
        result = runner.invoke(app, ["config", "--path"])
        assert result.exit_code == 0
        assert "config.yaml" in result.output
