"""Tests for ``toolgate check`` CLI command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from toolgate.cli import main
from toolgate.config.defaults import CURRENT_VERSION


def _invoke(tmp_path: Path, *args: str, project: dict[str, object] | None = None):
    project_path = tmp_path / "project.json"
    if project is not None:
        project_path.write_text(json.dumps({"version": CURRENT_VERSION, **project}))
    runner = CliRunner()
    return runner.invoke(
        main,
        [
            "--global-config",
            str(tmp_path / "global.json"),
            "--project-config",
            str(project_path),
            "check",
            *args,
        ],
    )


class TestCheck:
    def test_allowed(self, tmp_path: Path) -> None:
        result = _invoke(tmp_path, "bash", "--command", "ls -la")
        assert result.exit_code == 0
        assert "ALLOW" in result.output

    def test_package_manager_block(self, tmp_path: Path) -> None:
        result = _invoke(
            tmp_path,
            "bash",
            "--command",
            "npm install left-pad",
            project={"features": {"enforcePackageManager": True}, "packageManager": {"selected": "pnpm"}},
        )
        assert result.exit_code == 1
        assert "BLOCK" in result.output
        assert "enforcePackageManager" in result.output

    def test_dangerous_denied(self, tmp_path: Path) -> None:
        result = _invoke(tmp_path, "bash", "-c", "rm -rf build", "--no")
        assert result.exit_code == 1
        assert "User denied" in result.output

    def test_dangerous_confirmed(self, tmp_path: Path) -> None:
        result = _invoke(tmp_path, "bash", "-c", "rm -rf build", "--yes")
        assert result.exit_code == 0

    def test_protected_path(self, tmp_path: Path) -> None:
        result = _invoke(
            tmp_path,
            "read",
            "--path",
            "config/.env",
            project={"envFiles": {"onlyBlockIfExists": False}},
        )
        assert result.exit_code == 1
        assert "protectEnvFiles" in result.output

    def test_warnings_shown(self, tmp_path: Path) -> None:
        (tmp_path / "project.json").write_text("{broken")
        result = _invoke(tmp_path, "bash", "-c", "ls")
        assert result.exit_code == 0
        assert "Warning" in result.output
