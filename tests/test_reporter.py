import json
from pathlib import Path

import pytest

from commitinfo.core import reporter
from commitinfo.core.model import (
    Diagnostic,
    DiagnosticLevel,
    ErrorCode,
    Importance,
    ModificationState,
    RepositoryInfo,
    ResolveResult,
)


def _result() -> ResolveResult:
    info = RepositoryInfo(
        commit_hash="0123456",
        branch="main",
        is_pull_request=False,
        modification_state=ModificationState.MODIFIED,
        origin_url="https://github.com/Owner/Repo.git",
        owner="Owner",
    )
    warning = Diagnostic(level=DiagnosticLevel.WARNING, message="Error getting 'git status': boom")
    return ResolveResult(info=info, diagnostics=(warning,))


def test_render_json_uses_build_property_names():
    data = json.loads(reporter.render_json(_result()))
    assert data["commitHash"] == "0123456"
    assert data["modified"] == "Modified"
    assert data["gitUser"] == "Owner"
    assert data["isPullRequest"] is False
    assert data["diagnostics"][0]["level"] == "warning"


def test_render_env_lines():
    text = reporter.render_env(_result().info, prefix="GIT_")
    lines = text.splitlines()
    assert "GIT_COMMIT_HASH=0123456" in lines
    assert "GIT_IS_PULL_REQUEST=false" in lines
    assert "GIT_GIT_USER=Owner" in lines
    assert len(lines) == 6


def test_render_env_for_unresolved_repository():
    text = reporter.render_env(RepositoryInfo())
    assert "COMMIT_HASH=local" in text.splitlines()
    assert "MODIFIED=" in text.splitlines()


def test_render_markdown_lists_diagnostics():
    text = reporter.render_markdown(_result())
    assert "`0123456`" in text
    assert "## Diagnostics" in text
    assert "warning: Error getting 'git status': boom" in text


def test_render_rejects_unknown_format():
    with pytest.raises(ValueError):
        reporter.render(_result(), "xml")


def test_write_outputs(tmp_path: Path):
    out = tmp_path / "out" / "commit.json"
    written = reporter.write_outputs(_result(), out, ["json", "env", "md"])
    assert written["json"] == out
    assert written["env"] == tmp_path / "out" / "commit.env"
    assert written["md"].exists()
    assert json.loads(out.read_text())["branch"] == "main"


def test_diagnostic_format_with_location():
    diagnostic = Diagnostic(
        level=DiagnosticLevel.MESSAGE,
        message="Project does not appear to be in a git repository.",
        importance=Importance.HIGH,
        code=ErrorCode.NO_REPOSITORY,
        file="build.proj",
        line=3,
        column=7,
    )
    assert diagnostic.format() == "build.proj(3,7): message CI1002: Project does not appear to be in a git repository."
    assert diagnostic.to_dict()["location"] == {"file": "build.proj", "line": 3, "column": 7}


def test_write_outputs_never_overwrites_an_earlier_format(tmp_path: Path):
    out = tmp_path / "commit.json"
    written = reporter.write_outputs(_result(), out, ["md", "json"])
    assert written["md"] == out
    assert written["json"] == tmp_path / "commit.json.json"
    assert out.read_text().startswith("# Commit Info")
    assert json.loads(written["json"].read_text())["commitHash"] == "0123456"
