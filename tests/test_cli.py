import json
from pathlib import Path

import pytest

from commitinfo import cli
from commitinfo.core import s3util

HASH = "0123456789abcdef0123456789abcdef01234567"


def _make_repo(root: Path) -> None:
    git_dir = root / ".git"
    (git_dir / "refs" / "heads").mkdir(parents=True)
    (git_dir / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")
    (git_dir / "refs" / "heads" / "main").write_text(HASH + "\n", encoding="utf-8")
    (git_dir / "config").write_text("[remote \"origin\"]\n\turl = git@github.com:Owner/Repo.git\n", encoding="utf-8")


def test_cli_no_git_writes_json(tmp_path: Path):
    _make_repo(tmp_path)
    out = tmp_path / "reports" / "commit.json"
    exit_code = cli.main(["--project-dir", str(tmp_path), "--no-git", "--hash-length", "9", "--out", str(out)])
    assert exit_code == 0
    data = json.loads(out.read_text())
    assert data["commitHash"] == HASH[:9]
    assert data["branch"] == "main"
    assert data["gitUser"] == "Owner"
    assert data["diagnostics"] == []


def test_cli_reads_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    _make_repo(tmp_path)
    (tmp_path / ".commitinfo.yml").write_text("no_git: true\nhash_length: 4\n")
    exit_code = cli.main(["--project-dir", str(tmp_path), "--format", "env", "--env-prefix", "CI_"])
    assert exit_code == 0
    lines = capsys.readouterr().out.splitlines()
    assert "CI_COMMIT_HASH=0123" in lines
    assert "CI_BRANCH=main" in lines


def test_cli_flags_override_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    _make_repo(tmp_path)
    (tmp_path / ".commitinfo.yml").write_text("no_git: true\nhash_length: 4\n")
    cli.main(["--project-dir", str(tmp_path), "--hash-length", "12"])
    data = json.loads(capsys.readouterr().out)
    assert data["commitHash"] == HASH[:12]


def test_cli_succeeds_without_repository(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    project = tmp_path / "a" / "b"
    project.mkdir(parents=True)
    exit_code = cli.main(["--project-dir", str(project), "--no-git", "--project-file", "build.proj"])
    assert exit_code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["commitHash"] == "local"
    assert data["diagnostics"][0]["code"] == "CI1002"
    assert data["diagnostics"][0]["location"]["file"] == "build.proj"


def test_cli_rejects_invalid_config(tmp_path: Path):
    (tmp_path / ".commitinfo.yml").write_text("hash_length: 0\n")
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--project-dir", str(tmp_path), "--no-git"])
    assert excinfo.value.code == 2


def test_cli_rejects_missing_explicit_config(tmp_path: Path):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--project-dir", str(tmp_path), "--config", str(tmp_path / "missing.yml")])
    assert excinfo.value.code == 2


def test_cli_publishes_to_s3(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    _make_repo(tmp_path)
    calls: list[tuple] = []
    monkeypatch.setattr(s3util, "publish_result", lambda bucket, key, result: calls.append((bucket, key, result)))
    cli.main(["--project-dir", str(tmp_path), "--no-git", "--s3-bucket", "builds"])
    capsys.readouterr()
    assert len(calls) == 1
    bucket, key, result = calls[0]
    assert bucket == "builds"
    assert key is None
    assert result.info.commit_hash == HASH[:7]


class FailingS3Client:
    def put_object(self, **kwargs) -> None:
        raise RuntimeError("NoCredentialsError: Unable to locate credentials")


def test_cli_exits_zero_when_upload_fails(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str], caplog: pytest.LogCaptureFixture
):
    _make_repo(tmp_path)
    monkeypatch.setattr(s3util, "_client", lambda: FailingS3Client())
    exit_code = cli.main(["--project-dir", str(tmp_path), "--no-git", "--s3-bucket", "b"])
    assert exit_code == 0
    assert json.loads(capsys.readouterr().out)["commitHash"] == HASH[:7]
    assert "Unable to locate credentials" in caplog.text
