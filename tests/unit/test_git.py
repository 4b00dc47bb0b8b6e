"""Tests for ratchet.history.git."""

import subprocess
import sys

import pytest

from ratchet.config import RatchetSettings
from ratchet.errors import SubprocessError
from ratchet.history import git as git_module
from ratchet.history.git import GitProcess, git_log_argv, head_revision, write_note


def python(script: str) -> list[str]:
    return [sys.executable, "-c", script]


class TestGitProcess:
    def test_streams_lines(self):
        with GitProcess(python("print('one'); print('two')")) as process:
            lines = list(process.lines())

        assert lines == ["one\n", "two\n"]

    def test_non_zero_exit_after_full_read(self):
        with pytest.raises(SubprocessError) as exc_info:
            with GitProcess(python("import sys; print('x'); sys.stderr.write('bad ref'); sys.exit(3)")) as process:
                list(process.lines())

        assert exc_info.value.returncode == 3
        assert "bad ref" in exc_info.value.stderr

    def test_reader_closing_early_is_not_an_error(self):
        script = "while True:\n    print('line', flush=True)"

        with GitProcess(python(script), timeout=30) as process:
            for line in process.lines():
                assert line == "line\n"
                break

        assert process._process.returncode is not None

    def test_timeout(self):
        with pytest.raises(SubprocessError, match="timed out"):
            with GitProcess(python("import time; time.sleep(30)"), timeout=0.5) as process:
                list(process.lines())

    def test_missing_binary(self):
        with pytest.raises(SubprocessError, match="Failed to start"):
            with GitProcess(["/nonexistent/ratchet-git"]):
                pass

    def test_body_errors_propagate_unchanged(self):
        with pytest.raises(ValueError, match="decode"):
            with GitProcess(python("import sys; sys.exit(1)")) as process:
                raise ValueError("decode")

        assert process._process.returncode is not None


class TestGitCommands:
    def test_git_log_argv(self):
        settings = RatchetSettings(git_binary="/usr/bin/git")

        assert git_log_argv(settings, "git-ratchet-1-web", "HEAD", "%N") == [
            "/usr/bin/git",
            "log",
            "--notes=git-ratchet-1-web",
            "--pretty=format:%N",
            "HEAD",
        ]

    def test_write_note(self, monkeypatch, tmp_path):
        calls = []

        def fake_run(argv, **kwargs):
            calls.append((argv, kwargs))
            return subprocess.CompletedProcess(argv, 0, stdout="", stderr="")

        monkeypatch.setattr(git_module.subprocess, "run", fake_run)
        settings = RatchetSettings(repo_path=tmp_path, git_timeout=5)

        write_note(settings, "git-ratchet-1-web", "HEAD", "a,1,1\n")

        argv, kwargs = calls[0]
        assert argv == ["git", "notes", "--ref=git-ratchet-1-web", "add", "-f", "-F", "-", "HEAD"]
        assert kwargs["input"] == "a,1,1\n"
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["timeout"] == 5

    def test_failed_command(self, monkeypatch):
        monkeypatch.setattr(
            git_module.subprocess,
            "run",
            lambda argv, **kwargs: subprocess.CompletedProcess(argv, 128, stdout="", stderr="fatal: not a git repository"),
        )

        with pytest.raises(SubprocessError, match="not a git repository") as exc_info:
            head_revision(RatchetSettings())

        assert exc_info.value.returncode == 128

    def test_command_timeout(self, monkeypatch):
        def fake_run(argv, **kwargs):
            raise subprocess.TimeoutExpired(argv, kwargs["timeout"])

        monkeypatch.setattr(git_module.subprocess, "run", fake_run)

        with pytest.raises(SubprocessError, match="timed out"):
            head_revision(RatchetSettings(git_timeout=1))

    def test_head_revision(self, monkeypatch):
        monkeypatch.setattr(
            git_module.subprocess,
            "run",
            lambda argv, **kwargs: subprocess.CompletedProcess(argv, 0, stdout="abc123\n", stderr=""),
        )

        assert head_revision(RatchetSettings()) == "abc123"
