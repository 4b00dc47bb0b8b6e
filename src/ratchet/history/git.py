"""Git subprocess plumbing: streaming ``git log`` and writing notes."""

from __future__ import annotations

import logging
import subprocess
import threading
from collections.abc import Iterator, Sequence
from types import TracebackType

from ratchet.config import RatchetSettings
from ratchet.errors import SubprocessError


logger = logging.getLogger(__name__)


def git_log_argv(settings: RatchetSettings, ref: str, revision_range: str, pretty: str) -> list[str]:
    """Build a ``git log`` invocation that prints notes from ``ref``."""
    return [settings.git_binary, "log", f"--notes={ref}", f"--pretty=format:{pretty}", revision_range]


class GitProcess:
    """Run a command and stream its standard output line by line.

    Output is consumed incrementally. On exit the process is always reaped;
    if the caller stopped reading before EOF the process is killed and its
    exit status ignored, which covers git dying of a broken pipe.
    """

    def __init__(self, argv: Sequence[str], *, cwd: str | None = None, timeout: float | None = None) -> None:
        self.argv = list(argv)
        self.cwd = cwd
        self.timeout = timeout
        self._process: subprocess.Popen[str] | None = None
        self._timer: threading.Timer | None = None
        self._drained = False
        self._timed_out = False

    def __enter__(self) -> GitProcess:
        logger.debug("Running %s", " ".join(self.argv))
        try:
            self._process = subprocess.Popen(
                self.argv,
                cwd=self.cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            raise SubprocessError(f"Failed to start {self.argv[0]}: {exc}") from exc

        if self.timeout is not None:
            self._timer = threading.Timer(self.timeout, self._expire)
            self._timer.daemon = True
            self._timer.start()
        return self

    def lines(self) -> Iterator[str]:
        """Yield stdout lines, newline included, as they arrive."""
        if self._process is None or self._process.stdout is None:
            raise SubprocessError("Process has not been started")
        yield from self._process.stdout
        self._drained = True

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._timer is not None:
            self._timer.cancel()
        process = self._process
        if process is None:
            return

        stopped_early = not self._drained
        if stopped_early and process.poll() is None:
            process.kill()
        _, stderr = process.communicate()

        if exc_type is not None:
            return
        if self._timed_out:
            raise SubprocessError(
                f"{self.argv[0]} timed out after {self.timeout}s", returncode=process.returncode, stderr=stderr
            )
        if stopped_early:
            logger.debug("Reader closed %s early (exit status %s)", self.argv[0], process.returncode)
            return
        if process.returncode != 0:
            raise SubprocessError(
                f"{' '.join(self.argv[:2])} exited with status {process.returncode}: {stderr.strip()}",
                returncode=process.returncode,
                stderr=stderr,
            )

    def _expire(self) -> None:
        self._timed_out = True
        if self._process is not None:
            self._process.kill()


def git_process(settings: RatchetSettings, argv: Sequence[str]) -> GitProcess:
    return GitProcess(
        argv,
        cwd=str(settings.repo_path) if settings.repo_path else None,
        timeout=settings.git_timeout,
    )


def open_git_log(settings: RatchetSettings, ref: str, revision_range: str, pretty: str) -> GitProcess:
    return git_process(settings, git_log_argv(settings, ref, revision_range, pretty))


def run_git(settings: RatchetSettings, args: Sequence[str], stdin: str | None = None) -> str:
    """Run a short git command to completion and return its stdout."""
    argv = [settings.git_binary, *args]
    logger.debug("Running %s", " ".join(argv))
    try:
        completed = subprocess.run(
            argv,
            cwd=str(settings.repo_path) if settings.repo_path else None,
            input=stdin,
            capture_output=True,
            text=True,
            timeout=settings.git_timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise SubprocessError(f"{argv[0]} {args[0]} timed out after {settings.git_timeout}s") from exc
    except OSError as exc:
        raise SubprocessError(f"Failed to start {argv[0]}: {exc}") from exc

    if completed.returncode != 0:
        raise SubprocessError(
            f"{argv[0]} {args[0]} exited with status {completed.returncode}: {completed.stderr.strip()}",
            returncode=completed.returncode,
            stderr=completed.stderr,
        )
    return completed.stdout


def head_revision(settings: RatchetSettings) -> str:
    return run_git(settings, ["rev-parse", "HEAD"]).strip()


def write_note(settings: RatchetSettings, ref: str, revision: str, body: str) -> None:
    """Attach ``body`` as the note for ``revision`` on ``ref``, replacing any existing note."""
    run_git(settings, ["notes", f"--ref={ref}", "add", "-f", "-F", "-", revision], stdin=body)
