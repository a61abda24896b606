# SPDX-License-Identifier: Apache-2.0
"""Text source backed by the ``git`` executable."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Dict, List, Tuple

from .base import GitQuery, GitRunnerError

DEFAULT_TIMEOUT = 10.0
"""Seconds to wait for a single ``git`` invocation."""

GIT_ARGUMENTS: Dict[GitQuery, Tuple[str, ...]] = {
    GitQuery.COMMIT_HASH: ("rev-parse", "HEAD"),
    GitQuery.STATUS: ("status",),
    GitQuery.ORIGIN_URL: ("config", "--get", "remote.origin.url"),
}


class GitCommandRunner:
    """Run ``git`` in a working directory and return its standard output."""

    def __init__(
        self,
        working_dir: str | Path,
        executable: str = "git",
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.working_dir = Path(working_dir)
        self.executable = executable
        self.timeout = timeout

    def command(self, query: GitQuery) -> List[str]:
        """Return the full command line used for ``query``."""

        return [self.executable, *GIT_ARGUMENTS[query]]

    def get_text(self, query: GitQuery) -> str:
        """Run the command for ``query`` and return its stripped output."""

        cmd = self.command(query)
        if not self.working_dir.is_dir():
            raise GitRunnerError(query, f"working directory {self.working_dir} does not exist")
        # Status markers are matched against English text.
        env = dict(os.environ, LC_ALL="C")
        try:
            completed = subprocess.run(
                cmd,
                cwd=self.working_dir,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=env,
            )
        except FileNotFoundError as exc:
            raise GitRunnerError(query, f"'{self.executable}' executable not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise GitRunnerError(query, f"'{' '.join(cmd)}' timed out after {self.timeout}s") from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
            raise GitRunnerError(query, f"'{' '.join(cmd)}' failed: {detail}") from exc
        except OSError as exc:
            raise GitRunnerError(query, f"'{' '.join(cmd)}' could not be started: {exc}") from exc
        return (completed.stdout or "").strip()
