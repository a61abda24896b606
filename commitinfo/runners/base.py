# SPDX-License-Identifier: Apache-2.0
"""Text source abstraction used to query the version-control tool."""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class GitQuery(str, Enum):
    """Logical queries a text source must answer."""

    COMMIT_HASH = "commit-hash"
    STATUS = "status"
    ORIGIN_URL = "origin-url"


class GitRunnerError(RuntimeError):
    """Raised when a query could not be answered at all.

    This is distinct from a query that succeeded with empty output.
    """

    def __init__(self, query: GitQuery, message: str):
        super().__init__(message)
        self.query = query


class TextSource(Protocol):
    """Anything that can return raw text for a :class:`GitQuery`."""

    def get_text(self, query: GitQuery) -> str:
        """Return the raw output for ``query`` or raise :class:`GitRunnerError`."""
        ...
