# SPDX-License-Identifier: Apache-2.0
"""Result types for repository metadata resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

NO_REPOSITORY_HASH = "local"
"""Commit hash reported when no repository metadata could be resolved."""


class ModificationState(str, Enum):
    """Whether the working tree has uncommitted changes."""

    UNMODIFIED = "Unmodified"
    MODIFIED = "Modified"
    UNKNOWN = ""


class DiagnosticLevel(str, Enum):
    MESSAGE = "message"
    WARNING = "warning"
    ERROR = "error"


class Importance(str, Enum):
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


class ErrorCode(str, Enum):
    """Stable codes attached to diagnostics a build may want to filter on."""

    GIT_FAILED = "CI1001"
    NO_REPOSITORY = "CI1002"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A leveled message with optional source-location metadata."""

    level: DiagnosticLevel
    message: str
    importance: Importance = Importance.NORMAL
    code: Optional[ErrorCode] = None
    file: Optional[str] = None
    line: int = 0
    column: int = 0

    def format(self) -> str:
        """Render in the canonical ``file(line,col): level CODE: message`` form."""

        prefix = ""
        if self.file:
            prefix = f"{self.file}({self.line},{self.column}): " if self.line else f"{self.file}: "
        category = self.level.value
        if self.code:
            category = f"{category} {self.code.value}"
        return f"{prefix}{category}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "level": self.level.value,
            "importance": self.importance.value,
            "message": self.message,
        }
        if self.code:
            payload["code"] = self.code.value
        if self.file:
            payload["location"] = {"file": self.file, "line": self.line, "column": self.column}
        return payload


@dataclass(frozen=True, slots=True)
class RepositoryInfo:
    """Immutable snapshot of the metadata resolved for one repository."""

    commit_hash: str = NO_REPOSITORY_HASH
    branch: str = ""
    is_pull_request: bool = False
    modification_state: ModificationState = ModificationState.UNKNOWN
    origin_url: str = ""
    owner: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the property names builds consume."""

        return {
            "commitHash": self.commit_hash,
            "branch": self.branch,
            "isPullRequest": self.is_pull_request,
            "modified": self.modification_state.value,
            "originUrl": self.origin_url,
            "gitUser": self.owner,
        }


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


@dataclass(slots=True)
class PartialInfo:
    """Mutable record filled field by field while resolving."""

    commit_hash: str = ""
    branch: str = ""
    is_pull_request: bool = False
    modification_state: ModificationState = ModificationState.UNKNOWN
    origin_url: str = ""
    owner: str = ""

    @property
    def has_commit(self) -> bool:
        return not _is_blank(self.commit_hash) and self.commit_hash != NO_REPOSITORY_HASH

    def fill_missing(self, other: "PartialInfo") -> None:
        """Copy fields from ``other`` that are still empty on this record.

        A value already set is never replaced, and an empty value on ``other``
        never clears anything.
        """

        if not self.has_commit and other.has_commit:
            self.commit_hash = other.commit_hash
        if _is_blank(self.branch) and not _is_blank(other.branch):
            self.branch = other.branch
            self.is_pull_request = other.is_pull_request
        if (
            self.modification_state is ModificationState.UNKNOWN
            and other.modification_state is not ModificationState.UNKNOWN
        ):
            self.modification_state = other.modification_state
        if _is_blank(self.origin_url) and not _is_blank(other.origin_url):
            self.origin_url = other.origin_url
            if _is_blank(self.owner) and not _is_blank(other.owner):
                self.owner = other.owner

    def freeze(self) -> RepositoryInfo:
        """Return the immutable snapshot, applying sentinel and invariants."""

        branch = self.branch.strip()
        origin_url = self.origin_url.strip()
        return RepositoryInfo(
            commit_hash=self.commit_hash.strip() if self.has_commit else NO_REPOSITORY_HASH,
            branch=branch,
            is_pull_request=self.is_pull_request and bool(branch),
            modification_state=self.modification_state,
            origin_url=origin_url,
            owner=self.owner.strip() if origin_url else "",
        )


@dataclass(frozen=True, slots=True)
class ResolveResult:
    """Resolved metadata plus every diagnostic produced along the way."""

    info: RepositoryInfo
    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def repository_detected(self) -> bool:
        return self.info.commit_hash != NO_REPOSITORY_HASH

    def to_dict(self) -> Dict[str, Any]:
        payload = self.info.to_dict()
        payload["diagnostics"] = [diagnostic.to_dict() for diagnostic in self.diagnostics]
        return payload
