# SPDX-License-Identifier: Apache-2.0
"""Patterns that pull structured values out of git text output."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .model import ModificationState

ORIGIN_SEARCH = re.compile(
    r"\[\s*remote\s*\"origin\"\s*\][^\[]*?^[ \t]*url[ \t]*=[ \t]*(?P<url>.*)$",
    re.IGNORECASE | re.MULTILINE,
)
"""Captures the origin URL from the full text of a git ``config`` file."""

STATUS_BRANCH_SEARCH = re.compile(r"^On branch (?P<branch>.*)$", re.MULTILINE)
DETACHED_BRANCH_SEARCH = re.compile(r"^HEAD detached at (?P<branch>.*)$", re.MULTILINE)

UNMODIFIED_TEXT = "NOTHING TO COMMIT"
UNTRACKED_ONLY_TEXT = "NOTHING ADDED TO COMMIT"
PULL_REQUEST_PREFIX = "pull/"
HOST_MARKER = "GITHUB.COM"

_PATH_SEPARATORS = re.compile(r"[\\/]")


@dataclass(frozen=True, slots=True)
class StatusInfo:
    """Fields recovered from the text of ``git status``."""

    branch: str
    is_pull_request: bool
    modification_state: ModificationState


def parse_status(status_text: str) -> StatusInfo:
    """Interpret ``git status`` output.

    The branch comes from the ``On branch`` line, or from the detached-HEAD
    line when there is none. Only the detached form can mark a pull request.
    """

    branch = ""
    is_pull_request = False
    match = STATUS_BRANCH_SEARCH.search(status_text)
    if match:
        branch = match.group("branch").strip()
    else:
        detached = DETACHED_BRANCH_SEARCH.search(status_text)
        if detached:
            branch = detached.group("branch").strip()
            is_pull_request = branch.startswith(PULL_REQUEST_PREFIX)

    upper = status_text.upper()
    if UNMODIFIED_TEXT in upper or UNTRACKED_ONLY_TEXT in upper:
        state = ModificationState.UNMODIFIED
    else:
        state = ModificationState.MODIFIED
    return StatusInfo(branch=branch, is_pull_request=is_pull_request, modification_state=state)


def extract_origin_url(config_text: str) -> str:
    """Return the ``remote "origin"`` URL from git config text, or ``""``."""

    if not config_text:
        return ""
    match = ORIGIN_SEARCH.search(config_text)
    if not match:
        return ""
    return match.group("url").strip()


def extract_owner(url: str) -> str:
    """Return the GitHub account that owns ``url``, or ``""``.

    Segments are split on forward and backward slashes only. The owner is the
    segment following the host, except for scp-style remotes
    (``git@github.com:Owner/Repo.git``) where it follows the host's colon.
    """

    if not url:
        return ""
    parts = [part for part in _PATH_SEPARATORS.split(url) if part]
    for index, part in enumerate(parts):
        marker = part.upper().find(HOST_MARKER)
        if marker < 0:
            continue
        scp_owner = _scp_owner(part[marker + len(HOST_MARKER):])
        if scp_owner:
            return scp_owner
        if index + 1 < len(parts):
            return parts[index + 1]
        return ""
    return ""


def _scp_owner(after_host: str) -> str:
    _, colon, tail = after_host.partition(":")
    if not colon or not tail or tail.isdigit():
        return ""
    return tail
