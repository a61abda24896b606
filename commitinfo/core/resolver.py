"""Resolve repository metadata from ``git`` output or the ``.git`` directory.

Resolution never raises. Anything that goes wrong is reported as a
:class:`~commitinfo.core.model.Diagnostic` on the returned result, and fields
that could not be determined keep their empty defaults.
"""

from __future__ import annotations

import pathlib
from dataclasses import replace
from typing import List, Optional, Tuple

from commitinfo.core import gitfiles
from commitinfo.core.config import ResolveOptions
from commitinfo.core.model import (
    Diagnostic,
    DiagnosticLevel,
    ErrorCode,
    Importance,
    NO_REPOSITORY_HASH,
    PartialInfo,
    ResolveResult,
)
from commitinfo.core.patterns import extract_owner, parse_status
from commitinfo.runners.base import GitQuery, GitRunnerError, TextSource
from commitinfo.runners.git import GitCommandRunner

Location = Tuple[str, int, int]

NO_REPOSITORY_MESSAGE = "Project does not appear to be in a git repository."


def resolve(
    project_dir: str | pathlib.Path,
    options: Optional[ResolveOptions] = None,
    source: Optional[TextSource] = None,
    location: Optional[Location] = None,
) -> ResolveResult:
    """Resolve metadata for the repository containing ``project_dir``.

    ``source`` defaults to running ``git`` in ``project_dir``. ``location``
    is attached to high-importance diagnostics so build logs can point back
    at the caller.
    """

    options = options or ResolveOptions()
    info = PartialInfo()
    diagnostics: List[Diagnostic] = []
    try:
        if options.use_external_tool:
            if source is None:
                source = GitCommandRunner(
                    project_dir, executable=options.git_executable, timeout=options.timeout
                )
            commit_hash, messages = read_commit_hash(source)
            diagnostics.extend(messages)
            if commit_hash:
                info.commit_hash = options.truncate(commit_hash)
                if not options.skip_status:
                    status, messages = read_status(source)
                    diagnostics.extend(messages)
                    info.fill_missing(status)

        if not info.has_commit or not info.branch.strip() or not info.origin_url.strip():
            candidates = gitfiles.candidate_directories(project_dir, options.git_directory)
            found, file_info = gitfiles.parse_candidates(candidates)
            if found:
                file_info.commit_hash = options.truncate(file_info.commit_hash)
                info.fill_missing(file_info)
    except Exception as exc:  # noqa: BLE001
        diagnostics.append(
            Diagnostic(
                level=DiagnosticLevel.ERROR,
                message=f"Error in resolve: {exc}",
                importance=Importance.HIGH,
                code=ErrorCode.GIT_FAILED,
            )
        )

    frozen = info.freeze()
    if frozen.commit_hash == NO_REPOSITORY_HASH:
        diagnostics.append(
            Diagnostic(
                level=DiagnosticLevel.MESSAGE,
                message=NO_REPOSITORY_MESSAGE,
                importance=Importance.HIGH,
                code=ErrorCode.NO_REPOSITORY,
            )
        )
    located = tuple(_located(diagnostic, location) for diagnostic in diagnostics)
    return ResolveResult(info=frozen, diagnostics=located)


def read_commit_hash(source: TextSource) -> Tuple[Optional[str], List[Diagnostic]]:
    """Ask ``source`` for the current commit; ``None`` when unavailable or empty."""

    try:
        text = source.get_text(GitQuery.COMMIT_HASH).strip()
    except GitRunnerError as exc:
        return None, [_warning(f"Error getting commit hash from 'git' command: {exc}")]
    return (text or None), []


def read_status(source: TextSource) -> Tuple[PartialInfo, List[Diagnostic]]:
    """Collect branch, modification state and origin from ``source``.

    The status and origin queries fail independently; each failure becomes a
    warning and leaves its fields empty.
    """

    info = PartialInfo()
    diagnostics: List[Diagnostic] = []
    try:
        status_text = source.get_text(GitQuery.STATUS)
    except GitRunnerError as exc:
        diagnostics.append(_warning(f"Error getting 'git status': {exc}"))
    else:
        status = parse_status(status_text)
        info.branch = status.branch
        info.is_pull_request = status.is_pull_request
        info.modification_state = status.modification_state
        if not status.branch:
            diagnostics.append(
                Diagnostic(
                    level=DiagnosticLevel.MESSAGE,
                    message=f"Unable to retrieve branch name from status text: \n{status_text}",
                    importance=Importance.HIGH,
                )
            )

    try:
        origin_url = source.get_text(GitQuery.ORIGIN_URL).strip()
    except GitRunnerError as exc:
        diagnostics.append(_warning(f"Error getting git origin URL: {exc}"))
    else:
        if origin_url:
            info.origin_url = origin_url
            info.owner = extract_owner(origin_url)
    return info, diagnostics


def _warning(message: str) -> Diagnostic:
    return Diagnostic(level=DiagnosticLevel.WARNING, message=message, importance=Importance.HIGH)


def _located(diagnostic: Diagnostic, location: Optional[Location]) -> Diagnostic:
    if not location or diagnostic.importance is not Importance.HIGH:
        return diagnostic
    file, line, column = location
    return replace(diagnostic, file=file, line=line, column=column)
