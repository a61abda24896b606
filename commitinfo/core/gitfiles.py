# SPDX-License-Identifier: Apache-2.0
"""Read commit metadata straight from a repository's ``.git`` directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .model import PartialInfo
from .patterns import extract_origin_url, extract_owner

_LOG = logging.getLogger(__name__)

DEFAULT_GIT_DIRECTORY = ".git"
HEAD_FILE = "HEAD"
CONFIG_FILE = "config"
PACKED_REFS_FILE = "packed-refs"
COMMONDIR_FILE = "commondir"
REF_PREFIX = "ref:"
GITDIR_PREFIX = "gitdir:"


def candidate_directories(project_dir: str | Path, git_directory: str = DEFAULT_GIT_DIRECTORY) -> List[Path]:
    """Metadata directories to try, the project's own first, then its parent's."""

    root = Path(project_dir)
    return [
        _normalize(root / git_directory),
        _normalize(root / os.pardir / git_directory),
    ]


def parse_candidates(metadata_dirs: Iterable[str | Path]) -> Tuple[bool, PartialInfo]:
    """Return the result of the first directory that yields a commit hash."""

    for metadata_dir in metadata_dirs:
        success, info = parse_directory(metadata_dir)
        if success:
            return True, info
    return False, PartialInfo()


def parse_directory(metadata_dir: str | Path) -> Tuple[bool, PartialInfo]:
    """Parse ``HEAD`` and ``config`` in ``metadata_dir``.

    Succeeds only when a commit hash was read. Missing or unreadable files
    mean nothing was found here and never raise.
    """

    info = PartialInfo()
    directory = resolve_metadata_dir(Path(metadata_dir))
    if directory is None:
        _LOG.debug("No git metadata at %s", metadata_dir)
        return False, info
    search_dirs = _search_dirs(directory)

    success = False
    head = read_text(directory / HEAD_FILE)
    if head is not None:
        head = head.strip()
        if head.startswith(REF_PREFIX):
            ref_name = head[len(REF_PREFIX):].strip()
            # Last path segment only: refs/heads/feature/x yields "x".
            info.branch = ref_name.rsplit("/", 1)[-1]
            commit_hash = read_ref(search_dirs, ref_name)
        else:
            info.branch = HEAD_FILE
            commit_hash = head
        if commit_hash:
            info.commit_hash = commit_hash
            success = True

    for search_dir in search_dirs:
        config_text = read_text(search_dir / CONFIG_FILE)
        if config_text is None:
            continue
        origin_url = extract_origin_url(config_text)
        if origin_url:
            info.origin_url = origin_url
            info.owner = extract_owner(origin_url)
        break

    return success, info


def resolve_metadata_dir(path: Path) -> Optional[Path]:
    """Return the metadata directory for ``path``.

    Worktrees and submodules use a ``.git`` file holding a ``gitdir:``
    pointer; that pointer is followed, relative to the file's directory.
    """

    if path.is_dir():
        return path
    content = read_text(path)
    if content is None:
        return None
    content = content.strip()
    if not content.startswith(GITDIR_PREFIX):
        return None
    target = Path(content[len(GITDIR_PREFIX):].strip())
    if not target.is_absolute():
        target = path.parent / target
    target = _normalize(target)
    return target if target.is_dir() else None


def read_ref(search_dirs: Iterable[Path], ref_name: str) -> str:
    """Return the hash a ref points at, checking loose refs before ``packed-refs``."""

    dirs = list(search_dirs)
    for directory in dirs:
        content = read_text(directory / ref_name)
        if content and content.strip():
            return content.strip()
    for directory in dirs:
        packed = read_text(directory / PACKED_REFS_FILE)
        if packed:
            commit_hash = lookup_packed_ref(packed, ref_name)
            if commit_hash:
                return commit_hash
    return ""


def lookup_packed_ref(packed_text: str, ref_name: str) -> str:
    for raw_line in packed_text.splitlines():
        line = raw_line.strip()
        # Header comments and peeled tag lines.
        if not line or line.startswith("#") or line.startswith("^"):
            continue
        parts = line.split(None, 1)
        if len(parts) == 2 and parts[1] == ref_name:
            return parts[0]
    return ""


def read_text(path: Path) -> Optional[str]:
    """Read a whole file, returning ``None`` when it is absent or unreadable."""

    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        _LOG.debug("Unable to read %s", path, exc_info=True)
        return None


def _search_dirs(metadata_dir: Path) -> List[Path]:
    dirs = [metadata_dir]
    common = read_text(metadata_dir / COMMONDIR_FILE)
    if common and common.strip():
        common_dir = Path(common.strip())
        if not common_dir.is_absolute():
            common_dir = metadata_dir / common_dir
        common_dir = _normalize(common_dir)
        if common_dir.is_dir() and common_dir != metadata_dir:
            dirs.append(common_dir)
    return dirs


def _normalize(path: Path) -> Path:
    return Path(os.path.normpath(os.path.abspath(path)))
