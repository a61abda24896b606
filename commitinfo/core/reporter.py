"""Render resolved metadata for build systems."""

from __future__ import annotations

import json
import pathlib
import re
from typing import Dict, List, Sequence

from commitinfo.core.model import RepositoryInfo, ResolveResult

SUPPORTED_FORMATS = ("json", "env", "md")

ENV_KEYS = {
    "commitHash": "COMMIT_HASH",
    "branch": "BRANCH",
    "isPullRequest": "IS_PULL_REQUEST",
    "modified": "MODIFIED",
    "originUrl": "ORIGIN_URL",
    "gitUser": "GIT_USER",
}

_UNSAFE_ENV_VALUE = re.compile(r"[\r\n]")


def render_json(result: ResolveResult) -> str:
    return json.dumps(result.to_dict(), indent=2, sort_keys=True)


def render_env(info: RepositoryInfo, prefix: str = "") -> str:
    """One ``KEY=value`` line per field, usable as dotenv or ``$GITHUB_OUTPUT``."""

    lines: List[str] = []
    for key, value in info.to_dict().items():
        if isinstance(value, bool):
            value = "true" if value else "false"
        text = _UNSAFE_ENV_VALUE.sub(" ", str(value))
        lines.append(f"{prefix}{ENV_KEYS[key]}={text}")
    return "\n".join(lines) + "\n"


def render_markdown(result: ResolveResult) -> str:
    info = result.info
    lines: List[str] = ["# Commit Info", ""]
    lines.append(f"- Commit: `{info.commit_hash}`")
    lines.append(f"- Branch: {info.branch or 'unknown'}")
    if info.is_pull_request:
        lines.append("- Pull request: yes")
    lines.append(f"- Working tree: {info.modification_state.value or 'unknown'}")
    lines.append(f"- Origin: {info.origin_url or 'unknown'}")
    if info.owner:
        lines.append(f"- Owner: {info.owner}")
    if result.diagnostics:
        lines.append("")
        lines.append("## Diagnostics")
        for diagnostic in result.diagnostics:
            lines.append(f"- {diagnostic.format()}")
    return "\n".join(lines) + "\n"


def render(result: ResolveResult, fmt: str, env_prefix: str = "") -> str:
    fmt = fmt.lower()
    if fmt == "json":
        return render_json(result)
    if fmt == "env":
        return render_env(result.info, prefix=env_prefix)
    if fmt == "md":
        return render_markdown(result)
    raise ValueError(f"Unsupported format {fmt!r}; expected one of {', '.join(SUPPORTED_FORMATS)}")


def write_outputs(
    result: ResolveResult,
    out: pathlib.Path,
    formats: Sequence[str] | None = None,
    env_prefix: str = "",
) -> Dict[str, pathlib.Path]:
    """Write one file per format next to ``out`` and return the paths written.

    The first format is written to ``out`` itself; the others get the
    matching suffix, or ``<name>.<fmt>`` when that path is already taken.
    """

    formats = [fmt.lower() for fmt in (formats or ["json"])]
    out.parent.mkdir(parents=True, exist_ok=True)
    written: Dict[str, pathlib.Path] = {}
    for index, fmt in enumerate(formats):
        if fmt in written:
            continue
        path = out if index == 0 else out.with_suffix(f".{fmt}")
        if path in written.values():
            path = out.with_name(f"{out.name}.{fmt}")
        path.write_text(render(result, fmt, env_prefix=env_prefix))
        written[fmt] = path
    return written
