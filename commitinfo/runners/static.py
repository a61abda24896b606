"""Deterministic text source for tests and dry runs."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Union

from .base import GitQuery, GitRunnerError

Response = Union[str, Exception]


class StaticTextSource:
    """Answer queries from a fixed mapping.

    A query mapped to an exception raises it; an unmapped query fails with
    :class:`GitRunnerError` as if the tool were missing.
    """

    def __init__(self, responses: Optional[Mapping[GitQuery, Response]] = None):
        self.responses: Dict[GitQuery, Response] = dict(responses or {})
        self.calls: List[GitQuery] = []

    def get_text(self, query: GitQuery) -> str:
        self.calls.append(query)
        if query not in self.responses:
            raise GitRunnerError(query, f"no response configured for {query.value}")
        response = self.responses[query]
        if isinstance(response, Exception):
            raise response
        return response
