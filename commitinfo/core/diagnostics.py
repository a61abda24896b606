"""Forward resolution diagnostics to :mod:`logging`."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from commitinfo.core.model import Diagnostic, DiagnosticLevel, Importance

_LOG = logging.getLogger(__name__)


def logging_level(diagnostic: Diagnostic) -> int:
    if diagnostic.level is DiagnosticLevel.ERROR:
        return logging.ERROR
    if diagnostic.level is DiagnosticLevel.WARNING:
        return logging.WARNING
    if diagnostic.importance is Importance.HIGH:
        return logging.INFO
    return logging.DEBUG


def log_diagnostics(diagnostics: Iterable[Diagnostic], logger: Optional[logging.Logger] = None) -> int:
    """Emit each diagnostic on ``logger`` and return how many were emitted."""

    target = logger or _LOG
    count = 0
    for diagnostic in diagnostics:
        target.log(logging_level(diagnostic), "%s", diagnostic.format())
        count += 1
    return count
