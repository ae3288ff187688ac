"""Diagnostic reporting for data-quality issues found while laying out a tree."""

import logging
from typing import Callable

from models import Diagnostic

logger = logging.getLogger(__name__)

INFO = "info"
WARNING = "warning"

_LOG_LEVELS = {INFO: logging.INFO, WARNING: logging.WARNING}


class DiagnosticSink:
    """
    Collects diagnostics for one layout call.

    Each report is logged, kept for the returned layout, and forwarded to the
    optional caller callback. The callback may ignore everything it receives.
    """

    def __init__(self, callback: Callable[[Diagnostic], None] | None = None):
        self.callback = callback
        self.items: list[Diagnostic] = []

    def report(self, severity: str, code: str, message: str) -> Diagnostic:
        diagnostic = Diagnostic(severity=severity, code=code, message=message)
        self.items.append(diagnostic)
        logger.log(_LOG_LEVELS.get(severity, logging.WARNING), "%s: %s", code, message)
        if self.callback is not None:
            self.callback(diagnostic)
        return diagnostic

    def info(self, code: str, message: str) -> Diagnostic:
        return self.report(INFO, code, message)

    def warning(self, code: str, message: str) -> Diagnostic:
        return self.report(WARNING, code, message)

    def codes(self) -> list[str]:
        return [d.code for d in self.items]
