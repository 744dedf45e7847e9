import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

"""Unified diagnostic collection for routing and topology passes."""


logger = logging.getLogger(__name__)


class DiagnosticSeverity(Enum):
    """Severity levels for routing diagnostics."""

    DEBUG = "debug"  # Internal router information
    INFO = "info"  # Informational messages for users
    WARNING = "warning"  # Wires skipped or otherwise degraded


_SEVERITY_ORDER = [
    DiagnosticSeverity.DEBUG,
    DiagnosticSeverity.INFO,
    DiagnosticSeverity.WARNING,
]

_LOG_LEVELS = {
    DiagnosticSeverity.DEBUG: logging.DEBUG,
    DiagnosticSeverity.INFO: logging.INFO,
    DiagnosticSeverity.WARNING: logging.WARNING,
}


@dataclass
class Diagnostic:
    """A single diagnostic message with context."""

    severity: DiagnosticSeverity
    message: str
    stage: str  # routing, migration, input
    entity_id: Optional[str] = None  # wire, junction or node id if available


class DiagramDiagnostics:
    """Central diagnostic collection for a routing session.

    Every recorded entry is also forwarded to the module logger, so a caller
    that only configures ``logging`` still sees router activity.

    Usage:
        diagnostics = DiagramDiagnostics()
        diagnostics.warning("Anchor missing", stage="routing", entity_id="w1")
        if diagnostics.warning_count():
            print(diagnostics.format_for_user())
    """

    def __init__(self, verbose: bool = False, debug: bool = False):
        self.diagnostics: List[Diagnostic] = []
        self.verbose = verbose
        self.debug_enabled = debug
        self._warning_count = 0
        self.default_stage = "unknown"

    def debug(
        self,
        message: str,
        stage: Optional[str] = None,
        entity_id: Optional[str] = None,
    ) -> None:
        """Add an internal message (kept only in debug mode)."""
        if self.debug_enabled:
            self._add(DiagnosticSeverity.DEBUG, message, stage, entity_id)
        else:
            logger.debug(message)

    def info(
        self,
        message: str,
        stage: Optional[str] = None,
        entity_id: Optional[str] = None,
    ) -> None:
        """Add an informational message (kept in verbose mode)."""
        if self.verbose or self.debug_enabled:
            self._add(DiagnosticSeverity.INFO, message, stage, entity_id)
        else:
            logger.info(message)

    def warning(
        self,
        message: str,
        stage: Optional[str] = None,
        entity_id: Optional[str] = None,
    ) -> None:
        """Add a warning (always kept, doesn't stop routing)."""
        self._add(DiagnosticSeverity.WARNING, message, stage, entity_id)
        self._warning_count += 1

    def _add(
        self,
        severity: DiagnosticSeverity,
        message: str,
        stage: Optional[str],
        entity_id: Optional[str],
    ) -> None:
        diag = Diagnostic(
            severity=severity,
            message=message,
            stage=stage or self.default_stage,
            entity_id=entity_id,
        )
        self.diagnostics.append(diag)
        logger.log(_LOG_LEVELS[severity], self._format_diagnostic(diag))

    def warning_count(self) -> int:
        return self._warning_count

    def get_messages(
        self, min_severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    ) -> List[str]:
        """Get formatted messages at or above the specified severity level."""
        threshold = _SEVERITY_ORDER.index(min_severity)
        return [
            self._format_diagnostic(diag)
            for diag in self.diagnostics
            if _SEVERITY_ORDER.index(diag.severity) >= threshold
        ]

    def _format_diagnostic(self, diag: Diagnostic) -> str:
        """Format a single diagnostic for display."""
        # Format: SEVERITY [stage:entity]: message
        location = diag.stage
        if diag.entity_id:
            location = f"{location}:{diag.entity_id}"
        return f"{diag.severity.value.upper()} [{location}]: {diag.message}"

    def format_for_user(self) -> str:
        """Format all diagnostics for user-friendly output."""
        if not self.diagnostics:
            return "No diagnostics."

        if self.debug_enabled:
            min_severity = DiagnosticSeverity.DEBUG
        elif self.verbose:
            min_severity = DiagnosticSeverity.INFO
        else:
            min_severity = DiagnosticSeverity.WARNING

        messages = self.get_messages(min_severity)
        summary = (
            f"\nRouting summary: {len(self.diagnostics)} message(s), "
            f"{self._warning_count} warning(s)"
        )
        return "\n".join(messages) + summary

