"""Observer hook for failures a query recovers from instead of raising.

Auto-detection falling back to "all devices" and individual deletes failing
inside a bulk delete leave the query's result intact. A caller that wants
to know registers a callback with ``QueryBuilder.diagnostics()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

PROBE_FAILED = "probe_failed"
PROBE_EMPTY = "probe_empty"
PROBE_NO_ATTRIBUTION = "probe_no_attribution"
DELETE_FAILED = "delete_failed"


@dataclass
class DiagnosticEvent:
    """Something a query recovered from locally instead of raising."""

    kind: str
    detail: dict[str, Any] = field(default_factory=dict)


Diagnostics = Callable[[DiagnosticEvent], None]


def emit(diagnostics: Diagnostics | None, kind: str, **detail: Any) -> None:
    """Deliver a diagnostic event to *diagnostics* if one is registered."""
    if diagnostics is not None:
        diagnostics(DiagnosticEvent(kind=kind, detail=detail))
