"""Data models for audit logging."""

from dataclasses import dataclass, field
from typing import Any

__all__ = ["LogEvent"]


@dataclass
class LogEvent:
    """Structured log event for JSONL output.

    Attributes
    ----------
    ts : str
        ISO8601 timestamp with microseconds (UTC).
    run_id : str
        Run identifier.
    level : str
        Log level ("DEBUG", "INFO", "WARN", "ERROR").
    event : str
        Event type (e.g., "doi_resolved").
    data : dict[str, Any]
        Event-specific payload.
    stage : str | None
        Stage the event belongs to (e.g., "retrieve", "parse").
    doi : str | None
        DOI the event concerns, if any.
    """

    ts: str
    run_id: str
    level: str
    event: str
    data: dict[str, Any] = field(default_factory=dict)
    stage: str | None = None
    doi: str | None = None
