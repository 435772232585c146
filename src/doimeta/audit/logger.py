"""Structured audit logger for JSONL event logging.

Provides append-only structured event logging to JSONL files with
a persistent file handle for efficient I/O.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from doimeta.audit.models import LogEvent
from doimeta.utils import get_iso_timestamp

__all__ = ["AuditLogger"]


class AuditLogger:
    """JSONL audit logger with persistent file handle.

    Writes structured log events to a JSONL file (one JSON object per line).
    Events are append-only and flushed after each write for durability.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    log_path : Path
        Path to JSONL log file.
    current_stage : str | None
        Current stage name for context.
    """

    def __init__(self, run_id: str, log_path: Path) -> None:
        """Initialize audit logger and open file handle.

        Parameters
        ----------
        run_id : str
            Unique run identifier.
        log_path : Path
            Path to JSONL log file.
        """
        self.run_id = run_id
        self.log_path = Path(log_path)
        self.current_stage: str | None = None

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close file."""
        self.close()

    def close(self) -> None:
        """Flush and close the log file handle."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def set_stage(self, stage: str | None) -> None:
        """Set current stage context.

        Parameters
        ----------
        stage : str | None
            Stage name or None to clear.
        """
        self.current_stage = stage

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
        doi: str | None = None,
    ) -> None:
        """Write structured event to log.

        Parameters
        ----------
        event_type : str
            Event type identifier (e.g., "doi_resolved").
        data : dict[str, Any] | None, optional
            Event-specific data payload.
        level : str, optional
            Log level ("DEBUG", "INFO", "WARN", "ERROR").
        stage : str | None, optional
            Stage identifier, uses current_stage if not provided.
        doi : str | None, optional
            DOI if the event concerns a single identifier.
        """
        if data is None:
            data = {}

        if stage is None:
            stage = self.current_stage

        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data,
            stage=stage,
            doi=doi,
        )

        self._write_event(log_event)

    def _write_event(self, event: LogEvent) -> None:
        event_dict = asdict(event)
        json.dump(event_dict, self._file, ensure_ascii=False, separators=(",", ":"))
        self._file.write("\n")
        self._file.flush()

    def run_started(self, command: list[str], parameters: dict[str, Any]) -> None:
        """Log run_started event.

        Parameters
        ----------
        command : list[str]
            Command-line arguments.
        parameters : dict[str, Any]
            Configuration parameters.
        """
        self.event(
            "run_started",
            data={"command": command, "parameters": parameters},
        )

    def run_finished(
        self,
        status: str,
        duration_seconds: float,
        dois_processed: int | None = None,
    ) -> None:
        """Log run_finished event.

        Parameters
        ----------
        status : str
            Run status ("success", "failed", "partial").
        duration_seconds : float
            Total execution time in seconds.
        dois_processed : int | None, optional
            Number of DOIs attempted.
        """
        data: dict[str, Any] = {
            "status": status,
            "duration_seconds": duration_seconds,
        }
        if dois_processed is not None:
            data["dois_processed"] = dois_processed

        self.event("run_finished", data=data)

    def doi_resolved(
        self,
        doi: str,
        content_type: str | None,
        url: str | None = None,
        kind: str | None = None,
    ) -> None:
        """Log doi_resolved event.

        Parameters
        ----------
        doi : str
            Normalized DOI.
        content_type : str | None
            Content type of the metadata document.
        url : str | None, optional
            Final URL the document was served from.
        kind : str | None, optional
            Publication kind the document classified as.
        """
        data: dict[str, Any] = {"content_type": content_type}
        if url is not None:
            data["url"] = url
        if kind is not None:
            data["kind"] = kind

        self.event("doi_resolved", data=data, doi=doi)

    def doi_not_found(self, doi: str, status_code: int) -> None:
        """Log doi_not_found event.

        Parameters
        ----------
        doi : str
            Normalized DOI.
        status_code : int
            HTTP status the resolver answered with.
        """
        self.event(
            "doi_not_found",
            data={"status_code": status_code},
            level="WARN",
            doi=doi,
        )

    def error(
        self,
        exception_class: str,
        message: str,
        stage: str | None = None,
        doi: str | None = None,
        traceback: str | None = None,
    ) -> None:
        """Log error event.

        Parameters
        ----------
        exception_class : str
            Exception class name.
        message : str
            Error message.
        stage : str | None, optional
            Stage where error occurred.
        doi : str | None, optional
            DOI being processed when the error occurred.
        traceback : str | None, optional
            Stack trace (only in debug mode).
        """
        data: dict[str, Any] = {
            "exception_class": exception_class,
            "message": message,
        }
        if traceback is not None:
            data["traceback"] = traceback

        self.event("error", data=data, stage=stage, level="ERROR", doi=doi)
