"""Audit logging subsystem for doimeta.

Main Components
---------------
- AuditLogger: JSONL event logger
- LogEvent: Structured event record
- generate_run_id: Run identifier factory
"""

from doimeta.audit.helpers import generate_run_id, get_package_version
from doimeta.audit.logger import AuditLogger
from doimeta.audit.models import LogEvent
from doimeta.utils import get_iso_timestamp

__all__ = [
    "AuditLogger",
    "LogEvent",
    "generate_run_id",
    "get_iso_timestamp",
    "get_package_version",
]
