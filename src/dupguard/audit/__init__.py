"""Structured audit logging for dupguard.

Main Components
---------------
- AuditLogger: JSONL event logger injected into every engine stage
- LogEvent: event envelope written one per line
"""

from dupguard.audit.helpers import generate_run_id, get_package_version
from dupguard.audit.logger import AuditLogger
from dupguard.audit.models import LogEvent, LogLevel
from dupguard.utils import get_iso_timestamp

__all__ = [
    "AuditLogger",
    "LogEvent",
    "LogLevel",
    "generate_run_id",
    "get_package_version",
    "get_iso_timestamp",
]
