"""
Audit log writer for the allowlist proxy.

Provides thread-safe audit logging to date-stamped JSONL files.
"""

import logging
import os
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from allowlist_proxy.audit.models import AuditEvent

logger = logging.getLogger(__name__)


@dataclass
class WriteResult:
    """Result of a log write operation."""

    success: bool
    event_id: str
    log_file: str
    error: str | None = None
    bytes_written: int = 0


class AuditLogger:
    """
    Thread-safe audit log writer.

    Writes one JSON object per line to ``audit_YYYYMMDD.jsonl`` in the audit
    directory. Write failures are reported in the result and logged; they
    never propagate into the audited operation.
    """

    DEFAULT_AUDIT_DIR = Path("var/audit")
    LOG_PREFIX = "audit_"
    LOG_SUFFIX = ".jsonl"

    def __init__(self, audit_dir: Path | None = None):
        """
        Initialize the audit logger.

        Args:
            audit_dir: Directory for audit log files (default: var/audit/)
        """
        self._audit_dir = Path(audit_dir) if audit_dir else self.DEFAULT_AUDIT_DIR
        self._audit_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    @property
    def audit_dir(self) -> Path:
        return self._audit_dir

    def _get_log_file(self, date: datetime | None = None) -> Path:
        """Get the log file path for a specific date."""
        if date is None:
            date = datetime.now(timezone.utc)
        filename = f"{self.LOG_PREFIX}{date.strftime('%Y%m%d')}{self.LOG_SUFFIX}"
        return self._audit_dir / filename

    def log(self, event: AuditEvent) -> WriteResult:
        """Append an event to today's log file."""
        log_file = self._get_log_file()
        log_line = event.to_log_line() + "\n"
        data = log_line.encode("utf-8")

        try:
            with self._lock:
                with open(log_file, "ab") as f:
                    f.write(data)
                    f.flush()
                    os.fsync(f.fileno())
        except OSError as e:
            logger.error(f"Failed to write audit event {event.event_id}: {e}")
            return WriteResult(
                success=False,
                event_id=event.event_id,
                log_file=str(log_file),
                error=str(e),
            )

        return WriteResult(
            success=True,
            event_id=event.event_id,
            log_file=str(log_file),
            bytes_written=len(data),
        )

    def read_events(self, date: datetime | None = None) -> list[AuditEvent]:
        """
        Read all events logged on a date (default: today).

        Malformed lines are skipped with a warning.
        """
        log_file = self._get_log_file(date)
        if not log_file.exists():
            return []

        events = []
        with self._lock:
            lines = log_file.read_text(encoding="utf-8").splitlines()

        for line_no, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                events.append(AuditEvent.from_log_line(line))
            except ValidationError as e:
                logger.warning(f"Skipping malformed audit line {log_file}:{line_no}: {e}")
        return events
