"""Data types passed between the syncer components."""

from dataclasses import dataclass, field
from enum import Enum


class Category(str, Enum):
    CONVERSATION = "conversation"
    EXEC = "exec"
    FILE = "file"
    API = "api"
    DEPLOY = "deploy"
    COST = "cost"
    ERROR = "error"
    SYSTEM = "system"


@dataclass(frozen=True)
class Checkpoint:
    """Line watermark for one log file."""

    file: str = ""
    line: int = 0
    timestamp: str = ""

    def to_dict(self) -> dict:
        return {"file": self.file, "line": self.line, "timestamp": self.timestamp}


@dataclass(frozen=True)
class LogMetadata:
    date: str | None = None
    level: str | None = None


@dataclass(frozen=True)
class LogRecord:
    """A decoded agent log line: subsystem tag, message and metadata block."""

    subsystem: str
    message: str
    metadata: LogMetadata
    time: str | None = None


@dataclass(frozen=True)
class NormalizedEvent:
    category: Category
    action: str
    details: dict = field(default_factory=dict)
    timestamp: str = ""

    def to_payload(self) -> dict:
        """Return the JSON body sent to the logging API."""
        return {
            "category": self.category.value,
            "action": self.action,
            "details": self.details,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class DeliveryResult:
    delivered: bool
    status_code: int | None = None
    error: str | None = None


@dataclass
class SyncReport:
    file: str
    lines_processed: int = 0
    events: int = 0
    sent: int = 0
    failed: int = 0
    file_missing: bool = False
