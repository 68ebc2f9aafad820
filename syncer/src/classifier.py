"""Turn raw agent log lines into normalized events.

Agent log lines are JSON objects with the subsystem under key ``"0"``, the
message under ``"1"``, and a ``_meta`` block carrying the date and level name.
Only a handful of line kinds are interesting; everything else maps to None.
"""

import json
import re
from datetime import datetime, timezone

from syncer.src.models import Category, LogMetadata, LogRecord, NormalizedEvent

TOOL_PATTERN = re.compile(r"tool=(\w+) toolCallId=(\S+)")


def _or_default(value, default):
    return default if value is None else value


def decode_record(line: str) -> LogRecord | None:
    """Decode one raw line, returning None when it is not a log record."""
    try:
        data = json.loads(line)
    except (TypeError, ValueError, RecursionError):
        return None
    if not isinstance(data, dict):
        return None

    # JSON null counts as absent for every field.
    subsystem = _or_default(data.get("0"), "")
    message = _or_default(data.get("1"), "")
    time = data.get("time")
    meta = _or_default(data.get("_meta"), {})
    if not isinstance(subsystem, str) or not isinstance(message, str):
        return None
    if time is not None and not isinstance(time, str):
        return None
    if not isinstance(meta, dict):
        return None

    date = meta.get("date")
    level = meta.get("logLevelName")
    return LogRecord(
        subsystem=subsystem,
        message=message,
        metadata=LogMetadata(
            date=date if isinstance(date, str) else None,
            level=level if isinstance(level, str) else None,
        ),
        time=time,
    )


def resolve_timestamp(record: LogRecord) -> str:
    if record.time:
        return record.time
    if record.metadata.date:
        return record.metadata.date
    return utc_now_iso()


def utc_now_iso() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _tool_event(record: LogRecord, phase: str, timestamp: str) -> NormalizedEvent | None:
    match = TOOL_PATTERN.search(record.message)
    if not match:
        return None
    name, call_id = match.groups()
    return NormalizedEvent(
        category=Category.EXEC,
        action=f"tool:{name}:{phase}",
        details={"toolCallId": call_id, "raw": record.message},
        timestamp=timestamp,
    )


def classify_record(record: LogRecord) -> NormalizedEvent | None:
    """Apply the classification rules in priority order; first match wins."""
    message = record.message
    timestamp = resolve_timestamp(record)

    if "tool start:" in message:
        event = _tool_event(record, "start", timestamp)
        if event:
            return event

    if "tool end:" in message:
        event = _tool_event(record, "end", timestamp)
        if event:
            return event

    if "run complete" in message:
        return NormalizedEvent(Category.CONVERSATION, "run:complete",
                               {"raw": message}, timestamp)

    if "model.usage" in message or "tokens" in message:
        return NormalizedEvent(Category.COST, "model:usage",
                               {"raw": message}, timestamp)

    if record.metadata.level == "ERROR":
        return NormalizedEvent(Category.ERROR, "error",
                               {"raw": message, "subsystem": record.subsystem},
                               timestamp)

    return None


def classify(line: str) -> NormalizedEvent | None:
    """Classify a raw line. Never raises; anything unusable yields None."""
    record = decode_record(line)
    if record is None:
        return None
    return classify_record(record)
