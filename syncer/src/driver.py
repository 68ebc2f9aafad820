"""One synchronization pass over today's agent log file."""

import logging
import os
from datetime import datetime, timezone
from typing import Callable

from syncer.src.checkpoint import CheckpointStore
from syncer.src.classifier import classify
from syncer.src.config import SyncConfig
from syncer.src.models import Checkpoint, NormalizedEvent, SyncReport
from syncer.src.sink import SinkClient

logger = logging.getLogger(__name__)


def log_file_for(log_directory: str, day: datetime) -> str:
    """Path of the agent's log file for the calendar day of *day* (UTC)."""
    return os.path.join(log_directory, f"openclaw-{day.strftime('%Y-%m-%d')}.log")


def split_lines(content: str) -> list[str]:
    """Split on newlines and drop blank lines.

    Checkpoint watermarks count the lines returned here, so the splitting rule
    must stay in step with checkpoints already on disk.
    """
    return [line for line in content.split("\n") if line.strip()]


class SyncDriver:
    def __init__(self, config: SyncConfig, store: CheckpointStore, sink: SinkClient,
                 classifier: Callable[[str], NormalizedEvent | None] = classify,
                 clock: Callable[[], datetime] | None = None):
        self._config = config
        self._store = store
        self._sink = sink
        self._classify = classifier
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def current_log_file(self) -> str:
        return log_file_for(self._config.log_directory, self._clock())

    def run(self) -> SyncReport:
        """Ship every unprocessed line of today's file and advance the checkpoint.

        Raises CheckpointWriteError if the new checkpoint cannot be saved.
        """
        log_file = self.current_log_file()
        checkpoint = self._store.load()
        report = SyncReport(file=log_file)

        if not os.path.exists(log_file):
            logger.info("Log file not found: %s", log_file)
            report.file_missing = True
            return report

        try:
            with open(log_file, "r", encoding="utf-8", errors="replace") as f:
                lines = split_lines(f.read())
        except OSError as exc:
            logger.error("Cannot read %s: %s", log_file, exc)
            return report

        watermark = checkpoint.line if checkpoint.file == log_file else 0
        if checkpoint.file != log_file:
            logger.info("New log file %s, starting from line 0", log_file)

        new_lines = lines[watermark:]
        report.lines_processed = len(new_lines)
        logger.info("Processing %d new lines from %s", len(new_lines), log_file)

        for line in new_lines:
            event = self._classify(line)
            if event is None:
                continue
            report.events += 1
            if self._deliver(event):
                report.sent += 1
            else:
                report.failed += 1

        # Advance even past failed deliveries; they are not retried.
        self._store.save(Checkpoint(
            file=log_file,
            line=len(lines),
            timestamp=self._clock().isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        ))
        logger.info("Synced %d of %d events from %s", report.sent, report.events, log_file)
        return report

    def _deliver(self, event: NormalizedEvent) -> bool:
        try:
            return self._sink.deliver(event).delivered
        except Exception:
            logger.exception("Unexpected error delivering %s/%s", event.category.value, event.action)
            return False
