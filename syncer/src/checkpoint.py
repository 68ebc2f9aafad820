"""Persists the line watermark of the current log file between runs.

State is a JSON file written atomically (tmp + os.replace). A missing or
corrupt file reads back as the zero checkpoint so the next run re-reads the
current log from the start.
"""

import json
import logging
import os
import tempfile

from shared.errors import CheckpointWriteError
from syncer.src.models import Checkpoint

logger = logging.getLogger(__name__)

# Keys written by the earlier sync script.
_LEGACY_KEYS = {"lastFile": "file", "lastLine": "line", "lastTimestamp": "timestamp"}


class CheckpointStore:
    def __init__(self, path: str):
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def load(self) -> Checkpoint:
        if not os.path.exists(self._path):
            return Checkpoint()
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError, RecursionError) as exc:
            logger.warning("Ignoring unreadable checkpoint %s: %s", self._path, exc)
            return Checkpoint()

        checkpoint = _from_dict(data)
        if checkpoint is None:
            logger.warning("Ignoring malformed checkpoint %s", self._path)
            return Checkpoint()
        return checkpoint

    def save(self, checkpoint: Checkpoint) -> None:
        directory = os.path.dirname(os.path.abspath(self._path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=directory)
        except OSError as exc:
            raise CheckpointWriteError(f"cannot write checkpoint {self._path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(checkpoint.to_dict(), f, indent=2)
            os.replace(tmp, self._path)
        except OSError as exc:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise CheckpointWriteError(f"cannot write checkpoint {self._path}: {exc}") from exc


def _from_dict(data) -> Checkpoint | None:
    if not isinstance(data, dict):
        return None
    data = {_LEGACY_KEYS.get(k, k): v for k, v in data.items()}

    file = data.get("file", "")
    line = data.get("line", 0)
    timestamp = data.get("timestamp", "")
    if not isinstance(file, str) or not isinstance(timestamp, str):
        return None
    # bool is an int subclass
    if not isinstance(line, int) or isinstance(line, bool) or line < 0:
        return None
    return Checkpoint(file=file, line=line, timestamp=timestamp)
