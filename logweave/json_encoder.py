"""An encoder that writes each record as a JSON object on its own line."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .chunks import _format_time
from .record import Record, mdc_items
from .style import NEWLINE, Writer

_RFC3339 = "%Y-%m-%dT%H:%M:%S%.f%:z"


@dataclass(frozen=True)
class JsonEncoder:
    """Writes records as single-line JSON objects.

    The object holds the local time, level, message, module path, file and
    line (when known), target, thread name and id, and the thread's
    mapped diagnostic context.
    """

    def encode(self, w: Writer, record: Record) -> None:
        """Write ``record`` stamped with the current time."""
        self.encode_at(w, datetime.now().astimezone(), record)

    def encode_at(self, w: Writer, time: datetime, record: Record) -> None:
        """Write ``record`` stamped with ``time``, shown in local time."""
        thread = threading.current_thread()
        message: dict[str, Any] = {
            "time": _format_time(_RFC3339, time.astimezone()),
            "level": str(record.level),
            "message": record.message,
        }
        if record.module_path is not None:
            message["module_path"] = record.module_path
        if record.file is not None:
            message["file"] = record.file
        if record.line is not None:
            message["line"] = record.line
        message["target"] = record.target
        message["thread"] = thread.name or None
        message["thread_id"] = threading.get_native_id()
        message["mdc"] = dict(mdc_items())

        text = json.dumps(message, ensure_ascii=False, separators=(",", ":"))
        w.write(text.encode("utf-8"))
        w.write(NEWLINE.encode("utf-8"))