from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Any, Dict

from pythonjsonlogger import jsonlogger


request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)


class RequestContextFilter(logging.Filter):
    """Attach the current request id (if any) to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


class JsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:  # type: ignore[override]
        super().add_fields(log_record, record, message_dict)
        if not log_record.get("level"):
            log_record["level"] = record.levelname
        if not log_record.get("logger"):
            log_record["logger"] = record.name
        if log_record.get("request_id") is None:
            log_record.pop("request_id", None)
        if record.exc_info and not log_record.get("exc_info"):
            log_record["exc_info"] = self.formatException(record.exc_info)


def setup_json_logging(level: str = "INFO") -> None:
    """Send JSON lines to stdout, tagged with the active request id."""
    root = logging.getLogger()
    root.setLevel(level)
    # uvicorn installs its own handlers before the app factory runs
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter("%(asctime)s %(level)s %(name)s %(message)s %(request_id)s"))
    handler.addFilter(RequestContextFilter())
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("python_multipart").setLevel(logging.WARNING)
