"""
JSON log formatter carrying the ordering context fields.
"""
import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "request_id",
    "session_key",
    "user_id",
    "operation",
    "status",
    "order_id",
    "product_id",
    "client_id",
    "client",
    "total",
    "error",
)


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record):
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)
