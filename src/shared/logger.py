"""
Structured JSON Logging Configuration

This module provides structured logging for the accounting consumer and the
development order publisher.

LOG RECORD LAYOUT:
- timestamp: ISO 8601 UTC with millisecond precision
- level / logger / message: standard logging fields
- service: service identifier ("accounting", "order-producer")
- correlation_id: order_id of the order being handled, when known
- exception: formatted traceback when exc_info is attached
- extra: any additional fields passed through ``extra={...}``

EXAMPLE OUTPUT:
{
  "timestamp": "2025-01-10T14:30:00.123Z",
  "level": "ERROR",
  "service": "accounting",
  "logger": "src.accounting.consumer",
  "correlation_id": "3a1b7c5e-6f0d-4d8e-9c1a-2b3c4d5e6f70",
  "message": "Failed to save order to PostgreSQL",
  "extra": {"partition": 0, "offset": 42}
}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

# ==============================================================================
# JSON FORMATTER
# ==============================================================================

# LogRecord attributes that are never copied into the "extra" object
_STANDARD_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'taskName', 'correlation_id',
}


class JSONFormatter(logging.Formatter):
    """
    Log formatter that renders each record as a single JSON line.

    Fields: timestamp, level, service, logger, message, plus correlation_id,
    exception and extra when present on the record.
    """

    def __init__(
        self,
        service_name: str = "accounting",
        include_extra: bool = True
    ):
        """
        Initialize JSON formatter.

        Args:
            service_name: Name of the service (e.g., "accounting")
            include_extra: Whether to include extra fields from log record
        """
        super().__init__()
        self.service_name = service_name
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if getattr(record, 'correlation_id', None) is not None:
            log_data['correlation_id'] = record.correlation_id

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        if self.include_extra:
            extra_fields = {
                k: v for k, v in record.__dict__.items()
                if k not in _STANDARD_ATTRS and not k.startswith('_')
            }

            if extra_fields:
                log_data['extra'] = extra_fields

        # One line per record; non-serializable values fall back to str()
        return json.dumps(log_data, default=str)

    @staticmethod
    def _format_timestamp(created: float) -> str:
        """
        Format a LogRecord creation time as ISO 8601 UTC.

        Args:
            created: Unix timestamp from log record

        Returns:
            Timestamp such as "2025-01-10T14:30:00.123Z"
        """
        dt = datetime.fromtimestamp(created, tz=timezone.utc)
        return dt.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'


# ==============================================================================
# PLAIN TEXT FORMATTER (for development)
# ==============================================================================

class PlainTextFormatter(logging.Formatter):
    """
    Human-readable log formatter for local development.

    Format: [2025-01-10 14:30:00] INFO [accounting] Order 42 saved to PostgreSQL database
    """

    def __init__(self, service_name: str = "accounting"):
        super().__init__(
            fmt=f'[%(asctime)s] %(levelname)s [{service_name}] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )


# ==============================================================================
# LOGGER SETUP
# ==============================================================================

def setup_logger(
    name: str,
    service_name: str,
    log_level: str = "INFO",
    log_format: str = "json"
) -> logging.Logger:
    """
    Set up a structured logger writing to stdout.

    Module loggers below ``name`` (``logging.getLogger(__name__)`` inside the
    package) propagate to the handler installed here, so configuring the
    package root once covers the whole service.

    Args:
        name: Logger name (e.g. "src.accounting")
        service_name: Service identifier written into every record
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format ("json" or "text")

    Returns:
        Configured logging.Logger instance

    Example:
        >>> logger = setup_logger("src.accounting", "accounting")
        >>> logger.info("Connecting to Kafka", extra={"kafka_addr": "kafka:9092"})
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Prevent duplicate handlers if logger already configured
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logger.level)

    if log_format.lower() == "json":
        formatter = JSONFormatter(service_name=service_name)
    else:
        formatter = PlainTextFormatter(service_name=service_name)

    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


# ==============================================================================
# CORRELATION ID ADAPTER
# ==============================================================================

class CorrelationAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds correlation_id to every record it emits.

    Example:
        >>> order_logger = CorrelationAdapter(logger, {"correlation_id": order.order_id})
        >>> order_logger.info("Order received")
    """

    def process(self, msg: str, kwargs: dict) -> tuple:
        extra = dict(kwargs.get('extra') or {})

        if 'correlation_id' in self.extra:
            extra['correlation_id'] = self.extra['correlation_id']

        kwargs['extra'] = extra
        return msg, kwargs
