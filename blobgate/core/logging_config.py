"""
Logging infrastructure for BlobGate.

Records emitted while a gateway call is running are tagged with that call's
operation name, container, blob and a short operation id, so the lines of
concurrent uploads can be told apart. Storage credentials are scrubbed from
every record before it reaches a handler.
"""

import json
import logging
import logging.handlers
import re
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, TextIO

REDACTED = "***REDACTED***"

_operation: ContextVar[Optional[Dict[str, str]]] = ContextVar("blobgate_operation", default=None)


@contextmanager
def operation_scope(
    operation: str,
    container: Optional[str] = None,
    blob: Optional[str] = None,
) -> Iterator[str]:
    """
    Tag log records emitted inside the block with one gateway call.

    Scopes nest; leaving a scope restores the enclosing one.

    Yields:
        The generated operation id
    """
    operation_id = uuid.uuid4().hex[:12]
    fields = {"operation": operation, "operation_id": operation_id}
    if container is not None:
        fields["container"] = container
    if blob is not None:
        fields["blob"] = blob

    token = _operation.set(fields)
    try:
        yield operation_id
    finally:
        _operation.reset(token)


def current_operation() -> Optional[Dict[str, str]]:
    """Return the fields of the gateway call in progress, if any."""
    return _operation.get()


class OperationContextFilter(logging.Filter):
    """Attach the active gateway call to each record as ``record.operation``."""

    def filter(self, record: logging.LogRecord) -> bool:
        fields = _operation.get()
        if fields is not None and not hasattr(record, "operation"):
            record.operation = dict(fields)
        return True


class SensitiveDataFilter(logging.Filter):
    """Scrub account keys, SAS tokens and auth headers from the rendered message."""

    PATTERNS = [
        re.compile(r'(Authorization:\s+)(?:Bearer\s+)?\S+', re.IGNORECASE),
        re.compile(r'(AccountKey=)[^;\s]+', re.IGNORECASE),
        re.compile(r'(SharedAccessSignature=)[^;&\s]+', re.IGNORECASE),
        re.compile(r'(sig=)[^;&\s]+', re.IGNORECASE),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        scrubbed = message
        for pattern in self.PATTERNS:
            scrubbed = pattern.sub(rf'\1{REDACTED}', scrubbed)
        if scrubbed != message:
            # Args are already folded into the message
            record.msg = scrubbed
            record.args = None
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with the gateway call fields at top level."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "operation", None) or {})

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry)


class TextFormatter(logging.Formatter):
    """Human-readable lines; a running gateway call is appended in brackets."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = getattr(record, "operation", None)
        if fields:
            line = f"{line} [{fields['operation']} {fields['operation_id']}]"
        return line


def _is_blobgate_handler(handler: logging.Handler) -> bool:
    return getattr(handler, "_blobgate", False)


def _install(root: logging.Logger, handler: logging.Handler, formatter: logging.Formatter) -> None:
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    handler.addFilter(OperationContextFilter())
    handler.addFilter(SensitiveDataFilter())
    handler._blobgate = True
    root.addHandler(handler)


def setup_logging(
    level: str = "INFO",
    format_type: str = "json",
    log_file: Optional[str] = None,
    rotation_size: str = "10MB",
    rotation_count: int = 5,
    module_levels: Optional[Dict[str, str]] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure BlobGate logging on the root logger.

    Calling it again replaces the handlers a previous call installed and
    leaves any other handler alone.

    Args:
        level: Default log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: "json" or "text"
        log_file: Optional path of a size-rotated log file
        rotation_size: Rotation threshold, e.g. "10MB"
        rotation_count: Number of rotated files kept
        module_levels: Per-logger levels, e.g. {"blobgate.store.azure": "DEBUG"}
        stream: Console stream; stderr keeps command output on stdout clean
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))

    for handler in [h for h in root.handlers if _is_blobgate_handler(h)]:
        root.removeHandler(handler)
        handler.close()

    formatter = JSONFormatter() if format_type == "json" else TextFormatter()
    _install(root, logging.StreamHandler(stream or sys.stderr), formatter)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        _install(
            root,
            logging.handlers.RotatingFileHandler(
                filename=log_file,
                maxBytes=_parse_size(rotation_size),
                backupCount=rotation_count,
                encoding="utf-8",
            ),
            formatter,
        )

    for module_name, module_level in (module_levels or {}).items():
        logging.getLogger(module_name).setLevel(getattr(logging, module_level.upper()))

    root.debug(
        f"Logging configured: level={level}, format={format_type}, "
        f"file={log_file or '-'}, module overrides={len(module_levels or {})}"
    )


_SIZE_UNITS = (("GB", 1024 ** 3), ("MB", 1024 ** 2), ("KB", 1024), ("B", 1))


def _parse_size(size_str: str) -> int:
    """Parse a rotation size such as "10MB" or "2048" into bytes."""
    size_str = size_str.upper().strip()
    for suffix, multiplier in _SIZE_UNITS:
        if size_str.endswith(suffix):
            return int(float(size_str[:-len(suffix)].strip()) * multiplier)
    return int(size_str)
