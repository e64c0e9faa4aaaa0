import logging
import sys
import json
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from typing import Any, Dict, Iterator

ROOT_LOGGER_NAME = "workflow-gateway"

# Per-request context, stamped onto every record logged while it is set
request_id_var: ContextVar[str] = ContextVar("request_id", default="")
actor_did_var: ContextVar[str] = ContextVar("actor_did", default="")
workflow_id_var: ContextVar[str] = ContextVar("workflow_id", default="")

_CONTEXT_VARS = {
    "request_id": request_id_var,
    "actor_did": actor_did_var,
    "workflow_id": workflow_id_var,
}

class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "message": record.getMessage(),
        }
        for field, var in _CONTEXT_VARS.items():
            value = var.get()
            if value:
                log_data[field] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Explicit extra fields win over the ambient context
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)

@contextmanager
def log_context(**fields: str) -> Iterator[None]:
    """Bind request/workflow context for the duration of the block."""
    unknown = set(fields) - set(_CONTEXT_VARS)
    if unknown:
        raise ValueError(f"Unknown log context fields: {', '.join(sorted(unknown))}")
    tokens = [(_CONTEXT_VARS[name], _CONTEXT_VARS[name].set(value)) for name, value in fields.items()]
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)

def setup_logger(name: str = ROOT_LOGGER_NAME, level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

    return logger

def get_logger(name: str) -> logging.Logger:
    """Child logger that inherits the JSON handler of the root gateway logger."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

logger = setup_logger()
