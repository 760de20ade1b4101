"""Structured logging: JSON lines with the request or CLI run id attached."""

import contextvars
import logging
import logging.config
import uuid

import structlog

NO_REQUEST_ID = "no-request-id"

# Request id for the API, run id for the CLI scripts
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default=NO_REQUEST_ID
)

# Shared by structlog loggers and stdlib records passing through ProcessorFormatter
_shared_processors = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.add_log_level,
]


def get_request_id() -> str:
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    """Set the id for the current context; every log line emitted in it carries it."""
    request_id_var.set(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)


def new_run_id(prefix: str) -> str:
    """Short id for a CLI run, e.g. fix-1a2b3c4d."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def configure_logging(level: str = "DEBUG") -> None:
    """Configure structlog and route stdlib logging (uvicorn, sqlalchemy) through it."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.DEBUG

    structlog.configure(
        processors=[
            *_shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": _shared_processors,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        structlog.processors.JSONRenderer(),
                    ],
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"handlers": ["stdout"], "level": numeric_level},
        }
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger for a module; request_id is merged in from contextvars per call."""
    return structlog.get_logger(name)
