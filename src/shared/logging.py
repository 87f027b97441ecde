"""Application-wide logging.

Every module logs through `structlog.get_logger(__name__)`. configure_logging()
routes those events through the stdlib root logger: console always, rotating
files under LOG_DIR when it is set. Production and staging render JSON lines,
everything else a coloured console with rich tracebacks.

Request handlers bind a request id with bind_request_context(); it is merged
into every event logged until clear_request_context().
"""

import logging
import logging.handlers
import sys
from pathlib import Path

import structlog

from shared.config import Settings, get_settings

LEVEL_BY_ENVIRONMENT = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

NOISY_LOGGERS = ("protean", "urllib3", "httpx", "httpcore", "asyncio", "multipart")

# keys whose values must never reach a log line
REDACTED_KEYS = frozenset({"password", "secret", "secret_key", "signature", "authorization", "token", "raw_body"})

_ROTATE_BYTES = 10 * 1024 * 1024
_ROTATE_COUNT = 5


def resolve_level(settings: Settings) -> str:
    return settings.log_level or LEVEL_BY_ENVIRONMENT.get(settings.environment, "INFO")


def redact_secrets(logger, method_name, event_dict):
    """structlog processor masking credential-like keys."""
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "***"
    return event_dict


def _file_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=_ROTATE_BYTES, backupCount=_ROTATE_COUNT, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def build_handlers(settings: Settings, prefix: str = "storefront") -> list[logging.Handler]:
    """Console handler, plus an all-levels and an errors-only file when LOG_DIR is set."""
    level = resolve_level(settings)
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    handlers = [console]

    if settings.log_dir:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(_file_handler(log_dir / f"{prefix}.log", level))
        handlers.append(_file_handler(log_dir / f"{prefix}_error.log", logging.ERROR))
    return handlers


def build_processors(settings: Settings) -> list:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.LINENO,
            ]
        ),
    ]
    if settings.renders_json:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
            )
        )
    return processors


def configure_logging(settings: Settings | None = None) -> None:
    """Install handlers on the root logger and configure structlog. Safe to call again."""
    settings = settings or get_settings()

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in build_handlers(settings):
        root.addHandler(handler)
    root.setLevel(resolve_level(settings))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request_context(request_id: str, path: str) -> None:
    structlog.contextvars.bind_contextvars(request_id=request_id, path=path)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
