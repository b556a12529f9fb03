import logging
import logging.handlers
import sys

import structlog

from infrastructure.config import Settings, settings

# Transport-level chatter from the backend and record store clients.
_QUIET_LOGGERS = ("httpx", "httpcore", "pymongo", "motor")
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi")

_SHARED_PROCESSORS = (
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
)

_configured = False


def _renderer(app_env: str) -> structlog.typing.Processor:
    if app_env == "development":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def _build_handlers(app_settings: Settings) -> list[logging.Handler]:
    """Stdout plus a per-environment file rotated at midnight, one week kept."""
    app_settings.log_dir.mkdir(parents=True, exist_ok=True)
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=list(_SHARED_PROCESSORS),
        processor=_renderer(app_settings.app_env),
    )

    handlers: list[logging.Handler] = [
        logging.StreamHandler(sys.stdout),
        logging.handlers.TimedRotatingFileHandler(
            app_settings.log_dir / f"{app_settings.app_env}.log",
            when="midnight",
            backupCount=7,
        ),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(app_settings: Settings = settings) -> None:
    """Send structlog events and stdlib records (uvicorn included) to one set of handlers."""
    global _configured  # noqa: PLW0603
    if _configured:
        return

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers = _build_handlers(app_settings)
    root_logger = logging.getLogger()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(app_settings.log_level.upper())

    for name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = list(handlers)
        server_logger.propagate = False

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True
