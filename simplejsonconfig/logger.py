import logging
from typing import Any

import structlog
from structlog.types import EventDict, Processor


def drop_color_message_key(_, __, event_dict: EventDict) -> EventDict:
    """
    Some hosts (uvicorn among them) log the message a second time in the extra
    `color_message`. This processor drops the key from the event dict if it exists.
    """
    event_dict.pop("color_message", None)
    return event_dict


def setup_logging(json_logs: bool = False, log_level: str = "INFO"):
    """Configure structlog for the simplejsonconfig package"""

    # Leave an already configured host alone
    if structlog.is_configured():
        return

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if (isinstance(handler, logging.StreamHandler) and
                isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)):
            return

    timestamper = structlog.processors.TimeStamper(fmt="iso")

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.stdlib.ExtraAdder(),
        drop_color_message_key,
        timestamper,
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        # Pretty-printing is left to the ConsoleRenderer otherwise
        shared_processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    log_renderer: structlog.types.Processor
    if json_logs:
        log_renderer = structlog.processors.JSONRenderer()
    else:
        log_renderer = structlog.dev.ConsoleRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        # Runs only on `logging` records that do not originate within structlog.
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            log_renderer,
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())


class SimpleJsonConfigLogger:
    """
    Structured logger for the simplejsonconfig package.

    Thin wrapper over a structlog bound logger. ``bind`` returns a new wrapper
    carrying the extra keys, so components can keep their own context
    (``component="DiscoveryEngine"``) without touching global context vars.
    """

    def __init__(self, log_name: str = "simplejsonconfig", logger=None):
        self.log_name = log_name
        self.logger = logger if logger is not None else structlog.stdlib.get_logger(log_name)

    def bind(self, **new_values: Any) -> "SimpleJsonConfigLogger":
        """Return a logger with ``new_values`` bound to every event."""
        return SimpleJsonConfigLogger(self.log_name, self.logger.bind(**new_values))

    @staticmethod
    def bind_context(**new_values: Any):
        """Bind values to the process-wide structlog context."""
        structlog.contextvars.bind_contextvars(**new_values)

    @staticmethod
    def unbind_context(*keys: str):
        """Unbind keys from the process-wide structlog context"""
        structlog.contextvars.unbind_contextvars(*keys)

    def debug(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.debug(event, *args, **kw)

    def info(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.info(event, *args, **kw)

    def warning(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.warning(event, *args, **kw)

    warn = warning

    def error(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.error(event, *args, **kw)

    def critical(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.critical(event, *args, **kw)

    def exception(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.exception(event, *args, **kw)


def get_logger(log_name: str = "simplejsonconfig") -> SimpleJsonConfigLogger:
    """Return the package logger."""
    return SimpleJsonConfigLogger(log_name)


def init_logger(settings):
    """
    Initialize the structured logger for the simplejsonconfig package.

    Args:
        settings: EngineSettings (or any object with ``log_level`` and ``json_logs``)

    Returns:
        SimpleJsonConfigLogger: Configured structured logger instance
    """
    setup_logging(json_logs=settings.json_logs, log_level=settings.log_level)
    return get_logger("simplejsonconfig")
