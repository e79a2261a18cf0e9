import logging
import sys
import structlog

LOGGER_NAME = "dirloader"

# -v count on the command line -> stdlib level name.
VERBOSITY_LEVELS = {0: "warning", 1: "info"}


def level_for_verbosity(verbosity_level: int) -> str:
    return VERBOSITY_LEVELS.get(verbosity_level, "debug") if verbosity_level >= 0 else "warning"


def _build_renderer(force_json_logs: bool):
    if force_json_logs:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(log_level_str: str = "warning", force_json_logs: bool = False) -> logging.Logger:
    """
    Routes structlog events from every dirloader module into the "dirloader"
    stdlib logger, rendered for a terminal or as one JSON object per line.

    Plugin modules loaded by dirloader keep their own loggers; only records
    under the "dirloader" namespace get this handler. Returns that logger.
    """
    log_level = getattr(logging, log_level_str.upper(), logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=_build_renderer(force_json_logs),
        foreign_pre_chain=[structlog.stdlib.add_log_level],
    ))

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level)
    # the handler above is the only sink; keep records off the root logger.
    package_logger.propagate = False

    structlog.get_logger(__name__).info("logging_configured", level=log_level_str, json=force_json_logs)
    return package_logger
