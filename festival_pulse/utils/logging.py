"""Structured logging setup using structlog.

One processor chain feeds one of two renderers: a ConsoleRenderer for local
runs, or a JSONRenderer for the scheduled sync job (``APP_ENV=production``).
The caller chooses; :func:`wants_json` turns ``Settings.app_env`` and the
CLIs' ``--json-logs`` flag into that choice so both entry points agree.

httpx and aiosqlite log through the standard library, so the root logger
gets a handler that formats through the same chain.
"""

import logging
import sys

import structlog

# Request-per-line (httpx, httpcore) and statement-per-line (aiosqlite) loggers.
_CHATTY_LOGGERS = ("httpx", "httpcore", "aiosqlite")


def wants_json(app_env: str, force: bool = False) -> bool:
    """Return True when log lines should be rendered as JSON."""
    return force or app_env.strip().lower() == "production"


def _processor_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Route structlog and stdlib logging through a single renderer.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR).
        json_output: Emit JSON lines instead of console output.  Derive it
            with :func:`wants_json` rather than reading the environment here.

    Returns:
        A configured structlog BoundLogger.
    """
    level = logging.getLevelName(log_level.upper())
    chain = _processor_chain()

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[*chain, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a logger bound with ``logger_name``, configuring defaults on first use."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)
