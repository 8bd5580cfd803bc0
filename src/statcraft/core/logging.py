"""Structured logging for the statcraft rules engine.

Every engine component logs through structlog with key-value context, so
a single action test can be followed from attribute resolution through
the grouping fold to the chain walk:

- ``statcraft.engine.grouping`` logs each grouped attribute at DEBUG and
  warns when a precomputed value is discarded as implausible.
- ``statcraft.engine.resolver`` logs every resolution at DEBUG and every
  action test at INFO.
- ``statcraft.engine.chain`` warns when trigger links cycle or a chain is
  truncated at the rule set's length limit.

Nothing here is configured on import. An embedding application calls
:func:`configure_logging` (or :func:`configure_from_settings`) once at
startup; until then structlog's defaults apply, which is what the test
suite relies on when it captures log entries.

Example:
    >>> from statcraft.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Attribute resolved", attribute="armour", value=14)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag an entry as coming from the rules engine."""
    event_dict["app"] = "statcraft"
    return event_dict


def shorten_floats(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Show float values to six significant digits.

    Grouped values are folded at full precision, so a running total such
    as ``(13.75 + 8*(0.25+8/13.75)) / 2`` would otherwise be logged with
    every digit. Only the log line is shortened.
    """
    for key, value in event_dict.items():
        if isinstance(value, float):
            event_dict[key] = float(f"{value:.6g}")
    return event_dict


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Configure logging for an application embedding the engine.

    Args:
        level: DEBUG shows every resolution and fold; INFO shows action
            tests; WARNING shows only discarded values and broken chains.
        json_format: Render JSON lines instead of colored console output.
        log_file: Also write standard library records to this file.

    Example:
        >>> configure_logging(level="DEBUG", json_format=False)
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        shorten_floats,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format=LOG_FORMAT, level=numeric_level, stream=sys.stdout, force=True)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)


def configure_from_settings(settings: Any) -> None:
    """Configure logging from ``Settings.log_level`` and ``Settings.json_logs``."""
    configure_logging(level=settings.log_level, json_format=settings.json_logs)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Logger for one engine module, usually called with ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach context to every later entry until :func:`clear_context`.

    Example:
        >>> bind_context(character_id="char-1", session="tavern-brawl")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop all context attached with :func:`bind_context`."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def action_context(action_id: str, **kwargs: Any) -> Iterator[None]:
    """Tag the entries logged while one action is tested.

    Context bound outside the block is restored when it exits, so nested
    tests of chained actions each report their own ``action_id``.

    Example:
        >>> with action_context("hit", source_id="char-1"):
        ...     logger.info("Difficulty computed", difficulty=-9)
    """
    with structlog.contextvars.bound_contextvars(action_id=action_id, **kwargs):
        yield


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "action_context",
]
