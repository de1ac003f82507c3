"""
Logger construction.

The process entry point builds one logger handle with build_logger() and
passes it to the components that log. Nothing in the decision path looks
up a module-level logger on its own.

Every record carries the static field policy=priority-class-policy, and
call sites can attach their own fields through `extra=`.
"""

import logging
from collections.abc import Mapping
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


LOGGER_NAME = "priority_class_policy"
POLICY_NAME = "priority-class-policy"


class PolicyLoggerAdapter(logging.LoggerAdapter):
    """
    LoggerAdapter that merges call-site `extra` fields with the static ones.

    The stock adapter replaces the call's `extra` with its own, which would
    drop per-record fields such as the extraction error.
    """

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        extra: dict[str, Any] = dict(self.extra or {})
        call_extra = kwargs.get("extra")
        if isinstance(call_extra, Mapping):
            extra.update(call_extra)
        kwargs["extra"] = extra
        return msg, kwargs


PolicyLogger = logging.Logger | logging.LoggerAdapter


def build_logger(
    verbose: bool = False,
    console: Console | None = None,
) -> PolicyLoggerAdapter:
    """
    Build the logger handle for one process.

    Args:
        verbose: Log at DEBUG instead of INFO
        console: Rich console to write to (defaults to stderr)

    Returns:
        A PolicyLoggerAdapter tagging records with the policy name
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Rebuilding the handle (tests, repeated CLI invocations) must not stack handlers
    for handler in list(logger.handlers):
        if getattr(handler, "_priority_class_policy", False):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler._priority_class_policy = True  # type: ignore[attr-defined]
    logger.addHandler(handler)

    return PolicyLoggerAdapter(logger, {"policy": POLICY_NAME})
