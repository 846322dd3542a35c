"""
Lightweight, opt-in logging utilities for the library.

Usage in library code:
    from chatapply._logging import resolve_logger

    def apply_something(..., logger=None, log: bool = False):
        log = resolve_logger(logger=logger, enabled=log, name=__name__)
        log.debug("starting")  # no-op unless enabled or logger passed
        ...

Library code never prints; consumers opt in by passing a logger or the
enabled flag. Importing this module does not configure global logging.
"""
from __future__ import annotations

import logging


class NoopLogger:
    def debug(self, *args, **kwargs):  # type: ignore[no-untyped-def]
        pass

    info = warning = error = exception = critical = debug


def _ensure_default_handler(lg: logging.Logger) -> None:
    # Let records bubble to the root so pytest's caplog can capture them.
    lg.propagate = True


def resolve_logger(
    logger: logging.Logger | None = None,
    *,
    enabled: bool = False,
    name: str | None = None,
    level: int = logging.INFO,
) -> logging.Logger | NoopLogger:
    """
    Return a usable logger according to opt-in policy.

    - If `logger` is provided, use it.
    - Else if `enabled` is True, create/get a named logger.
    - Else return a NoopLogger that ignores calls.
    """
    # Duck-typed: anything with .debug(...) is accepted.
    if logger is not None:
        return logger
    if enabled:
        lg = logging.getLogger(name or "chatapply")
        lg.setLevel(level)
        _ensure_default_handler(lg)
        return lg
    return NoopLogger()
