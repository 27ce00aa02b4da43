from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
PACKAGE_LOGGER = "stackchart"

# Font and image backends log every lookup at DEBUG.
QUIET_LOGGERS = ("matplotlib", "PIL")


def resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def configure_logging(level: str | int = "INFO") -> int:
    """Route records through one root handler and set the package logger to ``level``.

    Plotting backends stay at WARNING or above even when the package logs at DEBUG.
    Returns the numeric level that was applied.
    """
    numeric = resolve_level(level)
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger(PACKAGE_LOGGER).setLevel(numeric)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric, logging.WARNING))
    return numeric
