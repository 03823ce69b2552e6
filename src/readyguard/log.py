# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for ReadyGuard."""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "READYGUARD_LOG_LEVEL"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

# Libraries that log every request at INFO; one line per poll drowns the attempt log.
_CHATTY_LOGGERS = ("httpx", "httpcore", "docker", "urllib3")


def resolve_log_level(level: str | None = None) -> int:
    name = (level or os.getenv(LOG_LEVEL_ENV) or "WARNING").upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.WARNING


def setup_logging(level: str | None = None) -> int:
    """Configure logging on stderr; stdout is reserved for results.

    Returns the effective level.
    """
    effective = resolve_log_level(level)
    logging.basicConfig(level=effective, format=LOG_FORMAT, stream=sys.stderr)
    quiet = logging.DEBUG if effective <= logging.DEBUG else max(effective, logging.WARNING)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)
    return effective


__all__ = ["LOG_LEVEL_ENV", "resolve_log_level", "setup_logging"]
