"""Central level-based logger (standard library `logging`).

Env:
- LOG_LEVEL: DEBUG|INFO|WARNING|ERROR|CRITICAL (default: WARNING)

The extension talks to the user through stdout/stderr; log records go to
stderr and are quiet unless LOG_LEVEL asks for more.
"""

from __future__ import annotations

import logging
import os
from typing import Optional


def _level_from_env() -> int:
    raw = (os.getenv("LOG_LEVEL") or "WARNING").upper().strip()
    return getattr(logging, raw, logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a configured logger.

    This configures the root logger once (idempotent).
    """
    level = _level_from_env()
    root = logging.getLogger()
    if not getattr(root, "_pass_ssh_configured", False):
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        )
        setattr(root, "_pass_ssh_configured", True)
    root.setLevel(level)
    return logging.getLogger(name or "pass_ssh")
