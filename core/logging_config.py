"""Logging setup shared by the app and scripts."""
from __future__ import annotations

import logging
from typing import Optional

from core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once; later calls only adjust the level."""
    global _configured
    name = (level or get_settings().log_level).upper()
    numeric = getattr(logging, name, logging.INFO)
    if not _configured:
        logging.basicConfig(level=numeric, format=LOG_FORMAT)
        _configured = True
    logging.getLogger().setLevel(numeric)
