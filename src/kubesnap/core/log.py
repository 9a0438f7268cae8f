# src/kubesnap/core/log.py
"""
Logging setup for processes embedding kubesnap. The library itself only
emits records through module loggers; the host application calls
``configure_logging`` once at startup if it wants kubesnap's defaults.
"""

import logging
from typing import Optional

from kubesnap.core.config import config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger at ``level`` or the configured LOG_LEVEL."""
    logging.basicConfig(level=(level or config.LOG_LEVEL).upper(), format=LOG_FORMAT)
