"""
Logging setup for the scenario runner command line.
"""

import logging
import os
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Third-party loggers stay at WARNING or above
NOISY_LOGGERS = ('asyncio', 'urllib3')


def configure_logging(level: Optional[str] = None) -> int:
    """
    Configure root logging once for a runner invocation.

    Args:
        level: Level name; falls back to HARNESS_LOG_LEVEL, then INFO

    Returns:
        The numeric level that was applied
    """
    level_name = (level or os.environ.get('HARNESS_LOG_LEVEL') or 'INFO').upper()
    numeric_level = getattr(logging, level_name, None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    return numeric_level
