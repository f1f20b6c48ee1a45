"""
Logging setup shared by the API and the service layer.
"""

import logging
from typing import Optional

_configured = False


def setup_logging(config: Optional[object] = None) -> None:
    """Configure the root logger once from Config.LOG_LEVEL / Config.LOG_FORMAT."""
    global _configured
    if _configured:
        return

    level_name = getattr(config, "LOG_LEVEL", "INFO") or "INFO"
    log_format = getattr(config, "LOG_FORMAT", None) or "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(level=getattr(logging, level_name.upper(), logging.INFO), format=log_format)

    # pymongo and urllib3 are chatty at DEBUG
    for noisy in ("pymongo", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
