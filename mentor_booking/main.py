"""
Application entrypoint.

    uvicorn mentor_booking.main:app
"""

from mentor_booking.api.main import create_app
from mentor_booking.config import get_config
from mentor_booking.utils.logger import get_logger, setup_logging

config = get_config()
setup_logging(config)
logger = get_logger(__name__)

app = create_app(config)
