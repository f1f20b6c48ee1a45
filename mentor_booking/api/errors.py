"""
Translation of booking errors into HTTP responses.
"""

from fastapi import HTTPException, status

from mentor_booking.utils.exceptions import (
    BookingError,
    ConflictError,
    NotFoundError,
    PermissionDenied,
    ValidationError,
)
from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (PermissionDenied, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def to_http_exception(error: BookingError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            logger.info(f"[API] {status_code} from {error.component}: {error.message}")
            return HTTPException(status_code=status_code, detail=error.message)
    logger.error(f"[API] Unhandled {type(error).__name__} from {error.component}: {error.message}")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error.message)
