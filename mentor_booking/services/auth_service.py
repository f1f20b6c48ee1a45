"""
Authentication Service

Verifies the JWTs issued by the platform's auth service. Token issuance and
password handling are not part of the booking service.
"""

from typing import Any, Dict, Optional

import jwt

from mentor_booking.config import AuthConfig
from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)


class AuthService:
    """Service for verifying JWT bearer tokens"""

    def __init__(self, config: AuthConfig):
        self.jwt_secret = config.jwt_secret
        self.jwt_algorithm = config.jwt_algorithm

    def verify_token(self, token: str) -> Optional[Dict[str, Any]]:
        try:
            return jwt.decode(token, self.jwt_secret, algorithms=[self.jwt_algorithm])
        except jwt.ExpiredSignatureError:
            logger.warning("[AuthService] Token has expired")
            return None
        except jwt.InvalidTokenError:
            return None
