"""
Authentication Dependencies

FastAPI dependencies for route protection and authentication.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mentor_booking.models import User, UserRole
from mentor_booking.repositories import UserRepository
from mentor_booking.services.auth_service import AuthService
from mentor_booking.services.container import get_auth_service, get_user_repository
from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)

security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
    user_repository: UserRepository = Depends(get_user_repository),
) -> User:
    """
    Get current authenticated user from JWT token.

    Raises:
        HTTPException: If token is invalid or missing
    """
    payload = auth_service.verify_token(credentials.credentials)
    if not payload:
        raise _unauthorized("Invalid or expired token")

    user_id = payload.get("user_id")
    role = payload.get("role")
    if not user_id or not role:
        raise _unauthorized("Invalid token payload")

    user = user_repository.find_by_id(user_id)
    if not user:
        raise _unauthorized("User not found")
    if user.role != role:
        raise _unauthorized("Invalid user role")

    logger.debug(f"[Auth] Authenticated user {user_id} with role {role}")
    return user


def get_current_candidate(current_user: User = Depends(get_current_user)) -> User:
    """
    Get current candidate. Requires candidate role.

    Raises:
        HTTPException: If user is not a candidate
    """
    if current_user.role != UserRole.CANDIDATE.value:
        logger.warning(f"[Auth] 403 Forbidden: User {current_user.id} has role {current_user.role}, candidate required")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Candidate access required")
    return current_user


def get_current_mentor(current_user: User = Depends(get_current_user)) -> User:
    """
    Get current mentor. Requires mentor role.

    Raises:
        HTTPException: If user is not a mentor
    """
    if current_user.role != UserRole.MENTOR.value:
        logger.warning(f"[Auth] 403 Forbidden: User {current_user.id} has role {current_user.role}, mentor required")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Mentor access required")
    return current_user
