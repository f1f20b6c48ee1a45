from mentor_booking.repositories.payment_repository import PaymentRepository
from mentor_booking.repositories.session_repository import SessionRepository
from mentor_booking.repositories.user_repository import UserRepository

__all__ = ["PaymentRepository", "SessionRepository", "UserRepository"]
