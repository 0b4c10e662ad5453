# compliance_hub/services/auth_service.py - Centralized authentication logic
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from compliance_hub.core.config import settings
from compliance_hub.models.user import User
from compliance_hub.services.jwt_service import (
    create_access_token,
    create_refresh_token,
)
from passlib.context import CryptContext
from datetime import datetime
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

# Create password context for hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password"""
    return pwd_context.verify(plain_password, hashed_password)


def build_token_response(user: User) -> Dict[str, Any]:
    """Access/refresh token pair plus the user summary the frontend expects"""
    claims = {"sub": user.email, "user_id": user.id}
    return {
        "access_token": create_access_token(data=claims),
        "refresh_token": create_refresh_token(data=claims),
        "token_type": "bearer",
        "expires_in": settings.access_token_expire_minutes * 60,
        "user": {
            "id": user.id,
            "email": user.email,
            "full_name": user.full_name,
            "role": user.role,
        },
    }


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def create_user(self, email: str, password: str, full_name: str, role: str) -> User:
        """Create a new active account"""
        if self.get_user_by_email(email):
            raise ValueError("Account with this email already exists")

        user = User(
            email=email,
            full_name=full_name,
            role=role,
            hashed_password=get_password_hash(password),
            is_active=True,
        )

        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create user {email}: {e}")
            raise

        logger.info(f"User created: {email} (ID: {user.id}, role: {role})")
        return user

    def authenticate_user(self, email: str, password: str) -> User:
        """Authenticate user with email and password"""
        user = self.get_user_by_email(email)
        if not user:
            raise ValueError("Invalid email or password")

        if not user.hashed_password or not verify_password(
            password, user.hashed_password
        ):
            raise ValueError("Invalid email or password")

        if not user.is_active:
            raise ValueError("Account is inactive")

        user.last_login = datetime.utcnow()
        self.db.commit()
        return user
