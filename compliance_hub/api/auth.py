# compliance_hub/api/auth.py - Email/password accounts and bearer tokens
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from compliance_hub.core.database import get_db
from compliance_hub.models.user import User
from compliance_hub.schemas.auth import (
    LoginRequest,
    SignupRequest,
    TokenRefreshRequest,
    TokenResponse,
)
from compliance_hub.schemas.user import UserResponse
from compliance_hub.services.auth_service import AuthService, build_token_response
from compliance_hub.services.jwt_service import (
    create_access_token,
    get_current_user,
    verify_token,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post(
    "/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED
)
async def signup(request: SignupRequest, db: Session = Depends(get_db)):
    """Create account with email and password"""
    try:
        user = AuthService(db).create_user(
            email=request.email,
            password=request.password,
            full_name=request.full_name,
            role=request.role.value,
        )
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return build_token_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Login for existing users"""
    try:
        user = AuthService(db).authenticate_user(request.email, request.password)
    except ValueError as e:
        logger.info(f"Failed login for {request.email}: {e}")
        raise HTTPException(status_code=401, detail=str(e))

    return build_token_response(user)


@router.post("/refresh")
async def refresh_token(request: TokenRefreshRequest, db: Session = Depends(get_db)):
    """Refresh access token using refresh token"""
    payload = verify_token(request.refresh_token)

    if payload.get("type") != "refresh":
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    user = db.query(User).filter(User.id == payload.get("user_id")).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    new_access_token = create_access_token(data={"sub": user.email, "user_id": user.id})
    return {"access_token": new_access_token, "token_type": "bearer"}


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(current_user: User = Depends(get_current_user)):
    """Get current user profile"""
    return current_user
