from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from datetime import timedelta
from busbooking.database import get_db
from busbooking.auth.schemas import LoginRequest, AuthResponse, AuthUser
from busbooking.auth.service import UserService
from busbooking.auth.utils import create_access_token
from busbooking.auth.dependencies import get_current_user
from busbooking.config import settings

router = APIRouter()

@router.post("/login", response_model=AuthResponse)
def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a bearer token"""
    user = UserService.authenticate_user(db, login_data.email, login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(
        data={"sub": str(user.id)},
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return AuthResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserService.to_auth_user(db, user)
    )

@router.get("/me", response_model=AuthUser)
def read_users_me(current_user = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get current user profile"""
    return UserService.to_auth_user(db, current_user)
