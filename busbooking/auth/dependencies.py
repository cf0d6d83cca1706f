from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from busbooking.config import settings
from busbooking.database import get_db
from busbooking.auth.utils import verify_token
from busbooking.auth.service import UserService, STAFF_ROLES

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")

def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    """Get current authenticated user"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token_data = verify_token(token, credentials_exception)

    user = UserService.get_user_by_id(db, user_id=token_data["user_id"])
    if user is None or not user.is_active:
        raise credentials_exception

    return user

def require_staff(current_user = Depends(get_current_user), db: Session = Depends(get_db)):
    """Require the admin or agent role"""
    user_roles = set(UserService.get_user_roles(db, current_user.id))
    if not user_roles & STAFF_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin or agent role required"
        )
    return current_user
