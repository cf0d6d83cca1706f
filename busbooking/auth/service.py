from sqlalchemy.orm import Session
from typing import List, Optional
from busbooking.models import User, Role, UserHasRole
from busbooking.auth.schemas import AuthUser
from busbooking.auth.utils import verify_password

STAFF_ROLES = {"admin", "agent"}

class UserService:
    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email"""
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
        """Authenticate an active user with email and password"""
        user = UserService.get_user_by_email(db, email)
        if not user or not user.is_active:
            return None
        if not verify_password(password, user.password):
            return None
        return user

    @staticmethod
    def get_user_roles(db: Session, user_id: int) -> List[str]:
        """Get user's role names"""
        rows = db.query(Role.name).join(UserHasRole, UserHasRole.role_id == Role.id).filter(
            UserHasRole.user_id == user_id
        ).all()
        return [name for (name,) in rows]

    @staticmethod
    def to_auth_user(db: Session, user: User) -> AuthUser:
        return AuthUser(
            id=user.id,
            name=user.name,
            email=user.email,
            is_active=user.is_active,
            roles=UserService.get_user_roles(db, user.id),
            created_at=user.created_at
        )
