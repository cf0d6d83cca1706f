from .router import router
from .dependencies import get_current_user, require_staff
from .service import UserService, STAFF_ROLES
from .utils import create_access_token, get_password_hash, verify_password

__all__ = [
    "router",
    "get_current_user",
    "require_staff",
    "UserService",
    "STAFF_ROLES",
    "create_access_token",
    "get_password_hash",
    "verify_password",
]
