import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .database import get_db
from .models import User, UserType

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


def login_user(request: Request, user: User) -> None:
    """Bind the user to the signed session cookie"""
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id


def logout_user(request: Request) -> None:
    request.session.clear()


def get_optional_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    """
    Resolve the session cookie to a User.
    Returns None when there is no session or it points at a missing user.
    """
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        return None

    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        logger.warning("⚠️ Malformed session payload, clearing session")
        request.session.clear()
        return None

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.warning(f"⚠️ Session refers to unknown user {user_id}, clearing session")
        request.session.clear()
        return None

    return user


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Require an authenticated session"""
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_role(user: User, role: UserType) -> None:
    """Raise 403 unless the user has the given role"""
    if user.user_type != role.value:
        logger.warning(f"🚫 User {user.id} ({user.user_type}) denied: {role.value} role required")
        raise HTTPException(status_code=403, detail=f"Access denied: {role.value} role required")


def get_current_client(current_user: User = Depends(get_current_user)) -> User:
    require_role(current_user, UserType.CLIENT)
    return current_user


def get_current_vendor(current_user: User = Depends(get_current_user)) -> User:
    require_role(current_user, UserType.VENDOR)
    return current_user
