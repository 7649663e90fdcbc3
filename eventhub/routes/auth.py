import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth import get_current_user, login_user, logout_user
from ..database import get_db
from ..models import User
from ..schemas import (
    LoginRequest,
    RegisterRequest,
    StatusResponse,
    UserResponse,
    user_to_response,
)
from ..security_utils import hash_password, password_needs_rehash, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=201)
def register(data: RegisterRequest, request: Request, db: Session = Depends(get_db)):
    """Create an account and start a session for it"""
    if db.query(User).filter(User.username == data.username).first():
        raise HTTPException(status_code=400, detail="Username already exists")

    user = User(
        username=data.username,
        password=hash_password(data.password),
        user_type=data.userType.value,
        full_name=data.fullName,
        description=data.description,
        skills=data.skills or [],
        portfolio=[],
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent signup with the same username
        db.rollback()
        raise HTTPException(status_code=400, detail="Username already exists")
    db.refresh(user)

    login_user(request, user)
    logger.info(f"✅ Registered {user.user_type} user {user.id} ({user.username})")
    return user_to_response(user)


@router.post("/login", response_model=UserResponse)
def login(data: LoginRequest, request: Request, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.username == data.username).first()
    if not user or not verify_password(data.password, user.password):
        logger.warning(f"🚫 Failed login for username {data.username!r}")
        raise HTTPException(status_code=401, detail="Invalid username or password")

    if password_needs_rehash(user.password):
        user.password = hash_password(data.password)
        db.commit()
        db.refresh(user)

    login_user(request, user)
    logger.info(f"🔑 User {user.id} logged in")
    return user_to_response(user)


@router.post("/logout", response_model=StatusResponse)
def logout(request: Request):
    logout_user(request)
    return StatusResponse(message="Logged out")


@router.get("/user", response_model=UserResponse)
def get_user(current_user: User = Depends(get_current_user)):
    """Current session user"""
    return user_to_response(current_user)
