import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import User
from ..schemas import ProfileUpdate, UserResponse, user_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Users"])

# Request field -> User column
PROFILE_FIELDS = {
    "fullName": "full_name",
    "description": "description",
    "skills": "skills",
    "portfolio": "portfolio",
}


@router.patch("/profile", response_model=UserResponse)
def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Patch the current user's public profile"""
    updates = data.model_dump(exclude_unset=True)
    if updates.get("fullName", "") is None:
        raise HTTPException(status_code=400, detail="fullName cannot be null")

    for field, value in updates.items():
        setattr(current_user, PROFILE_FIELDS[field], value)

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Failed to update profile for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update profile")
    db.refresh(current_user)

    logger.info(f"✅ Profile updated for user {current_user.id}: {sorted(updates)}")
    return user_to_response(current_user)
