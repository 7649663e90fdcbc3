"""Commit helper shared by the domain services"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def commit_or_rollback(db: Session, action: str) -> None:
    """
    Commit the unit of work staged on the session.

    Rolls back and raises a 500 if the database rejects it, so a request
    never leaves half of its writes behind.
    """
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Failed to {action}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to {action}") from e
