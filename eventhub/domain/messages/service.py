"""Message service - Business logic for direct messages"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Message, User
from ...shared.transactions import commit_or_rollback
from .repository import MessageRepository
from .schemas import MessageCreate

logger = logging.getLogger(__name__)


class MessageService:
    """Service layer for messaging"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MessageRepository()

    def send_message(self, data: MessageCreate, user: User) -> Message:
        if data.receiverId == user.id:
            raise HTTPException(status_code=400, detail="Cannot send a message to yourself")

        receiver = self.db.query(User).filter(User.id == data.receiverId).first()
        if not receiver:
            raise HTTPException(status_code=404, detail="Receiver not found")

        message = self.repo.create_message(self.db, user.id, receiver.id, data.content)
        commit_or_rollback(self.db, "send message")
        self.db.refresh(message)

        logger.info(f"💬 Message {message.id} sent from user {user.id} to user {receiver.id}")
        return message

    def get_conversation(self, other_user_id: int, user: User) -> list[Message]:
        """Only the two participants can read a conversation"""
        return self.repo.get_conversation(self.db, user.id, other_user_id)
