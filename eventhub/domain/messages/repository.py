"""Message repository - Database operations for direct messages"""

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from ...models import Message


class MessageRepository:
    """Repository for message database operations"""

    @staticmethod
    def get_conversation(db: Session, user_id: int, other_user_id: int) -> list[Message]:
        """Messages exchanged between two users, oldest first"""
        return (
            db.query(Message)
            .filter(
                or_(
                    and_(Message.sender_id == user_id, Message.receiver_id == other_user_id),
                    and_(Message.sender_id == other_user_id, Message.receiver_id == user_id),
                )
            )
            .order_by(Message.created_at.asc(), Message.id.asc())
            .all()
        )

    @staticmethod
    def create_message(db: Session, sender_id: int, receiver_id: int, content: str) -> Message:
        """Stage a new message; the caller commits"""
        message = Message(sender_id=sender_id, receiver_id=receiver_id, content=content)
        db.add(message)
        db.flush()
        return message
