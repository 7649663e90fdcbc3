"""Message router - FastAPI endpoints for direct messages"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Message, User
from ...shared.validators import MAX_DB_INT
from .schemas import MessageCreate, MessageResponse
from .service import MessageService

router = APIRouter(prefix="/api/messages", tags=["Messages"])


def get_message_service(db: Session = Depends(get_db)) -> MessageService:
    """Dependency injection for MessageService"""
    return MessageService(db)


def message_to_response(message: Message) -> MessageResponse:
    return MessageResponse(
        id=message.id,
        senderId=message.sender_id,
        receiverId=message.receiver_id,
        content=message.content,
        createdAt=message.created_at,
    )


@router.post("", response_model=MessageResponse, status_code=201)
async def send_message(
    data: MessageCreate,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return message_to_response(service.send_message(data, current_user))


@router.get("/{user_id}", response_model=list[MessageResponse])
async def get_conversation(
    user_id: int = Path(..., le=MAX_DB_INT),
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    """Conversation between the current user and another user"""
    return [message_to_response(m) for m in service.get_conversation(user_id, current_user)]
