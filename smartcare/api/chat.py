from fastapi import APIRouter, Depends, Request
from sqlmodel import Session

from smartcare.api.deps import require_mitra
from smartcare.core.config import settings
from smartcare.core.database import get_db
from smartcare.core.rate_limit import WRITE_LIMIT, client_ip, limiter
from smartcare.models import Mitra
from smartcare.schemas import ChatMessageView, ChatSend, Conversation
from smartcare.services import chat as chat_service
from smartcare.services.audit import audit

router = APIRouter(tags=["chat"])


def conversation(messages) -> Conversation:
    views = [chat_service.message_view(m) for m in messages]
    return Conversation(
        messages=views,
        days=chat_service.group_by_day(views),
        poll_interval_seconds=settings.chat_poll_seconds,
    )


@router.get("/live-chat", response_model=Conversation)
def load_chat(
    mitra: Mitra = Depends(require_mitra),
    db: Session = Depends(get_db),
):
    """Percakapan dengan admin; pesan masuk otomatis ditandai sudah dibaca."""
    return conversation(chat_service.load_conversation(db, mitra))


@router.post("/live-chat", response_model=ChatMessageView)
@limiter.limit(WRITE_LIMIT)
def send_chat(
    body: ChatSend,
    request: Request,
    mitra: Mitra = Depends(require_mitra),
    db: Session = Depends(get_db),
):
    msg = chat_service.send_message(db, mitra, body.message)
    view = chat_service.message_view(msg)
    audit(db, "chat_send", mitra.id, client_ip(request))
    return view
