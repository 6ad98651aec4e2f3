"""Live chat dari sisi admin: daftar percakapan, baca, balas."""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from smartcare.admin.deps import require_admin
from smartcare.api.chat import conversation
from smartcare.core.database import get_db
from smartcare.schemas import ChatMessageView, ChatSend, Conversation, ConversationSummary
from smartcare.services import chat as chat_service

router = APIRouter()


@router.get("", response_model=list[ConversationSummary])
@router.get("/", response_model=list[ConversationSummary])
def conversations(_=Depends(require_admin), db: Session = Depends(get_db)):
    return chat_service.admin_conversations(db)


@router.get("/{mitra_email}", response_model=Conversation)
def read_conversation(mitra_email: str, _=Depends(require_admin), db: Session = Depends(get_db)):
    """Membuka percakapan; pesan dari mitra ditandai sudah dibaca admin."""
    return conversation(chat_service.admin_load_conversation(db, mitra_email.strip().lower()))


@router.post("/{mitra_email}", response_model=ChatMessageView)
def reply(mitra_email: str, body: ChatSend, _=Depends(require_admin), db: Session = Depends(get_db)):
    msg = chat_service.admin_reply(db, mitra_email.strip().lower(), body.message)
    return chat_service.message_view(msg)
