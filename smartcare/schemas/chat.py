from datetime import datetime

from pydantic import BaseModel


class ChatSend(BaseModel):
    message: str = ""


class ChatMessageView(BaseModel):
    id: int
    sender_id: str
    sender_type: str
    receiver_id: str
    receiver_type: str
    message: str
    created_at: datetime
    time_label: str
    read_by_sender: bool
    read_by_receiver: bool


class ChatDay(BaseModel):
    date: str
    label: str
    messages: list[ChatMessageView]


class Conversation(BaseModel):
    messages: list[ChatMessageView]
    days: list[ChatDay]
    poll_interval_seconds: int


class ConversationSummary(BaseModel):
    mitra_email: str
    nama_toko: str | None = None
    last_message: str
    last_at: datetime
    unread: int
