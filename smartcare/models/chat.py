from datetime import datetime

from sqlmodel import Field, SQLModel

from .mitra import TIMESTAMP, utcnow

PARTY_MITRA = "mitra"
PARTY_ADMIN = "admin"
ADMIN_ID = "admin"


class ChatMessage(SQLModel, table=True):
    """Pesan chat mitra <-> admin. Tidak pernah diedit atau dihapus."""

    __tablename__ = "chat"
    id: int | None = Field(default=None, primary_key=True)
    sender_id: str = Field(index=True)
    sender_type: str  # mitra | admin
    receiver_id: str = Field(index=True)
    receiver_type: str
    message: str
    created_at: datetime = Field(default_factory=utcnow, index=True, sa_type=TIMESTAMP)
    read_by_sender: bool = True
    read_by_receiver: bool = False
