"""Sesi login di sisi server: role diturunkan dari baris ini, bukan dari klien."""
from datetime import datetime

from sqlmodel import Field, SQLModel

from .mitra import TIMESTAMP, utcnow


class MitraSession(SQLModel, table=True):
    __tablename__ = "mitra_session"
    id: int | None = Field(default=None, primary_key=True)
    sid: str = Field(unique=True, index=True)
    mitra_id: int = Field(foreign_key="mitra.id", index=True)
    role: str = "mitra"
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP)
    revoked_at: datetime | None = Field(default=None, sa_type=TIMESTAMP)
