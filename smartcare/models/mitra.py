from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime
from sqlmodel import Field, SQLModel

STATUS_PENDING = "pending"
STATUS_VERIFIED = "terverifikasi"
STATUS_REJECTED = "ditolak"
MITRA_STATUSES = (STATUS_PENDING, STATUS_VERIFIED, STATUS_REJECTED)


def utcnow() -> datetime:
    """UTC saat ini, selalu dengan tzinfo."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Nilai yang dibaca ulang dari database; SQLite mengembalikan naive UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Kolom waktu: timestamptz di PostgreSQL, nilai yang ditulis selalu tz-aware
TIMESTAMP = DateTime(timezone=True)


class Mitra(SQLModel, table=True):
    """Akun mitra (toko). Status diubah oleh proses moderasi di luar portal."""

    __tablename__ = "mitra"
    __table_args__ = (CheckConstraint("saldo >= 0", name="ck_mitra_saldo_non_negative"),)
    id: int | None = Field(default=None, primary_key=True)
    nama_toko: str
    email: str = Field(unique=True, index=True)  # tidak bisa diubah setelah daftar
    hashed_password: str
    alamat: str = ""
    phone_number: str = ""
    description: str = ""
    status: str = Field(default=STATUS_PENDING, index=True)  # pending | terverifikasi | ditolak
    saldo: int = 0  # Rupiah, tidak pernah negatif
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP)
