from datetime import datetime

from sqlalchemy import CheckConstraint
from sqlmodel import Field, SQLModel

from .mitra import TIMESTAMP, utcnow

ORDER_PENDING = "pending"
ORDER_ACCEPTED = "diterima"
ORDER_IN_PROGRESS = "sedang_dikerjakan"
ORDER_DONE = "selesai"
ORDER_FLOW = (ORDER_PENDING, ORDER_ACCEPTED, ORDER_IN_PROGRESS, ORDER_DONE)


class Tagihan(SQLModel, table=True):
    """Pesanan layanan yang dialihkan ke mitra."""

    __tablename__ = "tagihan"
    __table_args__ = (
        CheckConstraint("nominal > 0", name="ck_tagihan_nominal_positive"),
        CheckConstraint("rating IS NULL OR rating BETWEEN 1 AND 5", name="ck_tagihan_rating_range"),
    )
    id: int | None = Field(default=None, primary_key=True)
    user_id: int | None = Field(default=None, foreign_key="pelanggan.id", index=True)
    layanan_id: int | None = Field(default=None, foreign_key="layanan.id")
    # NULL selama pending; diisi sekali bersamaan dengan pending -> diterima
    mitra_id: int | None = Field(default=None, foreign_key="mitra.id", index=True)
    nominal: int  # Rupiah, selalu positif
    status: str = Field(default=ORDER_PENDING, index=True)
    order_date: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP)
    work_started_at: datetime | None = Field(default=None, sa_type=TIMESTAMP)
    work_duration: int | None = None  # detik
    completion_date: datetime | None = Field(default=None, sa_type=TIMESTAMP)
    rating: int | None = None  # 1-5
