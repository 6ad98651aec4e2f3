from datetime import datetime

from sqlmodel import Field, SQLModel

from .mitra import TIMESTAMP, utcnow

PAYMENT_METHODS = {
    "bank_transfer": "Transfer Bank",
    "e_wallet": "E-Wallet (GoPay, OVO, DANA)",
    "virtual_account": "Virtual Account",
    "credit_card": "Kartu Kredit",
}


class Topup(SQLModel, table=True):
    """Permintaan isi ulang saldo. Konfirmasi dilakukan proses di luar portal."""

    __tablename__ = "topup"
    id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)  # id mitra (atau email untuk data lama)
    nominal: int
    payment_method: str
    status: str = "pending"  # pending | success | completed | failed | cancelled
    transaction_code: str = Field(index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP)
