from datetime import datetime

from pydantic import BaseModel


class TopupRequest(BaseModel):
    # Opsional di skema: pesan validasi ditentukan di endpoint
    nominal: int | None = None
    payment_method: str | None = None


class TopupView(BaseModel):
    id: int
    user_id: str
    nominal: int
    nominal_label: str
    payment_method: str
    payment_method_label: str
    status: str
    status_badge: dict
    transaction_code: str
    created_at: datetime | None = None


class TopupPage(BaseModel):
    saldo: int
    saldo_label: str
    minimum: int
    predefined_amounts: list[int]
    payment_methods: list[dict]


class TopupCreated(BaseModel):
    message: str
    topup: TopupView
