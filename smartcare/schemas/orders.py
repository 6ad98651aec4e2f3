from datetime import datetime

from pydantic import BaseModel


class LayananRef(BaseModel):
    nama_layanan: str
    description: str = ""


class PelangganRef(BaseModel):
    nama: str
    email: str


class OrderView(BaseModel):
    id: int
    user_id: int | None = None
    layanan_id: int | None = None
    mitra_id: int | None = None
    nominal: int
    nominal_label: str
    status: str
    status_badge: dict
    order_date: datetime | None = None
    work_started_at: datetime | None = None
    work_duration: int | None = None
    elapsed_seconds: int = 0
    completion_date: datetime | None = None
    rating: int | None = None
    layanan: LayananRef | None = None
    user: PelangganRef | None = None


class IncomingOrders(BaseModel):
    orders: list[OrderView]
    poll_interval_seconds: int


class AcceptResponse(BaseModel):
    message: str
    order: OrderView
    redirect: str = "/riwayat-transaksi?tab=pesanan"


class Invoice(BaseModel):
    """Ringkasan tagihan saat pekerjaan selesai."""
    order_id: int
    nama_layanan: str
    nama_pelanggan: str
    work_duration: int
    work_duration_label: str
    nominal: int
    fee: int
    net: int
    nominal_label: str
    fee_label: str
    net_label: str
    fee_deducted: bool
    fee_deferred: bool
    notice: str | None = None
    saldo: int
