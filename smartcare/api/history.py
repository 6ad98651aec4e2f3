from typing import Literal

from fastapi import APIRouter, Depends
from sqlmodel import Session

from smartcare.api.deps import require_mitra
from smartcare.api.topup import topup_view
from smartcare.core.database import get_db
from smartcare.models import Mitra, Topup
from smartcare.services import orders as order_service
from smartcare.services.gateway import DataGateway

router = APIRouter(tags=["riwayat"])


@router.get("/riwayat-transaksi")
def transaction_history(
    tab: Literal["topup", "pesanan"] = "topup",
    mitra: Mitra = Depends(require_mitra),
    db: Session = Depends(get_db),
):
    """Riwayat top up dan pesanan milik akun; `tab` memilih tab yang aktif saat dibuka."""
    topups = DataGateway(db).select(
        Topup,
        # Baris lama menyimpan email sebagai user_id
        any_of=[{"user_id": str(mitra.id)}, {"user_id": mitra.email}],
        order_by="created_at",
        descending=True,
        error="Gagal memuat riwayat top up.",
    )
    pesanan = order_service.orders_for_mitra(db, mitra)
    return {
        "active_tab": tab,
        "topup": [topup_view(t) for t in topups],
        "pesanan": pesanan,
        "counts": {"topup": len(topups), "pesanan": len(pesanan)},
    }
