import time

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlmodel import Session

from smartcare.api.deps import require_mitra
from smartcare.core.config import settings
from smartcare.core.database import get_db
from smartcare.core.rate_limit import WRITE_LIMIT, client_ip, limiter
from smartcare.models import Mitra, Topup
from smartcare.models.topup import PAYMENT_METHODS
from smartcare.schemas import TopupCreated, TopupPage, TopupRequest, TopupView
from smartcare.services.audit import audit
from smartcare.services.display import format_rupiah, transaction_badge
from smartcare.services.gateway import DataGateway

router = APIRouter(tags=["topup"])

PREDEFINED_AMOUNTS = [50_000, 100_000, 200_000, 500_000, 1_000_000]


def transaction_code() -> str:
    """Prefix + waktu pembuatan (epoch milidetik), mis. TOP1718000000000."""
    return f"{settings.topup_code_prefix}{int(time.time() * 1000)}"


def topup_view(row: Topup) -> TopupView:
    return TopupView(
        id=row.id or 0,
        user_id=row.user_id,
        nominal=row.nominal,
        nominal_label=format_rupiah(row.nominal),
        payment_method=row.payment_method,
        payment_method_label=PAYMENT_METHODS.get(row.payment_method, row.payment_method),
        status=row.status,
        status_badge=transaction_badge(row.status),
        transaction_code=row.transaction_code,
        created_at=row.created_at,
    )


@router.get("/topup-saldo", response_model=TopupPage)
def topup_page(mitra: Mitra = Depends(require_mitra)):
    return TopupPage(
        saldo=mitra.saldo or 0,
        saldo_label=format_rupiah(mitra.saldo),
        minimum=settings.topup_min_nominal,
        predefined_amounts=PREDEFINED_AMOUNTS,
        payment_methods=[{"value": k, "label": v} for k, v in PAYMENT_METHODS.items()],
    )


@router.post("/topup-saldo", response_model=TopupCreated)
@limiter.limit(WRITE_LIMIT)
def request_topup(
    body: TopupRequest,
    request: Request,
    mitra: Mitra = Depends(require_mitra),
    db: Session = Depends(get_db),
):
    """Membuat permintaan top up berstatus pending; konfirmasi dilakukan di luar portal."""
    if not body.nominal or not body.payment_method:
        raise HTTPException(status_code=422, detail="Silakan lengkapi semua field.")
    if body.payment_method not in PAYMENT_METHODS:
        raise HTTPException(status_code=422, detail="Metode pembayaran tidak dikenal.")
    if body.nominal < settings.topup_min_nominal:
        raise HTTPException(
            status_code=422,
            detail=f"Nominal minimal {format_rupiah(settings.topup_min_nominal)}.",
        )
    code = transaction_code()
    row = DataGateway(db).insert(
        Topup(
            user_id=str(mitra.id),
            nominal=body.nominal,
            payment_method=body.payment_method,
            status="pending",
            transaction_code=code,
        ),
        error="Gagal mengirim permintaan top up.",
    )
    audit(db, "topup_request", mitra.id, client_ip(request), code)
    return TopupCreated(
        message=(
            f"Permintaan top up sebesar {format_rupiah(row.nominal)} berhasil dikirim. "
            f"Kode transaksi: {code}"
        ),
        topup=topup_view(row),
    )
