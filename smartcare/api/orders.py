"""Pesanan masuk dan siklus kerja mitra."""
from fastapi import APIRouter, Depends, Request
from sqlmodel import Session

from smartcare.api.deps import require_mitra
from smartcare.core.config import settings
from smartcare.core.database import get_db
from smartcare.core.rate_limit import client_ip
from smartcare.models import Mitra
from smartcare.schemas import AcceptResponse, IncomingOrders, Invoice, OrderView
from smartcare.services import orders as order_service
from smartcare.services.audit import audit
from smartcare.services.gateway import DataGateway

router = APIRouter(tags=["pesanan"])


@router.get("/dashboard-mitra/pesanan-masuk", response_model=IncomingOrders)
def incoming(
    mitra: Mitra = Depends(require_mitra),
    db: Session = Depends(get_db),
):
    """Pesanan pending tanpa mitra. Klien memanggil ulang setiap poll_interval_seconds."""
    return IncomingOrders(
        orders=order_service.incoming_orders(db),
        poll_interval_seconds=settings.order_poll_seconds,
    )


@router.get("/pesanan/{order_id}", response_model=OrderView)
def order_detail(
    order_id: int,
    mitra: Mitra = Depends(require_mitra),
    db: Session = Depends(get_db),
):
    return order_service.get_order(db, order_id, mitra)


@router.post("/pesanan/{order_id}/terima", response_model=AcceptResponse)
def accept_order(
    order_id: int,
    request: Request,
    mitra: Mitra = Depends(require_mitra),
    db: Session = Depends(get_db),
):
    order = order_service.accept(db, order_id, mitra)
    audit(db, "order_accept", mitra.id, client_ip(request), str(order_id))
    return AcceptResponse(
        message="Pesanan berhasil diterima dan dialihkan ke riwayat transaksi.",
        order=order_service.order_views(DataGateway(db), [order])[0],
    )


@router.post("/pesanan/{order_id}/mulai", response_model=OrderView)
def start_order(
    order_id: int,
    request: Request,
    mitra: Mitra = Depends(require_mitra),
    db: Session = Depends(get_db),
):
    order = order_service.start_work(db, order_id, mitra)
    audit(db, "work_start", mitra.id, client_ip(request), str(order_id))
    return order_service.order_views(DataGateway(db), [order])[0]


@router.post("/pesanan/{order_id}/selesai", response_model=Invoice)
def finish_order(
    order_id: int,
    request: Request,
    mitra: Mitra = Depends(require_mitra),
    db: Session = Depends(get_db),
):
    invoice = order_service.finish_work(db, order_id, mitra)
    audit(
        db,
        "work_finish",
        mitra.id,
        client_ip(request),
        f"order={order_id} fee={invoice.fee} deferred={invoice.fee_deferred}",
    )
    return invoice
