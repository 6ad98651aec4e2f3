"""
Siklus hidup pesanan (tagihan): pending -> diterima -> sedang_dikerjakan -> selesai.

Setiap transisi adalah UPDATE bersyarat pada status asal, jadi dua permintaan
yang berebut pesanan yang sama tidak bisa sama-sama berhasil. Biaya operasional
dipotong dari saldo dengan pengurangan atomik yang tidak pernah membuat saldo negatif.
"""
import logging
from datetime import datetime

from fastapi import HTTPException
from sqlalchemy import exists
from sqlmodel import Session

from smartcare.core.config import settings
from smartcare.core.errors import InvalidTransition
from smartcare.models import Layanan, Mitra, Pelanggan, Tagihan
from smartcare.models.mitra import as_utc, utcnow
from smartcare.models.tagihan import (
    ORDER_ACCEPTED,
    ORDER_DONE,
    ORDER_FLOW,
    ORDER_IN_PROGRESS,
    ORDER_PENDING,
)
from smartcare.schemas import Invoice, LayananRef, OrderView, PelangganRef
from smartcare.services.display import (
    format_duration,
    format_rupiah,
    transaction_badge,
)
from smartcare.services.gateway import DataGateway

log = logging.getLogger("smartcare.orders")

FEE_DEFERRED_NOTICE = (
    "Saldo tidak mencukupi. Biaya operasional akan ditagihkan terpisah."
)


def _now() -> datetime:
    return utcnow()


def operational_fee(nominal: int, percent: int | None = None) -> int:
    """Biaya = nominal x persen / 100, dibulatkan setengah ke atas (aritmetika integer)."""
    if nominal <= 0:
        raise ValueError(f"nominal harus positif, bukan {nominal}")
    pct = settings.fee_percent if percent is None else percent
    return (int(nominal) * pct + 50) // 100


def elapsed_seconds(order: Tagihan, now: datetime | None = None) -> int:
    """Durasi kerja; untuk pesanan yang masih dikerjakan dihitung dari work_started_at."""
    if order.status != ORDER_IN_PROGRESS or not order.work_started_at:
        return order.work_duration or 0
    delta = as_utc(now or _now()) - as_utc(order.work_started_at)
    return max(0, int(delta.total_seconds()))


def _transition_error(current: str, target: str) -> InvalidTransition:
    if current in ORDER_FLOW and target in ORDER_FLOW:
        expected = ORDER_FLOW[ORDER_FLOW.index(target) - 1]
        return InvalidTransition(
            f"Pesanan berstatus '{current}' tidak bisa diubah ke '{target}' (harus '{expected}')."
        )
    return InvalidTransition(f"Pesanan berstatus '{current}' tidak bisa diubah ke '{target}'.")


def _load(gw: DataGateway, order_id: int) -> Tagihan:
    order = gw.get(Tagihan, order_id, error="Gagal memuat pesanan.")
    if not order:
        raise HTTPException(status_code=404, detail="Pesanan tidak ditemukan.")
    return order


def _load_owned(gw: DataGateway, order_id: int, mitra: Mitra) -> Tagihan:
    order = _load(gw, order_id)
    if order.mitra_id != mitra.id:
        raise HTTPException(status_code=403, detail="Pesanan ini bukan milik Anda.")
    return order


def order_views(gw: DataGateway, orders: list[Tagihan], now: datetime | None = None) -> list[OrderView]:
    """Join dangkal pesanan -> layanan dan pesanan -> pelanggan untuk tampilan."""
    layanan_ids = {o.layanan_id for o in orders if o.layanan_id is not None}
    user_ids = {o.user_id for o in orders if o.user_id is not None}
    layanan_map = {r.id: r for r in gw.select(Layanan, in_={"id": layanan_ids})} if layanan_ids else {}
    user_map = {r.id: r for r in gw.select(Pelanggan, in_={"id": user_ids})} if user_ids else {}
    now = now or _now()
    rows = []
    for o in orders:
        layanan = layanan_map.get(o.layanan_id)
        user = user_map.get(o.user_id)
        rows.append(
            OrderView(
                id=o.id or 0,
                user_id=o.user_id,
                layanan_id=o.layanan_id,
                mitra_id=o.mitra_id,
                nominal=o.nominal,
                nominal_label=format_rupiah(o.nominal),
                status=o.status,
                status_badge=transaction_badge(o.status),
                order_date=o.order_date,
                work_started_at=o.work_started_at,
                work_duration=o.work_duration,
                elapsed_seconds=elapsed_seconds(o, now),
                completion_date=o.completion_date,
                rating=o.rating,
                layanan=LayananRef(nama_layanan=layanan.nama_layanan, description=layanan.description or "") if layanan else None,
                user=PelangganRef(nama=user.nama, email=user.email) if user else None,
            )
        )
    return rows


def incoming_orders(db: Session) -> list[OrderView]:
    """Pesanan pending yang belum punya mitra, terbaru dulu."""
    gw = DataGateway(db)
    orders = gw.select(
        Tagihan,
        eq={"status": ORDER_PENDING},
        is_null=("mitra_id",),
        order_by="order_date",
        descending=True,
        error="Gagal memuat pesanan masuk.",
    )
    return order_views(gw, orders)


def orders_for_mitra(db: Session, mitra: Mitra) -> list[OrderView]:
    gw = DataGateway(db)
    orders = gw.select(
        Tagihan,
        eq={"mitra_id": mitra.id},
        order_by="order_date",
        descending=True,
        error="Gagal memuat riwayat pesanan.",
    )
    return order_views(gw, orders)


def get_order(db: Session, order_id: int, mitra: Mitra) -> OrderView:
    gw = DataGateway(db)
    order = _load(gw, order_id)
    # Pesanan pending terlihat oleh semua mitra; setelah diterima hanya oleh pemiliknya
    if order.mitra_id is not None and order.mitra_id != mitra.id:
        raise HTTPException(status_code=403, detail="Pesanan ini bukan milik Anda.")
    return order_views(gw, [order])[0]


def accept(db: Session, order_id: int, mitra: Mitra) -> Tagihan:
    """pending (tanpa mitra) -> diterima; mitra_id diisi sekali, tidak pernah dipindah."""
    gw = DataGateway(db)
    order = _load(gw, order_id)
    changed = gw.update(
        Tagihan,
        {"mitra_id": mitra.id, "status": ORDER_ACCEPTED},
        eq={"id": order_id, "status": ORDER_PENDING},
        is_null=("mitra_id",),
        error="Gagal menerima pesanan.",
    )
    if not changed:
        gw.refresh(order)
        if order.mitra_id is not None and order.mitra_id != mitra.id:
            raise InvalidTransition("Pesanan sudah diterima mitra lain.")
        raise _transition_error(order.status, ORDER_ACCEPTED)
    log.info("order accepted order_id=%s mitra_id=%s", order_id, mitra.id)
    return gw.refresh(order)


def start_work(db: Session, order_id: int, mitra: Mitra) -> Tagihan:
    """diterima -> sedang_dikerjakan; waktu mulai disimpan agar timer bertahan saat reload."""
    gw = DataGateway(db)
    order = _load_owned(gw, order_id, mitra)
    if order.status != ORDER_ACCEPTED:
        raise _transition_error(order.status, ORDER_IN_PROGRESS)
    where = []
    if settings.single_active_work:
        # Syarat eksklusif ikut di WHERE: dua "mulai" bersamaan tidak bisa sama-sama lolos
        aktif = Tagihan.__table__.alias("aktif")
        where.append(
            ~exists().where(aktif.c.mitra_id == mitra.id, aktif.c.status == ORDER_IN_PROGRESS)
        )
    changed = gw.update(
        Tagihan,
        {"status": ORDER_IN_PROGRESS, "work_started_at": _now()},
        eq={"id": order_id, "status": ORDER_ACCEPTED, "mitra_id": mitra.id},
        where=where,
        error="Gagal memulai pekerjaan.",
    )
    if not changed:
        gw.refresh(order)
        if order.status == ORDER_ACCEPTED and settings.single_active_work:
            active = gw.first(Tagihan, eq={"mitra_id": mitra.id, "status": ORDER_IN_PROGRESS})
            if active:
                raise InvalidTransition(f"Selesaikan dulu pesanan #{active.id} yang sedang dikerjakan.")
        raise _transition_error(order.status, ORDER_IN_PROGRESS)
    log.info("work started order_id=%s mitra_id=%s", order_id, mitra.id)
    return gw.refresh(order)


def finish_work(db: Session, order_id: int, mitra: Mitra) -> Invoice:
    """
    sedang_dikerjakan -> selesai. Menyimpan durasi dan tanggal selesai, lalu memotong
    biaya operasional dari saldo bila cukup; bila tidak, saldo dibiarkan dan
    invoice menandai biaya sebagai ditagihkan terpisah.
    """
    gw = DataGateway(db)
    order = _load_owned(gw, order_id, mitra)
    if order.status != ORDER_IN_PROGRESS:
        raise _transition_error(order.status, ORDER_DONE)
    if order.nominal <= 0:
        log.error("order with non-positive nominal order_id=%s nominal=%s", order_id, order.nominal)
        raise InvalidTransition("Nominal pesanan tidak valid; pesanan tidak bisa diselesaikan.")
    now = _now()
    duration = elapsed_seconds(order, now)
    changed = gw.update(
        Tagihan,
        {"status": ORDER_DONE, "work_duration": duration, "completion_date": now},
        eq={"id": order_id, "status": ORDER_IN_PROGRESS, "mitra_id": mitra.id},
        error="Gagal menyelesaikan pekerjaan.",
    )
    if not changed:
        gw.refresh(order)
        raise _transition_error(order.status, ORDER_DONE)
    gw.refresh(order)

    fee = operational_fee(order.nominal)
    deducted = gw.increment(
        Mitra,
        "saldo",
        -fee,
        eq={"id": mitra.id},
        minimum=0,
        error="Pekerjaan selesai, tetapi gagal memotong biaya operasional.",
    ) > 0
    account = gw.get(Mitra, mitra.id)
    gw.refresh(account)
    if deducted:
        log.info("fee deducted order_id=%s mitra_id=%s fee=%s", order_id, mitra.id, fee)
    else:
        log.info("fee deferred order_id=%s mitra_id=%s fee=%s saldo=%s", order_id, mitra.id, fee, account.saldo)

    layanan = gw.get(Layanan, order.layanan_id) if order.layanan_id is not None else None
    pelanggan = gw.get(Pelanggan, order.user_id) if order.user_id is not None else None
    net = order.nominal - fee
    return Invoice(
        order_id=order.id or 0,
        nama_layanan=layanan.nama_layanan if layanan else "Layanan",
        nama_pelanggan=pelanggan.nama if pelanggan else "User",
        work_duration=duration,
        work_duration_label=format_duration(duration),
        nominal=order.nominal,
        fee=fee,
        net=net,
        nominal_label=format_rupiah(order.nominal),
        fee_label=format_rupiah(fee),
        net_label=format_rupiah(net),
        fee_deducted=deducted,
        fee_deferred=not deducted,
        notice=None if deducted else FEE_DEFERRED_NOTICE,
        saldo=account.saldo,
    )
