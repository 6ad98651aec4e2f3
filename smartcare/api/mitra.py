"""Halaman akun mitra: dashboard, profil, status verifikasi."""
from fastapi import APIRouter, Depends, Request
from sqlmodel import Session

from smartcare.api.auth import mitra_response
from smartcare.api.deps import require_mitra
from smartcare.core.database import get_db
from smartcare.core.rate_limit import client_ip
from smartcare.models import Mitra
from smartcare.models.mitra import utcnow
from smartcare.schemas import MitraResponse, ProfileUpdate, VerificationStatus
from smartcare.services.audit import audit
from smartcare.services.display import format_datetime, format_rupiah, verification_info
from smartcare.services.gateway import DataGateway

router = APIRouter(tags=["mitra"])

MENU = [
    {"title": "Profil Mitra", "description": "Kelola informasi toko Anda", "path": "/profil-mitra"},
    {"title": "Status Verifikasi", "description": "Cek status verifikasi akun", "path": "/status-verifikasi"},
    {"title": "Top Up Saldo", "description": "Isi ulang saldo akun", "path": "/topup-saldo"},
    {"title": "Riwayat Transaksi", "description": "Lihat riwayat transaksi", "path": "/riwayat-transaksi"},
    {"title": "Live Chat Admin", "description": "Hubungi tim support", "path": "/live-chat"},
    {"title": "Logout", "description": "Keluar dari akun", "path": "/logout", "method": "POST"},
]


@router.get("/dashboard-mitra")
def dashboard(mitra: Mitra = Depends(require_mitra)):
    info = verification_info(mitra.status)
    return {
        "mitra": mitra_response(mitra),
        "saldo_label": format_rupiah(mitra.saldo),
        "status_badge": {"label": info["badge"], "variant": info["variant"]},
        "menu": MENU,
    }


@router.get("/profil-mitra", response_model=MitraResponse)
def get_profile(mitra: Mitra = Depends(require_mitra)):
    return mitra_response(mitra)


@router.put("/profil-mitra", response_model=MitraResponse)
def update_profile(
    body: ProfileUpdate,
    request: Request,
    mitra: Mitra = Depends(require_mitra),
    db: Session = Depends(get_db),
):
    """Memperbarui nama toko, alamat, telepon, deskripsi. Email tidak bisa diubah."""
    values = {}
    if body.nama_toko is not None:
        nama = body.nama_toko.strip()
        if nama:
            values["nama_toko"] = nama
    if body.alamat is not None:
        values["alamat"] = body.alamat.strip()
    if body.phone_number is not None:
        values["phone_number"] = body.phone_number.strip()
    if body.description is not None:
        values["description"] = body.description.strip()
    if values:
        values["updated_at"] = utcnow()
        gw = DataGateway(db)
        gw.update(Mitra, values, eq={"id": mitra.id}, error="Gagal memperbarui profil.")
        gw.refresh(mitra)
        audit(db, "profile_update", mitra.id, client_ip(request), ",".join(sorted(values)))
    return mitra_response(mitra)


@router.get("/status-verifikasi", response_model=VerificationStatus)
def verification_status(mitra: Mitra = Depends(require_mitra)):
    info = verification_info(mitra.status)
    return VerificationStatus(
        status=mitra.status,
        created_at=mitra.created_at,
        updated_at=mitra.updated_at,
        created_at_label=format_datetime(mitra.created_at, long_month=True),
        updated_at_label=format_datetime(mitra.updated_at, long_month=True),
        **info,
    )
