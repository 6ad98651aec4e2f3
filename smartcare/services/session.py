"""
Penyimpanan sesi mitra.

Token bearer hanya membawa id sesi; role dan akun dibaca dari baris
`mitra_session` di server. Sesi tidak kedaluwarsa: berlaku sampai logout.
"""
import logging
import secrets

from sqlmodel import Session

from smartcare.core.security import session_id_from_token, sign_session
from smartcare.models import Mitra, MitraSession
from smartcare.models.mitra import utcnow
from smartcare.services.gateway import DataGateway

log = logging.getLogger("smartcare.session")

ROLE_MITRA = "mitra"


def set_session(db: Session, role: str, mitra: Mitra) -> str:
    """Membuat sesi baru untuk akun dan mengembalikan token bearer."""
    gw = DataGateway(db)
    sid = secrets.token_urlsafe(32)
    gw.insert(MitraSession(sid=sid, mitra_id=mitra.id, role=role), error="Gagal membuat sesi login.")
    return sign_session(sid, mitra.id, role)


def _active_session(gw: DataGateway, token: str | None) -> MitraSession | None:
    if not token:
        return None
    sid = session_id_from_token(token)
    if not sid:
        return None
    return gw.first(MitraSession, eq={"sid": sid}, is_null=("revoked_at",))


def get_current_user(db: Session, token: str | None, role: str = ROLE_MITRA) -> Mitra | None:
    """Akun pemilik sesi aktif dengan role yang diminta; None bila tidak ada."""
    gw = DataGateway(db)
    row = _active_session(gw, token)
    if not row or row.role != role:
        return None
    return gw.get(Mitra, row.mitra_id)


def clear_session(db: Session, token: str | None) -> int | None:
    """Mencabut sesi (logout). Mengembalikan id mitra, None bila tidak ada sesi aktif."""
    gw = DataGateway(db)
    row = _active_session(gw, token)
    if not row:
        return None
    gw.update(MitraSession, {"revoked_at": utcnow()}, eq={"id": row.id}, error="Gagal logout.")
    log.info("session revoked mitra_id=%s", row.mitra_id)
    return row.mitra_id
