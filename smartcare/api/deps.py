from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from smartcare.core.database import get_db
from smartcare.core.errors import SessionRequired
from smartcare.core.rate_limit import client_ip
from smartcare.models import Mitra
from smartcare.services.audit import security_event
from smartcare.services.session import get_current_user

security = HTTPBearer(auto_error=False)


def get_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str | None:
    return credentials.credentials if credentials else None


def require_mitra(
    request: Request,
    token: str | None = Depends(get_token),
    db: Session = Depends(get_db),
) -> Mitra:
    """Halaman terproteksi: harus ada sesi aktif dengan role mitra, jika tidak ke /login."""
    if not token:
        raise SessionRequired()
    mitra = get_current_user(db, token)
    if not mitra:
        security_event(db, "invalid_session", ip=client_ip(request), endpoint=request.url.path)
        raise SessionRequired("Sesi tidak valid atau sudah berakhir. Silakan login kembali.")
    return mitra
