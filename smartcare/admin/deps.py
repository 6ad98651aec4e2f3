"""Admin auth: header X-Admin-Secret dibandingkan constant-time."""
import hmac

from fastapi import Header, HTTPException, Request
from sqlmodel import Session

from smartcare.core.config import settings
from smartcare.core.database import engine
from smartcare.core.rate_limit import client_ip
from smartcare.services.audit import security_event


def _secret_matches(provided: str | None, expected: str | None) -> bool:
    return hmac.compare_digest((provided or "").encode("utf-8"), (expected or "").encode("utf-8"))


def require_admin(
    request: Request,
    x_admin_secret: str | None = Header(None, alias="X-Admin-Secret"),
) -> None:
    expected = (settings.admin_secret or "").strip()
    if not expected:
        raise HTTPException(status_code=503, detail="Panel admin belum dikonfigurasi (ADMIN_SECRET kosong).")
    if not _secret_matches(x_admin_secret, expected):
        with Session(engine) as db:
            security_event(db, "admin_denied", ip=client_ip(request), endpoint=request.url.path)
        raise HTTPException(status_code=403, detail="Tidak diizinkan.")
