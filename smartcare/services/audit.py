"""Jejak audit dan log keamanan; kegagalan menulis log tidak membatalkan operasi utama."""
import logging

from sqlmodel import Session

from smartcare.models import AuditLog, SecurityLog

log = logging.getLogger("smartcare.audit")


def audit(db: Session, event: str, mitra_id: int | None, ip: str | None = None, detail: str | None = None) -> None:
    log.info("audit event=%s mitra_id=%s", event, mitra_id)
    try:
        db.add(AuditLog(event=event, mitra_id=mitra_id, ip=ip or None, detail=detail))
        db.commit()
    except Exception as e:
        db.rollback()
        log.warning("AuditLog write failed: %s", e)


def security_event(
    db: Session,
    event: str,
    ip: str | None = None,
    endpoint: str | None = None,
    detail: str | None = None,
    mitra_id: int | None = None,
) -> None:
    log.warning("security event=%s ip=%s endpoint=%s", event, ip, endpoint)
    try:
        db.add(SecurityLog(event=event, mitra_id=mitra_id, ip=ip or None, endpoint=endpoint, detail=detail))
        db.commit()
    except Exception as e:
        db.rollback()
        log.warning("SecurityLog write failed: %s", e)
