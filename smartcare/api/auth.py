from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlmodel import Session

from smartcare.api.deps import get_token
from smartcare.core.config import settings
from smartcare.core.database import get_db
from smartcare.core.errors import SessionRequired
from smartcare.core.rate_limit import client_ip, limiter
from smartcare.core.security import hash_password, verify_password
from smartcare.models import Mitra
from smartcare.models.mitra import STATUS_PENDING
from smartcare.schemas import LoginResponse, MitraResponse
from smartcare.services.audit import audit, security_event
from smartcare.services.gateway import DataGateway
from smartcare.services.session import ROLE_MITRA, clear_session, set_session

router = APIRouter(tags=["auth"])
_REGISTER_LIMIT = f"{settings.rate_limit_register_per_minute}/minute"
_email_adapter = TypeAdapter(EmailStr)

MIN_PASSWORD_LENGTH = 6


def mitra_response(mitra: Mitra) -> MitraResponse:
    return MitraResponse(
        id=mitra.id or 0,
        nama_toko=mitra.nama_toko,
        email=mitra.email,
        alamat=mitra.alamat or "",
        phone_number=mitra.phone_number or "",
        description=mitra.description or "",
        status=mitra.status,
        saldo=mitra.saldo or 0,
    )


def _normalize_email(raw: str) -> str:
    try:
        return str(_email_adapter.validate_python(raw)).lower()
    except ValidationError:
        raise HTTPException(status_code=422, detail="Format email tidak valid.")


@router.post("/register", response_model=MitraResponse)
@limiter.limit(_REGISTER_LIMIT)
async def register(
    request: Request,
    db: Session = Depends(get_db),
):
    """Pendaftaran mitra baru; akun dibuat dengan status pending dan saldo 0."""
    form = await request.form()
    nama_toko = (form.get("nama_toko") or "").strip()
    email = (form.get("email") or "").strip()
    password = form.get("password") or ""
    confirm = form.get("confirm_password")
    alamat = (form.get("alamat") or "").strip()
    phone_number = (form.get("phone_number") or "").strip()
    if not (nama_toko and email and password and alamat and phone_number):
        raise HTTPException(status_code=422, detail="Silakan lengkapi semua field.")
    email = _normalize_email(email)
    if confirm is not None and confirm != password:
        raise HTTPException(status_code=422, detail="Password dan konfirmasi password tidak cocok.")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=422, detail="Password minimal 6 karakter.")

    gw = DataGateway(db)
    if gw.first(Mitra, eq={"email": email}, error="Gagal memeriksa email."):
        raise HTTPException(status_code=400, detail="Email sudah digunakan.")
    mitra = gw.insert(
        Mitra(
            nama_toko=nama_toko,
            email=email,
            hashed_password=hash_password(password),
            alamat=alamat,
            phone_number=phone_number,
            status=STATUS_PENDING,
            saldo=0,
        ),
        error="Terjadi kesalahan saat mendaftar.",
    )
    audit(db, "register", mitra.id, client_ip(request))
    return mitra_response(mitra)


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.rate_limit_login)
async def login(
    request: Request,
    db: Session = Depends(get_db),
):
    form = await request.form()
    email = (form.get("email") or "").strip().lower()
    password = form.get("password") or ""
    if not email or not password:
        raise HTTPException(status_code=422, detail="Email dan kata sandi wajib diisi.")
    gw = DataGateway(db)
    mitra = gw.first(Mitra, eq={"email": email}, error="Terjadi kesalahan saat login.")
    ip = client_ip(request)
    if not mitra or not verify_password(password, mitra.hashed_password):
        security_event(db, "failed_login", ip=ip, endpoint="/login", detail=email)
        raise HTTPException(status_code=401, detail="Email atau kata sandi salah.")
    token = set_session(db, ROLE_MITRA, mitra)
    audit(db, "login", mitra.id, ip)
    return LoginResponse(access_token=token, role=ROLE_MITRA, user=mitra_response(mitra))


@router.post("/logout")
def logout(
    request: Request,
    token: str | None = Depends(get_token),
    db: Session = Depends(get_db),
):
    mitra_id = clear_session(db, token)
    if mitra_id is None:
        raise SessionRequired()
    audit(db, "logout", mitra_id, client_ip(request))
    return {"message": "Anda telah berhasil keluar dari sistem.", "redirect": "/login"}
