import logging
import time
import traceback
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Uvicorn dijalankan dari mana pun, .env tetap dibaca dari root proyek
_PROJ_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJ_ROOT / ".env")

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlmodel import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from smartcare.admin import admin_router
from smartcare.api.auth import router as auth_router
from smartcare.api.chat import router as chat_router
from smartcare.api.history import router as history_router
from smartcare.api.mitra import router as mitra_router
from smartcare.api.orders import router as orders_router
from smartcare.api.topup import router as topup_router
from smartcare.core.config import cors_origins_list, settings
from smartcare.core.database import engine, init_db
from smartcare.core.rate_limit import client_ip, limiter
from smartcare.logging import setup_logging
from smartcare.models import ErrorLog
from smartcare.services.audit import security_event

setup_logging(level=logging.INFO)
log = logging.getLogger("smartcare")

NOT_FOUND_MESSAGE = "Halaman tidak ditemukan."


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    log.info("SmartCare Mitra API ready (environment=%s)", settings.environment)
    yield


app = FastAPI(
    title="SmartCare Mitra API",
    description="Portal mitra: pendaftaran, pesanan, saldo, dan live chat",
    lifespan=lifespan,
)
app.state.limiter = limiter


def _error_response(
    request: Request,
    status_code: int,
    detail: str,
    redirect: str | None = None,
    headers: dict | None = None,
) -> JSONResponse:
    rid = getattr(request.state, "request_id", None)
    body = {"error": detail, "status_code": status_code}
    if redirect:
        body["redirect"] = redirect
    if rid:
        body["request_id"] = rid
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    with Session(engine) as db:
        security_event(db, "rate_limit", ip=client_ip(request), endpoint=request.url.path, detail=str(exc.detail))
    return _error_response(request, 429, "Terlalu banyak permintaan. Silakan tunggu sebentar.")


FIELD_ERRORS = {
    "tab": "Tab riwayat tidak dikenal (gunakan topup atau pesanan).",
    "order_id": "ID pesanan tidak valid.",
    "nominal": "Nominal harus berupa angka.",
    "message": "Pesan harus berupa teks.",
    "payment_method": "Metode pembayaran tidak dikenal.",
}
FIELD_LABELS = {
    "nama_toko": "Nama toko",
    "alamat": "Alamat",
    "phone_number": "Nomor telepon",
    "description": "Deskripsi",
    "mitra_email": "Email mitra",
}
INVALID_REQUEST = "Permintaan tidak valid."


def _validation_error_message(exc: RequestValidationError) -> str:
    """Pesan Indonesia untuk notifikasi; teks bahasa Inggris dari pydantic tidak diteruskan."""
    errs = exc.errors()
    if not errs:
        return INVALID_REQUEST
    first = errs[0]
    loc = [str(p) for p in first.get("loc") or []]
    # loc[0] adalah sumber (body/query/path), sisanya nama field
    field = loc[-1] if len(loc) > 1 else None
    if first.get("type") == "missing":
        if field is None:
            return "Data tidak sampai ke server. Muat ulang halaman lalu coba lagi."
        return "Silakan lengkapi semua field."
    if field in FIELD_ERRORS:
        return FIELD_ERRORS[field]
    if field in FIELD_LABELS:
        return f"{FIELD_LABELS[field]} tidak valid."
    if field is None and loc[:1] == ["body"]:
        return "Format data tidak valid. Muat ulang halaman lalu coba lagi."
    return INVALID_REQUEST


def _jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [{"loc": list(e.get("loc") or []), "msg": e.get("msg"), "type": e.get("type")} for e in exc.errors()]


@app.exception_handler(RequestValidationError)
def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    log.warning(
        "Request validation error (422): path=%s method=%s detail=%s",
        request.url.path,
        request.method,
        exc.errors(),
    )
    rid = getattr(request.state, "request_id", None)
    body = {"error": _validation_error_message(exc), "status_code": 422, "detail": _jsonable_errors(exc)}
    if rid:
        body["request_id"] = rid
    return JSONResponse(status_code=422, content=body)


app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)


@app.exception_handler(StarletteHTTPException)
def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        return _error_response(request, 404, NOT_FOUND_MESSAGE)
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _error_response(request, exc.status_code, detail, getattr(exc, "redirect", None), exc.headers)


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("Unhandled exception: path=%s %s", request.url.path, exc)
    try:
        with Session(engine) as db:
            db.add(ErrorLog(
                endpoint=request.url.path,
                method=request.method,
                error_message=str(exc)[:2000],
                stack_trace=traceback.format_exc()[:10000],
            ))
            db.commit()
    except Exception as e:
        log.warning("ErrorLog write failed: %s", e)
    return JSONResponse(status_code=500, content={"error": "Terjadi kesalahan tak terduga di server.", "status_code": 500})


@app.middleware("http")
async def request_id_and_latency(request: Request, call_next):
    request.state.request_id = str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    latency_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = request.state.request_id
    log.info(
        "request_id=%s method=%s path=%s status=%s latency_ms=%.2f",
        request.state.request_id,
        request.method,
        request.url.path,
        response.status_code,
        latency_ms,
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(auth_router)
app.include_router(mitra_router)
app.include_router(orders_router)
app.include_router(topup_router)
app.include_router(history_router)
app.include_router(chat_router)
app.include_router(admin_router)


@app.get("/")
def index():
    """Halaman depan: ringkasan layanan dan tautan daftar/login."""
    return {
        "servis": "SmartCare Mitra",
        "deskripsi": "Bergabung sebagai mitra: terima pesanan, kelola saldo, dan hubungi tim support.",
        "fitur": [
            "Pendaftaran dan verifikasi mitra",
            "Pesanan masuk dan pelacakan pekerjaan",
            "Top up saldo",
            "Riwayat transaksi",
            "Live chat dengan admin",
        ],
        "links": {"register": "/register", "login": "/login"},
    }


@app.get("/health")
def health():
    try:
        with Session(engine) as db:
            db.connection().execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        log.warning("health check database error: %s", e)
        database = "error"
    return {"status": "ok", "database": database}
