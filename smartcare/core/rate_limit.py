"""Batas permintaan per IP (SlowAPI) untuk endpoint auth dan endpoint tulis."""
from fastapi import Request
from slowapi import Limiter

from .config import settings

# Top up dan kirim chat; auth punya batas sendiri di config
WRITE_LIMIT = f"{settings.rate_limit_per_minute}/minute"


def client_ip(request: Request) -> str:
    """IP pertama di X-Forwarded-For bila ada (di belakang proxy), selain itu IP koneksi."""
    forwarded = request.headers.get("x-forwarded-for", "")
    first = forwarded.split(",")[0].strip()
    if first:
        return first
    return request.client.host if request.client else "127.0.0.1"


limiter = Limiter(key_func=client_ip)
