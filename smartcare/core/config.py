from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

# .env di root proyek: smartcare/core/config.py -> smartcare/core -> smartcare -> root
_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _ROOT / ".env"


class Settings(BaseSettings):
    secret_key: str = "change-me-in-production"
    database_url: str = "sqlite:///./smartcare.db"
    # CORS: daftar origin dipisah koma; di production isi dengan domain portal
    cors_origins: str = "*"
    # Batas request per IP per menit
    rate_limit_per_minute: int = 60
    # Batas khusus endpoint /register (di test bisa dinaikkan)
    rate_limit_register_per_minute: int = 3
    rate_limit_login: str = "5/minute;20/hour"
    admin_secret: str = ""             # X-Admin-Secret untuk balasan chat admin
    environment: str = "development"
    # Biaya operasional saat pesanan selesai (persen dari nominal)
    fee_percent: int = 10
    topup_min_nominal: int = 10_000
    topup_code_prefix: str = "TOP"
    # Interval polling yang dianjurkan ke klien (detik)
    order_poll_seconds: int = 30
    chat_poll_seconds: int = 3
    # Kalender lokal untuk label "Hari ini" / "Kemarin" di chat
    timezone: str = "Asia/Jakarta"
    # Satu akun hanya boleh punya satu pesanan "sedang_dikerjakan"
    single_active_work: bool = True

    model_config = {
        "env_file": _ENV_FILE if _ENV_FILE.is_file() else ".env",
        "extra": "ignore",
    }

    @field_validator("admin_secret", "secret_key", mode="before")
    @classmethod
    def strip_secret(cls, v: str | None) -> str:
        """Spasi di awal/akhir hasil copy-paste tidak ikut dibandingkan."""
        return (v or "").strip()

    @field_validator("fee_percent")
    @classmethod
    def fee_percent_range(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError("FEE_PERCENT harus di antara 0 dan 100.")
        return v


settings = Settings()


def cors_origins_list() -> list[str]:
    if not settings.cors_origins or settings.cors_origins.strip() == "*":
        return ["*"]
    return [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
