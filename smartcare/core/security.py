"""Hash kata sandi (bcrypt) dan token sesi bertanda tangan (HS256)."""
from datetime import datetime, timezone

import bcrypt
from jose import JWTError, jwt

from .config import settings

ALGORITHM = "HS256"


def _secret(password: str) -> bytes:
    # bcrypt menolak input lebih dari 72 byte
    return password.encode("utf-8")[:72]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_secret(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(_secret(plain), hashed.encode("utf-8"))


def sign_session(sid: str, mitra_id: int, role: str) -> str:
    """Token hanya membawa id sesi; tanpa exp karena sesi dicabut lewat logout."""
    claims = {"sid": sid, "sub": str(mitra_id), "role": role, "iat": datetime.now(timezone.utc)}
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def session_id_from_token(token: str) -> str | None:
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None
    sid = claims.get("sid")
    return sid if isinstance(sid, str) and sid else None
