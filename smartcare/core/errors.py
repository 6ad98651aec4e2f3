"""Kesalahan domain; semuanya HTTPException agar handler global menampilkan satu notifikasi."""
from fastapi import HTTPException, status

LOGIN_PATH = "/login"


class SessionRequired(HTTPException):
    """Tidak ada sesi mitra aktif: klien diarahkan ke halaman login."""

    def __init__(self, detail: str = "Silakan login terlebih dahulu."):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )
        self.redirect = LOGIN_PATH


class GatewayError(HTTPException):
    """Operasi database gagal (jaringan, auth, constraint). Tidak pernah di-retry."""

    def __init__(self, detail: str = "Gagal menghubungi server. Silakan coba lagi."):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)


class InvalidTransition(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)
