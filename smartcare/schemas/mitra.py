from datetime import datetime

from pydantic import BaseModel


class MitraResponse(BaseModel):
    """Data akun yang disimpan klien sebagai 'current user'."""
    id: int
    nama_toko: str
    email: str
    alamat: str = ""
    phone_number: str = ""
    description: str = ""
    status: str
    saldo: int = 0


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str = "mitra"
    user: MitraResponse
    redirect: str = "/dashboard-mitra"


class ProfileUpdate(BaseModel):
    """Email tidak bisa diubah; field None berarti tidak diubah."""
    nama_toko: str | None = None
    alamat: str | None = None
    phone_number: str | None = None
    description: str | None = None


class VerificationStatus(BaseModel):
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_at_label: str = "-"
    updated_at_label: str = "-"
    badge: str
    title: str
    description: str
    variant: str
