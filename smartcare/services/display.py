"""Format tampilan: Rupiah, durasi, label status, tanggal Indonesia."""
from datetime import datetime

from smartcare.models.mitra import STATUS_PENDING, STATUS_REJECTED, STATUS_VERIFIED

BULAN = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)
BULAN_SINGKAT = ("Jan", "Feb", "Mar", "Apr", "Mei", "Jun", "Jul", "Agu", "Sep", "Okt", "Nov", "Des")

# Label badge riwayat; status lama (completed/success/failed/cancelled) tetap dikenali
TRANSACTION_BADGES = {
    "completed": ("Berhasil", "success"),
    "success": ("Berhasil", "success"),
    "pending": ("Menunggu", "secondary"),
    "failed": ("Gagal", "destructive"),
    "cancelled": ("Gagal", "destructive"),
    "diterima": ("Diterima", "default"),
    "sedang_dikerjakan": ("Sedang Dikerjakan", "default"),
    "selesai": ("Selesai", "success"),
}

VERIFICATION_INFO = {
    STATUS_VERIFIED: {
        "badge": "Terverifikasi",
        "title": "Akun Terverifikasi",
        "description": (
            "Selamat! Akun mitra Anda telah berhasil diverifikasi. "
            "Anda sekarang dapat menggunakan semua fitur platform SmartCare Mitra."
        ),
        "variant": "success",
    },
    STATUS_PENDING: {
        "badge": "Menunggu Verifikasi",
        "title": "Menunggu Verifikasi",
        "description": (
            "Akun Anda sedang dalam proses verifikasi. Tim kami akan meninjau informasi "
            "yang Anda berikan dan memberikan konfirmasi dalam 1-3 hari kerja."
        ),
        "variant": "warning",
    },
    STATUS_REJECTED: {
        "badge": "Ditolak",
        "title": "Verifikasi Ditolak",
        "description": (
            "Maaf, verifikasi akun Anda ditolak. Silakan periksa informasi yang Anda berikan "
            "dan hubungi tim support untuk informasi lebih lanjut."
        ),
        "variant": "destructive",
    },
}
UNKNOWN_VERIFICATION = {
    "badge": "Status Tidak Diketahui",
    "title": "Status Tidak Diketahui",
    "description": "Status verifikasi tidak dapat ditentukan. Silakan hubungi tim support.",
    "variant": "secondary",
}


def format_rupiah(amount: int | None) -> str:
    """1234567 -> 'Rp 1.234.567' (pemisah ribuan titik)."""
    return "Rp " + f"{int(amount or 0):,}".replace(",", ".")


def format_duration(seconds: int | None) -> str:
    s = max(0, int(seconds or 0))
    return f"{s // 3600:02d}:{s % 3600 // 60:02d}:{s % 60:02d}"


def format_datetime(value: datetime | None, long_month: bool = False) -> str:
    if not value:
        return "-"
    month = BULAN[value.month - 1] if long_month else BULAN_SINGKAT[value.month - 1]
    return f"{value.day} {month} {value.year} {value.hour:02d}.{value.minute:02d}"


def transaction_badge(status: str | None) -> dict:
    label, variant = TRANSACTION_BADGES.get(status or "", (status or "-", "secondary"))
    return {"label": label, "variant": variant}


def verification_info(status: str | None) -> dict:
    return dict(VERIFICATION_INFO.get(status or "", UNKNOWN_VERIFICATION))
