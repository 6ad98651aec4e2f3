from .audit import AuditLog
from .chat import ChatMessage
from .error_log import ErrorLog
from .layanan import Layanan, Pelanggan
from .mitra import Mitra
from .security_log import SecurityLog
from .session import MitraSession
from .tagihan import Tagihan
from .topup import Topup

__all__ = [
    "AuditLog",
    "ChatMessage",
    "ErrorLog",
    "Layanan",
    "Mitra",
    "MitraSession",
    "Pelanggan",
    "SecurityLog",
    "Tagihan",
    "Topup",
]
