from .chat import ChatDay, ChatMessageView, ChatSend, Conversation, ConversationSummary
from .mitra import LoginResponse, MitraResponse, ProfileUpdate, VerificationStatus
from .orders import AcceptResponse, IncomingOrders, Invoice, LayananRef, OrderView, PelangganRef
from .topup import TopupCreated, TopupPage, TopupRequest, TopupView

__all__ = [
    "AcceptResponse",
    "ChatDay",
    "ChatMessageView",
    "ChatSend",
    "Conversation",
    "ConversationSummary",
    "IncomingOrders",
    "Invoice",
    "LayananRef",
    "LoginResponse",
    "MitraResponse",
    "OrderView",
    "PelangganRef",
    "ProfileUpdate",
    "TopupCreated",
    "TopupPage",
    "TopupRequest",
    "TopupView",
    "VerificationStatus",
]
