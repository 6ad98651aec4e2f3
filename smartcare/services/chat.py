"""Live chat mitra <-> admin: kirim, muat (tandai sudah dibaca), kelompokkan per hari."""
import logging
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from fastapi import HTTPException
from sqlmodel import Session

from smartcare.core.config import settings
from smartcare.models import ChatMessage, Mitra
from smartcare.models.chat import ADMIN_ID, PARTY_ADMIN, PARTY_MITRA
from smartcare.models.mitra import as_utc
from smartcare.schemas import ChatDay, ChatMessageView, ConversationSummary
from smartcare.services.display import BULAN
from smartcare.services.gateway import DataGateway

log = logging.getLogger("smartcare.chat")

LABEL_TODAY = "Hari ini"
LABEL_YESTERDAY = "Kemarin"


def _tz() -> ZoneInfo:
    return ZoneInfo(settings.timezone)


def to_local(value: datetime) -> datetime:
    """Waktu tersimpan (UTC, naive dari SQLite atau aware) -> waktu kalender lokal."""
    return as_utc(value).astimezone(_tz())


def local_today() -> date:
    return datetime.now(_tz()).date()


def day_label(day: date, today: date) -> str:
    if day == today:
        return LABEL_TODAY
    if day == today - timedelta(days=1):
        return LABEL_YESTERDAY
    return f"{day.day} {BULAN[day.month - 1]} {day.year}"


def message_view(msg: ChatMessage) -> ChatMessageView:
    local = to_local(msg.created_at)
    return ChatMessageView(
        id=msg.id or 0,
        sender_id=msg.sender_id,
        sender_type=msg.sender_type,
        receiver_id=msg.receiver_id,
        receiver_type=msg.receiver_type,
        message=msg.message,
        created_at=msg.created_at,
        time_label=f"{local.hour:02d}.{local.minute:02d}",
        read_by_sender=msg.read_by_sender,
        read_by_receiver=msg.read_by_receiver,
    )


def group_by_day(messages: list[ChatMessageView], today: date | None = None) -> list[ChatDay]:
    """Mengelompokkan pesan (urut naik) per tanggal kalender lokal."""
    today = today or local_today()
    days: list[ChatDay] = []
    for m in messages:
        day = to_local(m.created_at).date()
        if not days or days[-1].date != day.isoformat():
            days.append(ChatDay(date=day.isoformat(), label=day_label(day, today), messages=[]))
        days[-1].messages.append(m)
    return days


def _conversation_filter(email: str) -> list[dict]:
    return [
        {"sender_id": email, "sender_type": PARTY_MITRA},
        {"receiver_id": email, "receiver_type": PARTY_MITRA},
    ]


def _clean(text: str | None) -> str:
    text = (text or "").strip()
    if not text:
        raise HTTPException(status_code=422, detail="Pesan tidak boleh kosong.")
    return text


def send_message(db: Session, mitra: Mitra, text: str | None) -> ChatMessage:
    body = _clean(text)
    gw = DataGateway(db)
    msg = gw.insert(
        ChatMessage(
            sender_id=mitra.email,
            sender_type=PARTY_MITRA,
            receiver_id=ADMIN_ID,
            receiver_type=PARTY_ADMIN,
            message=body,
            read_by_sender=True,
            read_by_receiver=False,
        ),
        error="Gagal mengirim pesan.",
    )
    log.info("chat sent mitra_id=%s message_id=%s", mitra.id, msg.id)
    return msg


def _load_and_mark(gw: DataGateway, email: str, reader_id: str, reader_type: str) -> list[ChatMessage]:
    rows = gw.select(
        ChatMessage,
        any_of=_conversation_filter(email),
        order_by="created_at",
        error="Gagal memuat pesan.",
    )
    unread = [
        m.id for m in rows
        if m.receiver_id == reader_id and m.receiver_type == reader_type and not m.read_by_receiver
    ]
    if unread:
        gw.update(ChatMessage, {"read_by_receiver": True}, in_={"id": unread}, error="Gagal memperbarui status baca.")
        # commit meng-expire objek; muat ulang supaya flag baru ikut terlihat
        rows = [gw.refresh(m) for m in rows]
    return rows


def load_conversation(db: Session, mitra: Mitra) -> list[ChatMessage]:
    """Percakapan akun dengan admin; pesan dari admin ditandai sudah dibaca."""
    return _load_and_mark(DataGateway(db), mitra.email, mitra.email, PARTY_MITRA)


def admin_load_conversation(db: Session, mitra_email: str) -> list[ChatMessage]:
    return _load_and_mark(DataGateway(db), mitra_email, ADMIN_ID, PARTY_ADMIN)


def admin_reply(db: Session, mitra_email: str, text: str | None) -> ChatMessage:
    body = _clean(text)
    gw = DataGateway(db)
    if not gw.first(Mitra, eq={"email": mitra_email}):
        raise HTTPException(status_code=404, detail="Mitra tidak ditemukan.")
    return gw.insert(
        ChatMessage(
            sender_id=ADMIN_ID,
            sender_type=PARTY_ADMIN,
            receiver_id=mitra_email,
            receiver_type=PARTY_MITRA,
            message=body,
            read_by_sender=True,
            read_by_receiver=False,
        ),
        error="Gagal mengirim pesan.",
    )


def admin_conversations(db: Session) -> list[ConversationSummary]:
    """Daftar percakapan untuk admin: pesan terakhir dan jumlah belum dibaca."""
    gw = DataGateway(db)
    rows = gw.select(ChatMessage, order_by="created_at", error="Gagal memuat percakapan.")
    by_mitra: dict[str, dict] = {}
    for m in rows:
        email = m.sender_id if m.sender_type == PARTY_MITRA else m.receiver_id
        item = by_mitra.setdefault(email, {"unread": 0})
        item["last_message"] = m.message
        item["last_at"] = m.created_at
        if m.receiver_type == PARTY_ADMIN and not m.read_by_receiver:
            item["unread"] += 1
    names = {}
    if by_mitra:
        names = {r.email: r.nama_toko for r in gw.select(Mitra, in_={"email": list(by_mitra)})}
    out = [
        ConversationSummary(mitra_email=email, nama_toko=names.get(email), **item)
        for email, item in by_mitra.items()
    ]
    out.sort(key=lambda c: c.last_at, reverse=True)
    return out
