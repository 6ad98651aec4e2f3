"""portal tables

Tabel awal portal mitra: mitra, layanan, pelanggan, tagihan, topup, chat,
sesi, dan tabel log.

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001_portal_tables"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "mitra",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nama_toko", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("alamat", sa.String(), nullable=False, server_default=""),
        sa.Column("phone_number", sa.String(), nullable=False, server_default=""),
        sa.Column("description", sa.String(), nullable=False, server_default=""),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("saldo", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("saldo >= 0", name="ck_mitra_saldo_non_negative"),
    )
    op.create_index("ix_mitra_email", "mitra", ["email"], unique=True)
    op.create_index("ix_mitra_status", "mitra", ["status"])

    op.create_table(
        "layanan",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nama_layanan", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False, server_default=""),
    )
    op.create_table(
        "pelanggan",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nama", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
    )
    op.create_index("ix_pelanggan_email", "pelanggan", ["email"])

    op.create_table(
        "tagihan",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("pelanggan.id"), nullable=True),
        sa.Column("layanan_id", sa.Integer(), sa.ForeignKey("layanan.id"), nullable=True),
        sa.Column("mitra_id", sa.Integer(), sa.ForeignKey("mitra.id"), nullable=True),
        sa.Column("nominal", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("order_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("work_started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("work_duration", sa.Integer(), nullable=True),
        sa.Column("completion_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.CheckConstraint("nominal > 0", name="ck_tagihan_nominal_positive"),
        sa.CheckConstraint("rating IS NULL OR rating BETWEEN 1 AND 5", name="ck_tagihan_rating_range"),
    )
    op.create_index("ix_tagihan_user_id", "tagihan", ["user_id"])
    op.create_index("ix_tagihan_mitra_id", "tagihan", ["mitra_id"])
    op.create_index("ix_tagihan_status", "tagihan", ["status"])

    op.create_table(
        "topup",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("nominal", sa.Integer(), nullable=False),
        sa.Column("payment_method", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("transaction_code", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_topup_user_id", "topup", ["user_id"])
    op.create_index("ix_topup_transaction_code", "topup", ["transaction_code"])

    op.create_table(
        "chat",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("sender_id", sa.String(), nullable=False),
        sa.Column("sender_type", sa.String(), nullable=False),
        sa.Column("receiver_id", sa.String(), nullable=False),
        sa.Column("receiver_type", sa.String(), nullable=False),
        sa.Column("message", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("read_by_sender", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("read_by_receiver", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_chat_sender_id", "chat", ["sender_id"])
    op.create_index("ix_chat_receiver_id", "chat", ["receiver_id"])
    op.create_index("ix_chat_created_at", "chat", ["created_at"])

    op.create_table(
        "mitra_session",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("sid", sa.String(), nullable=False),
        sa.Column("mitra_id", sa.Integer(), sa.ForeignKey("mitra.id"), nullable=False),
        sa.Column("role", sa.String(), nullable=False, server_default="mitra"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_mitra_session_sid", "mitra_session", ["sid"], unique=True)
    op.create_index("ix_mitra_session_mitra_id", "mitra_session", ["mitra_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("event", sa.String(), nullable=False),
        sa.Column("mitra_id", sa.Integer(), nullable=True),
        sa.Column("ip", sa.String(), nullable=True),
        sa.Column("detail", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_audit_logs_event", "audit_logs", ["event"])
    op.create_index("ix_audit_logs_mitra_id", "audit_logs", ["mitra_id"])

    op.create_table(
        "security_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("event", sa.String(), nullable=False),
        sa.Column("mitra_id", sa.Integer(), nullable=True),
        sa.Column("ip", sa.String(), nullable=True),
        sa.Column("endpoint", sa.String(), nullable=True),
        sa.Column("detail", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_security_logs_event", "security_logs", ["event"])
    op.create_index("ix_security_logs_mitra_id", "security_logs", ["mitra_id"])

    op.create_table(
        "error_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("mitra_id", sa.Integer(), nullable=True),
        sa.Column("endpoint", sa.String(), nullable=True),
        sa.Column("method", sa.String(), nullable=True),
        sa.Column("error_message", sa.String(), nullable=True),
        sa.Column("stack_trace", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_error_logs_mitra_id", "error_logs", ["mitra_id"])


def downgrade() -> None:
    for table in (
        "error_logs",
        "security_logs",
        "audit_logs",
        "mitra_session",
        "chat",
        "topup",
        "tagihan",
        "pelanggan",
        "layanan",
        "mitra",
    ):
        op.drop_table(table)
