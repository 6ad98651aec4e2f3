"""Pytest fixtures: test client, in-memory SQLite, akun mitra yang sudah login."""
import os

import pytest
from fastapi.testclient import TestClient

# Harus di-set sebelum aplikasi di-import
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ADMIN_SECRET", "test-admin-secret")
os.environ.setdefault("TIMEZONE", "Asia/Jakarta")
# Limit tinggi supaya semua test bisa mendaftar/login berulang kali
os.environ.setdefault("RATE_LIMIT_REGISTER_PER_MINUTE", "1000")
os.environ.setdefault("RATE_LIMIT_LOGIN", "1000/minute")
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "1000")

from sqlmodel import Session, SQLModel

from smartcare.core.database import engine
from smartcare.core.rate_limit import limiter
from smartcare.main import app
from smartcare.models import Layanan, Mitra, Pelanggan, Tagihan

ADMIN_HEADERS = {"X-Admin-Secret": "test-admin-secret"}


def register(client: TestClient, **overrides):
    data = {
        "nama_toko": "Toko A",
        "email": "a@x.com",
        "password": "password1",
        "confirm_password": "password1",
        "alamat": "Jl. Merdeka 1, Bandung",
        "phone_number": "081234567890",
    }
    data.update(overrides)
    return client.post("/register", data=data)


def login(client: TestClient, email: str, password: str = "password1"):
    return client.post("/login", data={"email": email, "password": password})


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def client():
    """TestClient dengan database kosong di setiap test."""
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    limiter.reset()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def new_mitra(client: TestClient):
    """Factory: daftar + login, mengembalikan (mitra_id, headers)."""

    def _make(email: str = "toko@example.com", nama_toko: str = "Toko Sejahtera"):
        r = register(client, email=email, nama_toko=nama_toko)
        assert r.status_code == 200, r.text
        r = login(client, email)
        assert r.status_code == 200, r.text
        return r.json()["user"]["id"], bearer(r.json()["access_token"])

    return _make


@pytest.fixture
def auth_headers(new_mitra):
    return new_mitra()[1]


def set_saldo(mitra_id: int, saldo: int) -> None:
    with Session(engine) as db:
        mitra = db.get(Mitra, mitra_id)
        mitra.saldo = saldo
        db.add(mitra)
        db.commit()


def get_row(model, row_id):
    with Session(engine) as db:
        row = db.get(model, row_id)
        if row is not None:
            db.expunge(row)
        return row


@pytest.fixture
def make_order(client: TestClient):
    """Factory pesanan pending (dibuat aplikasi pelanggan, di luar portal)."""

    def _make(nominal: int = 150_000, **fields) -> int:
        with Session(engine) as db:
            layanan = Layanan(nama_layanan="Cuci AC", description="Cuci AC split 1 PK")
            pelanggan = Pelanggan(nama="Budi", email="budi@example.com")
            db.add(layanan)
            db.add(pelanggan)
            db.commit()
            order = Tagihan(
                user_id=pelanggan.id,
                layanan_id=layanan.id,
                nominal=nominal,
                **fields,
            )
            db.add(order)
            db.commit()
            return order.id

    return _make
