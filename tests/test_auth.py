"""Auth: register, login, logout, protected pages."""
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from conftest import bearer, login, register
from smartcare.core.database import engine
from smartcare.models import Mitra, MitraSession, SecurityLog
from smartcare.services.gateway import DataGateway


def _count(model) -> int:
    with Session(engine) as db:
        return len(db.exec(select(model)).all())


def test_register_success(client: TestClient):
    r = register(client, email="Baru@Example.com", nama_toko="Toko Baru")
    assert r.status_code == 200
    j = r.json()
    assert j["email"] == "baru@example.com"
    assert j["nama_toko"] == "Toko Baru"
    assert j["status"] == "pending"
    assert j["saldo"] == 0
    assert "hashed_password" not in j


def test_register_duplicate_email_rejected_before_insert(client: TestClient, monkeypatch):
    assert register(client).status_code == 200

    inserted = []
    original = DataGateway.insert

    def spy(self, row, error=None):
        inserted.append(row)
        return original(self, row, error=error)

    monkeypatch.setattr(DataGateway, "insert", spy)
    r = register(client, email="A@X.com", nama_toko="Toko Kembar")
    assert r.status_code == 400
    assert r.json()["error"] == "Email sudah digunakan."
    assert not [row for row in inserted if isinstance(row, Mitra)]
    assert _count(Mitra) == 1


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"confirm_password": "password2"}, "Password dan konfirmasi password tidak cocok."),
        ({"password": "abc", "confirm_password": "abc"}, "Password minimal 6 karakter."),
        ({"alamat": ""}, "Silakan lengkapi semua field."),
        ({"nama_toko": "   "}, "Silakan lengkapi semua field."),
        ({"email": "bukan-email"}, "Format email tidak valid."),
    ],
)
def test_register_validation(client: TestClient, overrides, message):
    r = register(client, **overrides)
    assert r.status_code == 422
    assert r.json()["error"] == message
    assert _count(Mitra) == 0


def test_register_without_confirm_password(client: TestClient):
    r = client.post(
        "/register",
        data={
            "nama_toko": "Toko Tanpa Konfirmasi",
            "email": "tanpa@example.com",
            "password": "password1",
            "alamat": "Jl. Sudirman 2",
            "phone_number": "08111",
        },
    )
    assert r.status_code == 200


def test_login_success_opens_dashboard(client: TestClient):
    register(client)
    r = login(client, "A@x.com")
    assert r.status_code == 200
    j = r.json()
    assert j["role"] == "mitra"
    assert j["redirect"] == "/dashboard-mitra"
    assert j["user"]["email"] == "a@x.com"

    r = client.get("/dashboard-mitra", headers=bearer(j["access_token"]))
    assert r.status_code == 200
    d = r.json()
    assert d["mitra"]["nama_toko"] == "Toko A"
    assert d["saldo_label"] == "Rp 0"
    assert d["status_badge"]["label"] == "Menunggu Verifikasi"
    assert [m["path"] for m in d["menu"]][:2] == ["/profil-mitra", "/status-verifikasi"]


def test_login_wrong_password_creates_no_session(client: TestClient):
    register(client)
    r = login(client, "a@x.com", "salah-total")
    assert r.status_code == 401
    assert r.json()["error"] == "Email atau kata sandi salah."
    assert _count(MitraSession) == 0
    with Session(engine) as db:
        events = db.exec(select(SecurityLog).where(SecurityLog.event == "failed_login")).all()
    assert len(events) == 1


def test_login_unknown_email(client: TestClient):
    r = login(client, "tidak-ada@example.com")
    assert r.status_code == 401


def test_logout_revokes_session(client: TestClient):
    register(client)
    token = login(client, "a@x.com").json()["access_token"]
    r = client.post("/logout", headers=bearer(token))
    assert r.status_code == 200
    assert r.json()["redirect"] == "/login"

    r = client.get("/dashboard-mitra", headers=bearer(token))
    assert r.status_code == 401
    assert r.json()["redirect"] == "/login"


def test_logout_without_session(client: TestClient):
    r = client.post("/logout")
    assert r.status_code == 401


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/dashboard-mitra"),
        ("get", "/dashboard-mitra/pesanan-masuk"),
        ("get", "/profil-mitra"),
        ("get", "/status-verifikasi"),
        ("get", "/topup-saldo"),
        ("get", "/riwayat-transaksi"),
        ("get", "/live-chat"),
        ("post", "/pesanan/1/terima"),
    ],
)
def test_protected_pages_redirect_to_login(client: TestClient, method, path):
    r = getattr(client, method)(path)
    assert r.status_code == 401
    j = r.json()
    assert j["redirect"] == "/login"
    assert j["error"] == "Silakan login terlebih dahulu."


def test_forged_token_is_rejected(client: TestClient):
    r = client.get("/dashboard-mitra", headers=bearer("bukan.token.valid"))
    assert r.status_code == 401
    assert r.json()["redirect"] == "/login"
