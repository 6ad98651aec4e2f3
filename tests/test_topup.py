"""Top up requests and transaction history."""
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlmodel import Session, select

from conftest import set_saldo
from smartcare.core.database import engine
from smartcare.models import Topup


def _topups() -> list[Topup]:
    with Session(engine) as db:
        return list(db.exec(select(Topup)).all())


def test_topup_page(client: TestClient, new_mitra):
    mitra_id, headers = new_mitra()
    set_saldo(mitra_id, 1_250_000)
    r = client.get("/topup-saldo", headers=headers)
    assert r.status_code == 200
    j = r.json()
    assert j["saldo_label"] == "Rp 1.250.000"
    assert j["minimum"] == 10_000
    assert 50_000 in j["predefined_amounts"]
    assert {"value": "bank_transfer", "label": "Transfer Bank"} in j["payment_methods"]


def test_topup_request_created_pending(client: TestClient, new_mitra):
    mitra_id, headers = new_mitra()
    r = client.post("/topup-saldo", json={"nominal": 100_000, "payment_method": "e_wallet"}, headers=headers)
    assert r.status_code == 200
    j = r.json()
    code = j["topup"]["transaction_code"]
    assert code.startswith("TOP")
    assert code[3:].isdigit()
    assert code in j["message"]
    assert "Rp 100.000" in j["message"]
    assert j["topup"]["status"] == "pending"
    assert j["topup"]["user_id"] == str(mitra_id)

    rows = _topups()
    assert len(rows) == 1
    assert rows[0].nominal == 100_000
    # Saldo baru berubah setelah konfirmasi di luar portal
    assert client.get("/topup-saldo", headers=headers).json()["saldo"] == 0


def test_topup_below_minimum_rejected(client: TestClient, auth_headers):
    r = client.post("/topup-saldo", json={"nominal": 5_000, "payment_method": "bank_transfer"}, headers=auth_headers)
    assert r.status_code == 422
    assert r.json()["error"] == "Nominal minimal Rp 10.000."
    assert _topups() == []


def test_topup_missing_fields(client: TestClient, auth_headers):
    r = client.post("/topup-saldo", json={"nominal": 50_000}, headers=auth_headers)
    assert r.status_code == 422
    assert r.json()["error"] == "Silakan lengkapi semua field."
    r = client.post("/topup-saldo", json={"payment_method": "bank_transfer"}, headers=auth_headers)
    assert r.json()["error"] == "Silakan lengkapi semua field."


def test_topup_unknown_method(client: TestClient, auth_headers):
    r = client.post("/topup-saldo", json={"nominal": 50_000, "payment_method": "barter"}, headers=auth_headers)
    assert r.status_code == 422
    assert r.json()["error"] == "Metode pembayaran tidak dikenal."


def test_topup_nominal_not_a_number(client: TestClient, auth_headers):
    r = client.post("/topup-saldo", json={"nominal": "seratus", "payment_method": "e_wallet"}, headers=auth_headers)
    assert r.status_code == 422
    assert r.json()["error"] == "Nominal harus berupa angka."


def test_topup_database_failure_returns_503(client: TestClient, auth_headers, monkeypatch):
    original = Session.add

    def failing_add(self, instance, *args, **kwargs):
        if isinstance(instance, Topup):
            raise OperationalError("INSERT", {}, Exception("server down"))
        return original(self, instance, *args, **kwargs)

    monkeypatch.setattr(Session, "add", failing_add)
    r = client.post("/topup-saldo", json={"nominal": 50_000, "payment_method": "e_wallet"}, headers=auth_headers)
    assert r.status_code == 503
    assert r.json()["error"] == "Gagal mengirim permintaan top up."
    monkeypatch.undo()
    assert _topups() == []


def test_history_lists_own_topups(client: TestClient, new_mitra):
    mitra_id, headers = new_mitra("riwayat@example.com")
    _, other = new_mitra("lain@example.com", "Toko Lain")
    client.post("/topup-saldo", json={"nominal": 20_000, "payment_method": "e_wallet"}, headers=headers)
    client.post("/topup-saldo", json={"nominal": 30_000, "payment_method": "bank_transfer"}, headers=headers)
    client.post("/topup-saldo", json={"nominal": 99_000, "payment_method": "bank_transfer"}, headers=other)
    with Session(engine) as db:
        # Baris lama dengan email sebagai user_id
        db.add(Topup(user_id="riwayat@example.com", nominal=15_000, payment_method="bank_transfer",
                     status="completed", transaction_code="TOP1"))
        db.commit()

    r = client.get("/riwayat-transaksi", headers=headers)
    assert r.status_code == 200
    j = r.json()
    assert j["active_tab"] == "topup"
    assert j["counts"] == {"topup": 3, "pesanan": 0}
    # Terbaru dulu
    assert [t["nominal"] for t in j["topup"]] == [15_000, 30_000, 20_000]
    assert j["topup"][0]["status_badge"]["label"] == "Berhasil"
    assert j["topup"][1]["payment_method_label"] == "Transfer Bank"


def test_history_tab_selection(client: TestClient, auth_headers):
    r = client.get("/riwayat-transaksi?tab=pesanan", headers=auth_headers)
    assert r.json()["active_tab"] == "pesanan"
    r = client.get("/riwayat-transaksi?tab=lainnya", headers=auth_headers)
    assert r.status_code == 422
    assert r.json()["error"] == "Tab riwayat tidak dikenal (gunakan topup atau pesanan)."
