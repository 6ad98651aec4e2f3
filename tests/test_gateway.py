"""DataGateway: filters, ordering, conditional updates, and failure mapping."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from smartcare.core.database import engine
from smartcare.core.errors import GatewayError
from smartcare.models import Mitra, Tagihan, Topup
from smartcare.services.gateway import DataGateway


def _mitra(email: str, saldo: int = 0, status: str = "pending") -> Mitra:
    return Mitra(nama_toko=email.split("@")[0], email=email, hashed_password="x", saldo=saldo, status=status)


@pytest.fixture
def gw(client: TestClient):
    with Session(engine) as db:
        yield DataGateway(db)


def test_select_filters_and_orders(gw: DataGateway):
    for code, user_id, nominal in [("T1", "1", 10_000), ("T2", "2", 20_000), ("T3", "1", 30_000)]:
        gw.insert(Topup(user_id=user_id, nominal=nominal, payment_method="e_wallet", transaction_code=code))

    rows = gw.select(Topup, eq={"user_id": "1"}, order_by="nominal", descending=True)
    assert [r.transaction_code for r in rows] == ["T3", "T1"]

    rows = gw.select(Topup, order_by="nominal", limit=2)
    assert [r.transaction_code for r in rows] == ["T1", "T2"]

    rows = gw.select(Topup, any_of=[{"transaction_code": "T2"}, {"nominal": 30_000}], order_by="id")
    assert [r.transaction_code for r in rows] == ["T2", "T3"]


def test_select_with_empty_in_returns_nothing(gw: DataGateway):
    gw.insert(_mitra("a@x.com"))
    assert gw.select(Mitra, in_={"id": []}) == []
    assert gw.update(Mitra, {"saldo": 5}, in_={"id": []}) == 0


def test_is_null_filter(gw: DataGateway):
    gw.insert(Tagihan(nominal=1000))
    owner = gw.insert(_mitra("b@x.com"))
    gw.insert(Tagihan(nominal=2000, mitra_id=owner.id))
    rows = gw.select(Tagihan, is_null=("mitra_id",))
    assert [r.nominal for r in rows] == [1000]


def test_conditional_update_reports_rowcount(gw: DataGateway):
    row = gw.insert(_mitra("c@x.com"))
    assert gw.update(Mitra, {"status": "terverifikasi"}, eq={"id": row.id, "status": "pending"}) == 1
    # Predikat tidak lagi cocok: tidak ada baris yang berubah
    assert gw.update(Mitra, {"status": "ditolak"}, eq={"id": row.id, "status": "pending"}) == 0
    assert gw.refresh(row).status == "terverifikasi"


def test_increment_respects_minimum(gw: DataGateway):
    row = gw.insert(_mitra("d@x.com", saldo=1000))
    assert gw.increment(Mitra, "saldo", -1500, eq={"id": row.id}, minimum=0) == 0
    assert gw.refresh(row).saldo == 1000
    assert gw.increment(Mitra, "saldo", -1000, eq={"id": row.id}, minimum=0) == 1
    assert gw.refresh(row).saldo == 0
    assert gw.increment(Mitra, "saldo", 250, eq={"id": row.id}) == 1
    assert gw.refresh(row).saldo == 250


def test_unknown_column_is_programming_error(gw: DataGateway):
    with pytest.raises(ValueError):
        gw.select(Mitra, eq={"tidak_ada": 1})


class _BrokenSession:
    """Session palsu yang gagal di setiap query."""

    def __init__(self):
        self.rolled_back = False

    def exec(self, stmt):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    def get(self, model, row_id):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    def rollback(self):
        self.rolled_back = True


def test_database_failure_becomes_gateway_error():
    db = _BrokenSession()
    gw = DataGateway(db)
    with pytest.raises(GatewayError) as exc:
        gw.select(Mitra, error="Gagal memuat data.")
    assert exc.value.status_code == 503
    assert exc.value.detail == "Gagal memuat data."
    assert db.rolled_back


def test_gateway_error_has_default_message():
    with pytest.raises(GatewayError) as exc:
        DataGateway(_BrokenSession()).get(Mitra, 1)
    assert exc.value.detail == "Gagal menghubungi server. Silakan coba lagi."
