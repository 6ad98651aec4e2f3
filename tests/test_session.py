"""Server-side session store."""
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from smartcare.core.database import engine
from smartcare.core.security import sign_session
from smartcare.models import Mitra
from smartcare.services.session import ROLE_MITRA, clear_session, get_current_user, set_session


@pytest.fixture
def db(client: TestClient):
    with Session(engine) as session:
        yield session


@pytest.fixture
def mitra(db: Session) -> Mitra:
    row = Mitra(nama_toko="Toko Sesi", email="sesi@example.com", hashed_password="x")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def test_session_roundtrip(db: Session, mitra: Mitra):
    token = set_session(db, ROLE_MITRA, mitra)
    user = get_current_user(db, token)
    assert user is not None
    assert user.id == mitra.id


def test_role_is_read_from_server_row(db: Session, mitra: Mitra):
    token = set_session(db, "admin", mitra)
    assert get_current_user(db, token, role=ROLE_MITRA) is None
    assert get_current_user(db, token, role="admin").id == mitra.id


def test_token_without_session_row_is_rejected(db: Session, mitra: Mitra):
    # Token bertanda tangan sah, tetapi sid tidak pernah dibuat di server
    token = sign_session("karangan", mitra.id, ROLE_MITRA)
    assert get_current_user(db, token) is None


def test_clear_session(db: Session, mitra: Mitra):
    token = set_session(db, ROLE_MITRA, mitra)
    other = set_session(db, ROLE_MITRA, mitra)
    assert clear_session(db, token) == mitra.id
    assert get_current_user(db, token) is None
    assert clear_session(db, token) is None
    # Sesi lain milik akun yang sama tetap aktif
    assert get_current_user(db, other).id == mitra.id


def test_missing_or_garbage_token(db: Session):
    assert get_current_user(db, None) is None
    assert get_current_user(db, "sampah") is None
    assert clear_session(db, None) is None
