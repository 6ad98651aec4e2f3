from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from .config import settings


def database_url(raw: str) -> str:
    """URL bergaya Heroku/Supabase (postgres://, postgresql://) diarahkan ke psycopg3."""
    scheme, sep, rest = raw.strip().partition("://")
    if scheme in ("postgres", "postgresql"):
        return f"postgresql+psycopg://{rest}"
    return f"{scheme}{sep}{rest}"


def _engine_options(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {}
    options = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url:
        # Satu koneksi bersama: tabel in-memory terlihat oleh semua session (test)
        options["poolclass"] = StaticPool
    return options


DATABASE_URL = database_url(settings.database_url)
engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))


def get_db():
    with Session(engine) as session:
        yield session


def init_db():
    import smartcare.models  # noqa: F401

    SQLModel.metadata.create_all(engine)
