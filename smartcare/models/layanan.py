from sqlmodel import Field, SQLModel


class Layanan(SQLModel, table=True):
    """Katalog layanan; hanya dibaca untuk ditampilkan bersama pesanan."""

    __tablename__ = "layanan"
    id: int | None = Field(default=None, primary_key=True)
    nama_layanan: str
    description: str = ""


class Pelanggan(SQLModel, table=True):
    """Pemesan layanan. Baris dibuat oleh aplikasi pelanggan, bukan portal mitra."""

    __tablename__ = "pelanggan"
    id: int | None = Field(default=None, primary_key=True)
    nama: str
    email: str = Field(index=True)
