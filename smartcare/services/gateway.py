"""
Akses baris ke tabel portal: select/insert/update dengan filter kesamaan dan NULL,
urutan naik/turun, dan join dangkal untuk tampilan.

Setiap panggilan berdiri sendiri (commit per tulis, tanpa transaksi lintas tabel).
Kegagalan SQLAlchemy dicatat lalu dinaikkan sebagai GatewayError; state sebelumnya
tidak berubah karena session di-rollback.
"""
import logging
from contextlib import contextmanager
from typing import Any, Iterable, Sequence, TypeVar

from sqlalchemy import and_, or_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from smartcare.core.errors import GatewayError

log = logging.getLogger("smartcare.gateway")

M = TypeVar("M", bound=SQLModel)


def _column(model: type[SQLModel], name: str):
    # Kolom Core (bukan atribut ORM) supaya UPDATE bisa dijalankan langsung di koneksi
    try:
        return model.__table__.c[name]
    except KeyError:
        raise ValueError(f"{model.__name__} tidak punya kolom {name!r}") from None


def _where(
    model: type[SQLModel],
    eq: dict[str, Any] | None = None,
    is_null: Iterable[str] = (),
    in_: dict[str, Sequence[Any]] | None = None,
    any_of: Sequence[dict[str, Any]] | None = None,
) -> list:
    clauses = [_column(model, k) == v for k, v in (eq or {}).items()]
    clauses += [_column(model, k).is_(None) for k in is_null]
    clauses += [_column(model, k).in_(list(v)) for k, v in (in_ or {}).items()]
    if any_of:
        clauses.append(
            or_(*[and_(*[_column(model, k) == v for k, v in group.items()]) for group in any_of])
        )
    return clauses


class DataGateway:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, op: str, model: type[SQLModel], message: str | None = None):
        try:
            yield
        except SQLAlchemyError:
            self.db.rollback()
            log.exception("Gateway %s on %s failed", op, model.__name__)
            raise GatewayError(message) if message else GatewayError()

    def select(
        self,
        model: type[M],
        *,
        eq: dict[str, Any] | None = None,
        is_null: Iterable[str] = (),
        in_: dict[str, Sequence[Any]] | None = None,
        any_of: Sequence[dict[str, Any]] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        error: str | None = None,
    ) -> list[M]:
        if in_ is not None and any(len(v) == 0 for v in in_.values()):
            return []
        stmt = select(model).where(*_where(model, eq, is_null, in_, any_of))
        if order_by:
            col = _column(model, order_by)
            pk = _column(model, "id")
            # id sebagai pemecah seri untuk timestamp yang sama
            stmt = stmt.order_by(col.desc(), pk.desc()) if descending else stmt.order_by(col.asc(), pk.asc())
        if limit:
            stmt = stmt.limit(limit)
        with self._guard("select", model, error):
            return list(self.db.exec(stmt).all())

    def first(self, model: type[M], **kwargs) -> M | None:
        rows = self.select(model, limit=1, **kwargs)
        return rows[0] if rows else None

    def get(self, model: type[M], row_id: Any, error: str | None = None) -> M | None:
        with self._guard("get", model, error):
            return self.db.get(model, row_id)

    def insert(self, row: M, error: str | None = None) -> M:
        with self._guard("insert", type(row), error):
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        return row

    def update(
        self,
        model: type[SQLModel],
        values: dict[str, Any],
        *,
        eq: dict[str, Any] | None = None,
        is_null: Iterable[str] = (),
        in_: dict[str, Sequence[Any]] | None = None,
        where: Sequence[Any] = (),
        error: str | None = None,
    ) -> int:
        """
        UPDATE bersyarat; mengembalikan jumlah baris yang berubah. `where` menerima
        klausa Core tambahan (mis. NOT EXISTS) yang dievaluasi dalam statement yang sama.
        """
        if in_ is not None and any(len(v) == 0 for v in in_.values()):
            return 0
        clauses = _where(model, eq, is_null, in_) + list(where)
        stmt = update(model.__table__).where(*clauses).values(**values)
        with self._guard("update", model, error):
            result = self.db.connection().execute(stmt)
            self.db.commit()
        return result.rowcount or 0

    def increment(
        self,
        model: type[SQLModel],
        column: str,
        delta: int,
        *,
        eq: dict[str, Any],
        minimum: int | None = None,
        error: str | None = None,
    ) -> int:
        """
        Tambah/kurang atomik di sisi database. Dengan `minimum`, baris hanya berubah
        bila hasilnya tidak di bawah batas (saldo tidak pernah negatif).
        """
        col = _column(model, column)
        clauses = _where(model, eq)
        if minimum is not None:
            clauses.append(col + delta >= minimum)
        stmt = update(model.__table__).where(*clauses).values({col: col + delta})
        with self._guard("increment", model, error):
            result = self.db.connection().execute(stmt)
            self.db.commit()
        return result.rowcount or 0

    def refresh(self, row: M) -> M:
        with self._guard("refresh", type(row)):
            self.db.refresh(row)
        return row
