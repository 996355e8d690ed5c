# infrastructure/postgres/db.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional
import psycopg2
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine


@contextmanager
def get_conn(dsn: str) -> Iterator[psycopg2.extensions.connection]:
    """Conexión psycopg2 de solo lectura (comprobaciones de salud)."""
    conn = psycopg2.connect(dsn)
    conn.set_session(readonly=True)
    try:
        yield conn
    finally:
        conn.rollback()
        conn.close()


def get_engine(sa_dsn: str, statement_timeout_s: Optional[float] = None) -> Engine:
    """
    Engine SQLAlchemy (lecturas con pandas).

    Si se indica statement_timeout_s, PostgreSQL aborta las consultas que lo superen.
    """
    connect_args = {}
    if statement_timeout_s:
        connect_args["options"] = f"-c statement_timeout={int(statement_timeout_s * 1000)}"
    return create_engine(sa_dsn, pool_pre_ping=True, connect_args=connect_args)
