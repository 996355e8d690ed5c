# infrastructure/pg_gateway.py
from __future__ import annotations
import logging
from config.config import Config
from infrastructure.postgres.db import get_conn

logger = logging.getLogger(__name__)


class PostgresGateway:
    """
    Verifica que la BD de proyectos es alcanzable antes de montar el contexto.
    Nunca escribe: la sesión se abre en modo readonly.
    """

    def __init__(self, *, config: type[Config]) -> None:
        self.dbname = config.PG_DATABASE
        self.dsn = config.psycopg2_dsn()

    def test_connection(self) -> None:
        logger.info("Conectando a PostgreSQL db=%s…", self.dbname)
        with get_conn(self.dsn) as conn:
            cur = conn.cursor()
            cur.execute("SELECT 1")
            row = cur.fetchone()
            cur.close()
        if row is None or row[0] != 1:
            raise RuntimeError("SELECT 1 en PostgreSQL devolvió valor inesperado.")
        logger.info("Conexión a PostgreSQL OK.")
