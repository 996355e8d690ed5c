# config/config.py

from __future__ import annotations
import os
from dataclasses import dataclass
from dotenv import load_dotenv
from sqlalchemy.engine import make_url

# Carga .env en el momento de importar este módulo
# (antes de evaluar os.getenv de abajo)
load_dotenv(dotenv_path=".env")

@dataclass
class Config:
    # Credenciales de la BD de proyectos (solo lectura)
    PG_SERVER: str = os.getenv("PG_SERVER", "localhost")
    PG_PORT: int = int(os.getenv("PG_PORT", "5432"))
    PG_USER: str = os.getenv("PG_USER", "postgres")
    PG_PASSWORD: str = os.getenv("PG_PASSWORD", "")
    PG_DATABASE: str = os.getenv("PG_DATABASE", "postgres")

    # Override opcional (DSN explícito para SQLAlchemy)
    PG_DSN: str | None = os.getenv("PG_DSN")

    # Lecturas: timeout por consulta (segundos) y paralelismo
    FETCH_TIMEOUT_S: float = float(os.getenv("FETCH_TIMEOUT_S", "10"))
    FETCH_MAX_WORKERS: int = int(os.getenv("FETCH_MAX_WORKERS", "4"))

    # Límites del texto serializado que se inyecta en el prompt
    SNAPSHOT_MAX_INTERVENTIONS: int = int(os.getenv("SNAPSHOT_MAX_INTERVENTIONS", "40"))
    SNAPSHOT_MAX_TASKS_PER_INTERVENTION: int = int(os.getenv("SNAPSHOT_MAX_TASKS_PER_INTERVENTION", "30"))
    SNAPSHOT_MAX_FIELD_CHARS: int = int(os.getenv("SNAPSHOT_MAX_FIELD_CHARS", "200"))

    @classmethod
    def psycopg2_dsn(cls) -> str:
        c = cls()
        if c.PG_DSN:
            # Misma BD que SQLAlchemy: se quita el sufijo de driver (+psycopg2)
            url = make_url(c.PG_DSN)
            return url.set(drivername=url.get_backend_name()).render_as_string(hide_password=False)
        return f"postgresql://{c.PG_USER}:{c.PG_PASSWORD}@{c.PG_SERVER}:{c.PG_PORT}/{c.PG_DATABASE}"

    @classmethod
    def sqlalchemy_dsn(cls) -> str:
        c = cls()
        if c.PG_DSN:
            return c.PG_DSN
        return f"postgresql+psycopg2://{c.PG_USER}:{c.PG_PASSWORD}@{c.PG_SERVER}:{c.PG_PORT}/{c.PG_DATABASE}"
