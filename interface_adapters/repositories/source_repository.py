# interface_adapters/repositories/source_repository.py
from __future__ import annotations

import logging
from typing import Optional, Sequence

import pandas as pd
from psycopg2 import errors as pg_errors
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class SourceFetchError(RuntimeError):
    """Fallo de lectura en el origen (red / BD). Reintentable, a diferencia de 'no encontrado'."""

    def __init__(self, query: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"Lectura '{query}' fallida: {cause}")
        self.query = query
        self.cause = cause


class SourceTimeoutError(SourceFetchError):
    """La consulta superó el statement_timeout de PostgreSQL."""


PROJECT_COLS = ["id", "name", "project_type", "status", "address", "city", "budget_total", "created_at"]
PHASE_COLS = ["id"]
LOT_COLS = [
    "id", "phase_id", "name", "description", "lot_type", "company_name", "start_date", "end_date",
    "budget_estimated", "budget_actual", "status", "progress_percentage",
]
LOT_TASK_COLS = ["id", "lot_id", "title", "description", "status", "due_date", "completed_at", "order_index"]
PROJECT_TASK_COLS = ["id", "name", "status", "start_date", "end_date", "description", "completed_at"]


class SourceRepository:
    """
    Repositorio de lectura sobre la BD de proyectos (PostgreSQL):

      - public.projects
      - public.phases
      - public.lots            (interventions)
      - public.lot_tasks
      - public.project_tasks   (tareas planas heredadas, sin lot)

    Solo SELECT. Cada método devuelve un DataFrame (vacío si no hay filas).
    """

    def __init__(self, *, engine: Engine) -> None:
        self.engine = engine

    # ---------------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------------
    def _read(self, query: str, sql: str, params: dict) -> pd.DataFrame:
        try:
            return pd.read_sql(sql, self.engine, params=params)
        except (SQLAlchemyError, pd.errors.DatabaseError) as e:
            # pandas >= 2.2 re-lanza como DatabaseError con el error de SQLAlchemy en __cause__
            sa_error = e if isinstance(e, SQLAlchemyError) else e.__cause__
            if isinstance(getattr(sa_error, "orig", None), pg_errors.QueryCanceled):
                logger.warning("Lectura '%s' cancelada por statement_timeout.", query)
                raise SourceTimeoutError(query, e) from e
            logger.error("Lectura '%s' fallida: %s", query, e)
            raise SourceFetchError(query, e) from e

    # ---------------------------------------------------------------------
    # Consultas
    # ---------------------------------------------------------------------
    def fetch_project(self, project_id: str) -> pd.DataFrame:
        sql = """
        SELECT id::text AS id, name, project_type, status, address, city, budget_total, created_at
        FROM public.projects
        WHERE id::text = %(project_id)s
        LIMIT 1
        """
        return self._read("projects", sql, {"project_id": project_id})

    def fetch_phases(self, project_id: str) -> pd.DataFrame:
        sql = """
        SELECT id::text AS id
        FROM public.phases
        WHERE project_id::text = %(project_id)s
        """
        return self._read("phases", sql, {"project_id": project_id})

    def fetch_lots(self, phase_ids: Sequence[str]) -> pd.DataFrame:
        if not phase_ids:
            return pd.DataFrame(columns=LOT_COLS)
        sql = """
        SELECT
            l.id::text        AS id,
            l.phase_id::text  AS phase_id,
            l.name, l.description, l.lot_type, l.company_name,
            l.start_date, l.end_date,
            l.budget_estimated, l.budget_actual,
            l.status, l.progress_percentage
        FROM public.lots l
        WHERE l.phase_id::text = ANY(%(phase_ids)s)
        ORDER BY l.created_at ASC
        """
        return self._read("lots", sql, {"phase_ids": list(phase_ids)})

    def fetch_lot_tasks(self, lot_ids: Sequence[str]) -> pd.DataFrame:
        if not lot_ids:
            return pd.DataFrame(columns=LOT_TASK_COLS)
        sql = """
        SELECT
            t.id::text      AS id,
            t.lot_id::text  AS lot_id,
            t.title, t.description, t.status,
            t.due_date, t.completed_at, t.order_index
        FROM public.lot_tasks t
        WHERE t.lot_id::text = ANY(%(lot_ids)s)
        ORDER BY t.order_index ASC
        """
        return self._read("lot_tasks", sql, {"lot_ids": list(lot_ids)})

    def fetch_project_tasks(self, project_id: str) -> pd.DataFrame:
        sql = """
        SELECT id::text AS id, name, status, start_date, end_date, description, completed_at
        FROM public.project_tasks
        WHERE project_id::text = %(project_id)s
        ORDER BY start_date ASC
        """
        return self._read("project_tasks", sql, {"project_id": project_id})
