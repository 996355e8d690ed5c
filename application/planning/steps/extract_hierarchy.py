# application/planning/steps/extract_hierarchy.py
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pandas as pd

from interface_adapters.repositories.source_repository import (
    LOT_COLS,
    LOT_TASK_COLS,
    PROJECT_TASK_COLS,
    SourceRepository,
    SourceTimeoutError,
)

logger = logging.getLogger(__name__)

# Lecturas lanzadas a la vez al empezar: proyecto, phases y project_tasks heredadas
MIN_FETCH_WORKERS = 3


@dataclass
class ExtractOutput:
    project_id: str
    project: pd.Series
    lots: pd.DataFrame
    lot_tasks: pd.DataFrame
    project_tasks: pd.DataFrame

    # Niveles que expiraron y se trataron como vacíos
    incomplete_sources: Tuple[str, ...] = field(default_factory=tuple)


def _ids(df: Optional[pd.DataFrame]) -> List[str]:
    if df is None or df.empty or "id" not in df.columns:
        return []
    return df["id"].dropna().astype(str).tolist()


class ExtractHierarchyStep:
    """
    Lee proyecto → phases → lots → lot_tasks, y en paralelo las project_tasks heredadas.

    • Cada nivel espera a los ids de su padre; lo que no depende de nada se lanza a la vez.
    • Timeout por lectura: el nivel se trata como vacío (y se anota en incomplete_sources).
      Si expira la lectura del proyecto → None.
    • Cualquier otro fallo del origen (SourceFetchError) se propaga tal cual.
    """

    def __init__(self, repo: SourceRepository, *, timeout_s: float = 10.0, max_workers: int = 4) -> None:
        self.repo = repo
        self.timeout_s = timeout_s
        # El reloj de cada lectura corre desde _await: lots no puede quedar en cola tras las heredadas
        self.max_workers = max(MIN_FETCH_WORKERS, max_workers)

    def _await(self, name: str, future: Future, incomplete: List[str]) -> Optional[pd.DataFrame]:
        try:
            return future.result(timeout=self.timeout_s)
        except (FuturesTimeout, SourceTimeoutError):
            future.cancel()
            logger.warning("Lectura '%s' expirada tras %.1fs; se trata como vacía.", name, self.timeout_s)
            incomplete.append(name)
            return None

    def run(self, project_id: str) -> Optional[ExtractOutput]:
        incomplete: List[str] = []
        pool = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="planning-fetch")
        try:
            f_project = pool.submit(self.repo.fetch_project, project_id)
            f_phases = pool.submit(self.repo.fetch_phases, project_id)
            f_legacy = pool.submit(self.repo.fetch_project_tasks, project_id)

            project = self._await("projects", f_project, incomplete)
            if project is None or project.empty:
                logger.info("Proyecto %s no encontrado (o lectura expirada).", project_id)
                return None

            phases = self._await("phases", f_phases, incomplete)
            phase_ids = _ids(phases)

            lots = pd.DataFrame(columns=LOT_COLS)
            lot_tasks = pd.DataFrame(columns=LOT_TASK_COLS)
            if phase_ids:
                lots = self._await("lots", pool.submit(self.repo.fetch_lots, phase_ids), incomplete)
                if lots is None:
                    lots = pd.DataFrame(columns=LOT_COLS)
                lot_ids = _ids(lots)
                if lot_ids:
                    lot_tasks = self._await("lot_tasks", pool.submit(self.repo.fetch_lot_tasks, lot_ids), incomplete)
                    if lot_tasks is None:
                        lot_tasks = pd.DataFrame(columns=LOT_TASK_COLS)

            project_tasks = self._await("project_tasks", f_legacy, incomplete)
            if project_tasks is None:
                project_tasks = pd.DataFrame(columns=PROJECT_TASK_COLS)
        finally:
            # Las lecturas abandonadas no dejan estado: no se persiste nada
            pool.shutdown(wait=False, cancel_futures=True)

        return ExtractOutput(
            project_id=project_id,
            project=project.iloc[0],
            lots=lots,
            lot_tasks=lot_tasks,
            project_tasks=project_tasks,
            incomplete_sources=tuple(incomplete),
        )
