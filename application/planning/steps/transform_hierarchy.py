# application/planning/steps/transform_hierarchy.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from application.planning.steps.extract_hierarchy import ExtractOutput
from domain.lateness import compute_lateness, parse_date
from domain.planning_context import (
    LEGACY_INTERVENTION_ID,
    LEGACY_INTERVENTION_NAME,
    InterventionSnapshot,
    TaskSnapshot,
)
from domain.stats import progress_percent


# ───────── util: celdas de pandas → valores planos ─────────
def _is_missing(v: Any) -> bool:
    if v is None:
        return True
    try:
        return bool(pd.isna(v))
    except (TypeError, ValueError):
        return False


def cell_text(v: Any) -> Optional[str]:
    """Texto limpio; fechas a ISO (YYYY-MM-DD si no llevan hora). NaN/NaT/'' → None."""
    if _is_missing(v):
        return None
    if isinstance(v, pd.Timestamp):
        v = v.to_pydatetime()
    if isinstance(v, datetime):
        if v.tzinfo is None and v.time() == time(0):
            return v.date().isoformat()
        return v.isoformat()
    if isinstance(v, date):
        return v.isoformat()
    s = str(v).strip()
    return s or None


def cell_number(v: Any, default: Optional[float] = 0.0) -> Optional[float]:
    if _is_missing(v):
        return default
    n = pd.to_numeric(v, errors="coerce")
    return default if pd.isna(n) else float(n)


@dataclass
class TransformOutput:
    interventions: Tuple[InterventionSnapshot, ...]


class TransformHierarchyStep:
    """
    Convierte las filas leídas en intervenciones inmutables:
      • agrupa lot_tasks por lot_id (orden de order_index preservado),
      • deriva el retraso de cada tarea con un `now` explícito,
      • progreso por intervención = done/total (progress_percentage guardado solo si no hay tareas),
      • añade la intervención sintética con las project_tasks heredadas, si las hay.
    Nada se muta: los DataFrames de entrada quedan intactos.
    """

    def run(self, ext: ExtractOutput, now: datetime) -> TransformOutput:
        tasks_by_lot = self._group_tasks(ext.lot_tasks, now)
        interventions = [
            self._intervention(lot, tasks_by_lot.get(str(lot["id"]), ()))
            for lot in ext.lots.to_dict("records")
        ]
        legacy = self._legacy_intervention(ext.project_tasks, now)
        if legacy is not None:
            interventions.append(legacy)
        return TransformOutput(interventions=tuple(interventions))

    # ────────────────────────────────────────────────────────────────────
    # Tareas
    # ────────────────────────────────────────────────────────────────────
    @staticmethod
    def _task(row: Dict[str, Any], title_col: str, due: Any, now: datetime) -> TaskSnapshot:
        status = cell_text(row.get("status")) or "todo"
        completed_at = cell_text(row.get("completed_at"))
        lateness = compute_lateness(due, row.get("completed_at"), status, now)
        return TaskSnapshot(
            id=str(row["id"]),
            title=cell_text(row.get(title_col)) or "",
            status=status,
            due_date=cell_text(due),
            completed_at=completed_at,
            is_late=lateness.is_late,
            delay_days=lateness.delay_days,
        )

    def _group_tasks(self, lot_tasks: pd.DataFrame, now: datetime) -> Dict[str, Tuple[TaskSnapshot, ...]]:
        if lot_tasks.empty:
            return {}
        return {
            str(lot_id): tuple(self._task(r, "title", r.get("due_date"), now) for r in group.to_dict("records"))
            for lot_id, group in lot_tasks.groupby("lot_id", sort=False)
        }

    # ────────────────────────────────────────────────────────────────────
    # Intervenciones
    # ────────────────────────────────────────────────────────────────────
    @staticmethod
    def _intervention(lot: Dict[str, Any], tasks: Tuple[TaskSnapshot, ...]) -> InterventionSnapshot:
        done = sum(1 for t in tasks if t.status == "done")
        stored = int(cell_number(lot.get("progress_percentage")) or 0)
        return InterventionSnapshot(
            id=str(lot["id"]),
            name=cell_text(lot.get("name")) or "",
            lot_type=cell_text(lot.get("lot_type")),
            status=cell_text(lot.get("status")) or "planifie",
            start_date=cell_text(lot.get("start_date")),
            end_date=cell_text(lot.get("end_date")),
            progress_percent=progress_percent(done, len(tasks), fallback=max(0, min(100, stored))),
            company_name=cell_text(lot.get("company_name")),
            budget_estimated=cell_number(lot.get("budget_estimated")),
            budget_actual=cell_number(lot.get("budget_actual")),
            tasks=tasks,
        )

    def _legacy_intervention(self, project_tasks: pd.DataFrame, now: datetime) -> Optional[InterventionSnapshot]:
        if project_tasks.empty:
            return None

        rows = project_tasks.to_dict("records")
        # Vencimiento de una tarea plana: end_date, o start_date si no hay fin
        tasks = tuple(
            self._task(r, "name", r.get("end_date") if not _is_missing(r.get("end_date")) else r.get("start_date"), now)
            for r in rows
        )
        done = sum(1 for t in tasks if t.status == "done")

        starts: List[date] = [d for d in (parse_date(r.get("start_date")) for r in rows) if d is not None]
        ends: List[date] = [d for d in (parse_date(r.get("end_date")) for r in rows) if d is not None]

        return InterventionSnapshot(
            id=LEGACY_INTERVENTION_ID,
            name=LEGACY_INTERVENTION_NAME,
            lot_type=None,
            status="termine" if done == len(tasks) else "en_cours",
            start_date=min(starts).isoformat() if starts else None,
            end_date=max(ends).isoformat() if ends else None,
            progress_percent=progress_percent(done, len(tasks)),
            company_name=None,
            budget_estimated=0.0,
            budget_actual=0.0,
            tasks=tasks,
        )
