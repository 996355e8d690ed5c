from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional

import pandas as pd
import pytest

from application.planning.pipeline import PlanningContextPipeline
from domain.planning_context import (
    InterventionSnapshot,
    ProjectPlanningContext,
    ProjectSummary,
    TaskSnapshot,
)
from domain.stats import compute_stats
from interface_adapters.repositories.source_repository import (
    LOT_COLS,
    LOT_TASK_COLS,
    PHASE_COLS,
    PROJECT_COLS,
    PROJECT_TASK_COLS,
)

FIXED_NOW = datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)
PROJECT_ID = "11111111-1111-1111-1111-111111111111"


class FakeSourceRepository:
    """Repositorio en memoria con la misma superficie que SourceRepository."""

    def __init__(
        self,
        project: Optional[dict] = None,
        phases: Iterable[dict] = (),
        lots: Iterable[dict] = (),
        lot_tasks: Iterable[dict] = (),
        project_tasks: Iterable[dict] = (),
        delays: Optional[Dict[str, float]] = None,
        errors: Optional[Dict[str, Exception]] = None,
    ) -> None:
        self.project = project
        self.phases = list(phases)
        self.lots = list(lots)
        self.lot_tasks = list(lot_tasks)
        self.project_tasks = list(project_tasks)
        self.delays = delays or {}
        self.errors = errors or {}
        self.calls = []

    def _frame(self, name: str, rows, cols) -> pd.DataFrame:
        self.calls.append(name)
        if name in self.delays:
            time.sleep(self.delays[name])
        if name in self.errors:
            raise self.errors[name]
        return pd.DataFrame(list(rows), columns=cols)

    def fetch_project(self, project_id: str) -> pd.DataFrame:
        rows = [self.project] if self.project and self.project["id"] == project_id else []
        return self._frame("projects", rows, PROJECT_COLS)

    def fetch_phases(self, project_id: str) -> pd.DataFrame:
        return self._frame("phases", [{"id": p["id"]} for p in self.phases], PHASE_COLS)

    def fetch_lots(self, phase_ids) -> pd.DataFrame:
        return self._frame("lots", [l for l in self.lots if l["phase_id"] in phase_ids], LOT_COLS)

    def fetch_lot_tasks(self, lot_ids) -> pd.DataFrame:
        rows = sorted((t for t in self.lot_tasks if t["lot_id"] in lot_ids), key=lambda t: t.get("order_index", 0))
        return self._frame("lot_tasks", rows, LOT_TASK_COLS)

    def fetch_project_tasks(self, project_id: str) -> pd.DataFrame:
        return self._frame("project_tasks", self.project_tasks, PROJECT_TASK_COLS)


def project_row(**overrides) -> dict:
    row = {
        "id": PROJECT_ID,
        "name": "Rénovation appartement Dupont",
        "project_type": "renovation",
        "status": "en_cours",
        "address": "12 rue des Lilas",
        "city": "Lyon",
        "budget_total": 85000,
        "created_at": "2024-11-02T08:30:00+00:00",
    }
    row.update(overrides)
    return row


def lot_row(lot_id: str, phase_id: str = "phase-1", **overrides) -> dict:
    row = {
        "id": lot_id,
        "phase_id": phase_id,
        "name": "Électricité",
        "description": None,
        "lot_type": "Électricité",
        "company_name": "Elec Pro",
        "start_date": "2025-01-06",
        "end_date": "2025-01-31",
        "budget_estimated": 12000,
        "budget_actual": None,
        "status": "en_cours",
        "progress_percentage": 0,
    }
    row.update(overrides)
    return row


def task_row(task_id: str, lot_id: str, status: str, due_date, completed_at=None, order_index: int = 0) -> dict:
    return {
        "id": task_id,
        "lot_id": lot_id,
        "title": f"Tâche {task_id}",
        "description": None,
        "status": status,
        "due_date": due_date,
        "completed_at": completed_at,
        "order_index": order_index,
    }


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def make_pipeline():
    def _make(repo, timeout_s: float = 2.0, clock=lambda: FIXED_NOW, max_workers: int = 4) -> PlanningContextPipeline:
        return PlanningContextPipeline(repo, timeout_s=timeout_s, max_workers=max_workers, clock=clock)

    return _make


def make_task(task_id: str = "t1", status: str = "todo", due_date=None, is_late=False, delay_days=0,
              completed_at=None) -> TaskSnapshot:
    return TaskSnapshot(
        id=task_id,
        title=f"Tâche {task_id}",
        status=status,
        due_date=due_date,
        completed_at=completed_at,
        is_late=is_late,
        delay_days=delay_days,
    )


def make_intervention(intervention_id: str = "lot-1", tasks=(), **overrides) -> InterventionSnapshot:
    fields = dict(
        id=intervention_id,
        name="Plomberie",
        lot_type="Plomberie",
        status="en_cours",
        start_date="2025-01-06",
        end_date="2025-02-14",
        progress_percent=50,
        company_name="Hydro SARL",
        budget_estimated=8000.0,
        budget_actual=2500.5,
        tasks=tuple(tasks),
    )
    fields.update(overrides)
    return InterventionSnapshot(**fields)


def make_context(interventions=(), **project_overrides) -> ProjectPlanningContext:
    project = dict(
        id=PROJECT_ID,
        name="Rénovation appartement Dupont",
        type="renovation",
        status="en_cours",
        address="12 rue des Lilas",
        city="Lyon",
        budget_total=85000.0,
        created_at="2024-11-02T08:30:00+00:00",
    )
    project.update(project_overrides)
    interventions = tuple(interventions)
    return ProjectPlanningContext(
        project=ProjectSummary(**project),
        interventions=interventions,
        stats=compute_stats(interventions),
        snapshot_date="2025-01-15T10:00:00+00:00",
    )
