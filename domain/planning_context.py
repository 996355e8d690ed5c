# domain/planning_context.py
from __future__ import annotations
from dataclasses import asdict, dataclass, field
from typing import Optional, Tuple

# Id reservado de la intervención sintética que agrupa las project_tasks heredadas.
# El formato __x__ no colisiona con los uuid reales de public.lots.
LEGACY_INTERVENTION_ID = "__project_tasks__"
LEGACY_INTERVENTION_NAME = "Tâches générales du projet"

TASK_STATUSES = ("todo", "in_progress", "done")


@dataclass(frozen=True)
class TaskSnapshot:
    id: str
    title: str
    status: str
    due_date: Optional[str]
    completed_at: Optional[str]
    is_late: bool
    delay_days: int


@dataclass(frozen=True)
class InterventionSnapshot:
    id: str
    name: str
    lot_type: Optional[str]
    status: str
    start_date: Optional[str]
    end_date: Optional[str]
    progress_percent: int
    company_name: Optional[str]
    budget_estimated: float
    budget_actual: float
    tasks: Tuple[TaskSnapshot, ...] = field(default_factory=tuple)

    @property
    def is_synthetic(self) -> bool:
        return self.id == LEGACY_INTERVENTION_ID


@dataclass(frozen=True)
class ProjectSummary:
    id: str
    name: str
    type: Optional[str]
    status: Optional[str]
    address: Optional[str]
    city: Optional[str]
    budget_total: Optional[float]
    created_at: Optional[str]


@dataclass(frozen=True)
class PlanningStats:
    total_interventions: int
    total_tasks: int
    tasks_done: int
    tasks_in_progress: int
    tasks_todo: int
    tasks_late: int
    overall_progress_percent: int
    intervention_types: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ProjectPlanningContext:
    """Foto inmutable del estado de planificación de un proyecto."""
    project: ProjectSummary
    interventions: Tuple[InterventionSnapshot, ...]
    stats: PlanningStats
    snapshot_date: str  # ISO-8601 UTC, instante de captura
    # Niveles cuya lectura expiró (p. ej. "lot_tasks"); vacío en una foto completa
    incomplete_sources: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        # asdict convierte las tuplas anidadas en tuplas de dicts; JSON las acepta como listas
        d = asdict(self)
        d["interventions"] = [dict(i, tasks=list(i["tasks"])) for i in d["interventions"]]
        d["stats"]["intervention_types"] = list(d["stats"]["intervention_types"])
        d["incomplete_sources"] = list(d["incomplete_sources"])
        return d
