# domain/stats.py
from __future__ import annotations

import math
from typing import Iterable, List

from domain.planning_context import InterventionSnapshot, PlanningStats, TaskSnapshot


def progress_percent(done: int, total: int, fallback: int = 0) -> int:
    """Porcentaje done/total redondeado (.5 hacia arriba) y acotado a [0, 100]; `fallback` si no hay tareas."""
    if total <= 0:
        return fallback
    return max(0, min(100, int(math.floor(done / total * 100 + 0.5))))


def _distinct_labels(interventions: Iterable[InterventionSnapshot]) -> List[str]:
    # Orden de primera aparición; lot_type, o el nombre si no hay tipo
    seen: List[str] = []
    for i in interventions:
        label = i.lot_type or i.name
        if label and label not in seen:
            seen.append(label)
    return seen


def compute_stats(interventions: Iterable[InterventionSnapshot]) -> PlanningStats:
    interventions = tuple(interventions)
    tasks: List[TaskSnapshot] = [t for i in interventions for t in i.tasks]

    total = len(tasks)
    done = sum(1 for t in tasks if t.status == "done")

    return PlanningStats(
        total_interventions=len(interventions),
        total_tasks=total,
        tasks_done=done,
        tasks_in_progress=sum(1 for t in tasks if t.status == "in_progress"),
        tasks_todo=sum(1 for t in tasks if t.status == "todo"),
        tasks_late=sum(1 for t in tasks if t.is_late),
        overall_progress_percent=progress_percent(done, total),
        intervention_types=tuple(_distinct_labels(interventions)),
    )
