# application/planning/steps/build_snapshot.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Tuple

import pandas as pd

from application.planning.steps.transform_hierarchy import cell_number, cell_text
from domain.planning_context import InterventionSnapshot, ProjectPlanningContext, ProjectSummary
from domain.stats import compute_stats


def _snapshot_date(now: datetime) -> str:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).isoformat()


class BuildSnapshotStep:
    """Proyecto + intervenciones + stats + instante de captura → ProjectPlanningContext."""

    @staticmethod
    def project_summary(row: pd.Series) -> ProjectSummary:
        budget = cell_number(row.get("budget_total"), default=None)
        return ProjectSummary(
            id=str(row["id"]),
            name=cell_text(row.get("name")) or "",
            type=cell_text(row.get("project_type")),
            status=cell_text(row.get("status")),
            address=cell_text(row.get("address")),
            city=cell_text(row.get("city")),
            # 0 / vacío se considera "sin presupuesto"
            budget_total=budget if budget else None,
            created_at=cell_text(row.get("created_at")),
        )

    def run(
        self,
        project_row: pd.Series,
        interventions: Iterable[InterventionSnapshot],
        now: datetime,
        incomplete_sources: Tuple[str, ...] = (),
    ) -> ProjectPlanningContext:
        interventions = tuple(interventions)
        return ProjectPlanningContext(
            project=self.project_summary(project_row),
            interventions=interventions,
            stats=compute_stats(interventions),
            snapshot_date=_snapshot_date(now),
            incomplete_sources=tuple(incomplete_sources),
        )
