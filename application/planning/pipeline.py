# application/planning/pipeline.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from application.planning.steps.build_snapshot import BuildSnapshotStep
from application.planning.steps.extract_hierarchy import ExtractHierarchyStep, ExtractOutput
from application.planning.steps.transform_hierarchy import TransformHierarchyStep, TransformOutput
from domain.planning_context import ProjectPlanningContext
from interface_adapters.repositories.source_repository import SourceRepository

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PlanningContextPipeline:
    """
    extract (lecturas concurrentes) → transform (retrasos, agrupación) → build (stats + foto).

    Devuelve None si el proyecto no existe. Los fallos del origen (SourceFetchError)
    se propagan: no se confunden con "no encontrado" ni con "proyecto vacío".
    """

    def __init__(
        self,
        source_repo: SourceRepository,
        *,
        timeout_s: float = 10.0,
        max_workers: int = 4,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.source_repo = source_repo
        self.clock = clock

        self.extract = ExtractHierarchyStep(self.source_repo, timeout_s=timeout_s, max_workers=max_workers)
        self.transform = TransformHierarchyStep()
        self.build = BuildSnapshotStep()

    def run(self, project_id: str) -> Optional[ProjectPlanningContext]:
        ext: Optional[ExtractOutput] = self.extract.run(project_id)
        if ext is None:
            return None

        now = self.clock()
        tr: TransformOutput = self.transform.run(ext, now)
        ctx = self.build.run(ext.project, tr.interventions, now, ext.incomplete_sources)

        logger.info(
            "Contexto de planificación %s: interventions=%s, tasks=%s, late=%s%s",
            project_id,
            ctx.stats.total_interventions,
            ctx.stats.total_tasks,
            ctx.stats.tasks_late,
            f", incompleto={','.join(ctx.incomplete_sources)}" if ctx.incomplete_sources else "",
        )
        return ctx
