# interface_adapters/controllers/planning_controller.py
from __future__ import annotations
from datetime import date
from typing import Callable, Optional

from application.planning.intent import IntentClassifier, PlanningIntent, classify_intent
from application.planning.pipeline import PlanningContextPipeline
from application.planning.prompts import (
    build_light_planning_hint,
    build_planning_system_prompt,
    current_week_start,
)
from application.planning.serializer import (
    DEFAULT_MAX_FIELD_CHARS,
    DEFAULT_MAX_INTERVENTIONS,
    DEFAULT_MAX_TASKS_PER_INTERVENTION,
    serialize_planning_context,
)


class PlanningController:
    """
    Elige el prompt para un mensaje:
      • force_plan        → prompt completo (semana objetivo: week_start o lunes actual),
      • intención detectada → pista ligera,
      • si no             → sin prompt (ni siquiera se lee el proyecto).
    """

    def __init__(
        self,
        pipeline: PlanningContextPipeline,
        *,
        max_interventions: int = DEFAULT_MAX_INTERVENTIONS,
        max_tasks_per_intervention: int = DEFAULT_MAX_TASKS_PER_INTERVENTION,
        max_field_chars: int = DEFAULT_MAX_FIELD_CHARS,
        classifier: Optional[IntentClassifier] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.pipeline = pipeline
        self.max_interventions = max_interventions
        self.max_tasks_per_intervention = max_tasks_per_intervention
        self.max_field_chars = max_field_chars
        self.classifier = classifier
        self.today = today

    def prepare(
        self,
        project_id: str,
        message: str = "",
        force_plan: bool = False,
        week_start: Optional[str] = None,
    ) -> dict:
        intent = classify_intent(message, self.classifier)
        is_planning = force_plan or isinstance(intent, PlanningIntent)
        out = {
            "ok": True,
            "project_id": project_id,
            "mode": "none",
            "matched_keyword": intent.matched_keyword if isinstance(intent, PlanningIntent) else None,
            "system_prompt": None,
            "planning_context": None,
        }
        if not is_planning:
            return out

        ctx = self.pipeline.run(project_id)
        if ctx is None:
            out.update(ok=False, message="Projet introuvable : aucun contexte de planification.")
            return out

        serialized = serialize_planning_context(
            ctx,
            max_interventions=self.max_interventions,
            max_tasks_per_intervention=self.max_tasks_per_intervention,
            max_field_chars=self.max_field_chars,
        )
        if force_plan:
            week = week_start or current_week_start(self.today()).isoformat()
            out.update(mode="full", week_start=week, system_prompt=build_planning_system_prompt(serialized, week))
        else:
            out.update(mode="light", system_prompt=build_light_planning_hint(serialized))

        out["planning_context"] = ctx.to_dict()
        return out
