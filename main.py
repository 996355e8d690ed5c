# main.py
from __future__ import annotations

import logging
import os
from typing import Optional

from interface_adapters.controllers.planning_entry import build_controller


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def run_planning(*, project_id: str, message: str, force_plan: bool, week_start: Optional[str]) -> None:
    """
    Monta el contexto del proyecto y muestra el prompt que se enviaría al motor.
    """
    controller = build_controller()
    result = controller.prepare(project_id, message=message, force_plan=force_plan, week_start=week_start)

    if not result["ok"]:
        print(f"Planning {project_id} → {result.get('message')}")
        return

    print(f"Planning {project_id} → mode={result['mode']}")
    if result["system_prompt"]:
        print(result["system_prompt"])


if __name__ == "__main__":
    # ──────────────────────────────────────────────────────────────
    # Hardcode de parámetros (cámbialos aquí cuando quieras)
    # project    → projects.id
    # message    → mensaje del usuario (decide pista ligera / nada)
    # force_plan → True fuerza el prompt completo
    # week_start → lunes de la semana objetivo; None = semana actual
    # ──────────────────────────────────────────────────────────────
    PROJECT_ID = "00000000-0000-0000-0000-000000000000"
    MESSAGE = "Propose-moi le planning de la semaine"
    FORCE_PLAN = True
    WEEK_START: Optional[str] = None

    run_planning(project_id=PROJECT_ID, message=MESSAGE, force_plan=FORCE_PLAN, week_start=WEEK_START)
