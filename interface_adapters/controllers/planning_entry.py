# interface_adapters/controllers/planning_entry.py
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Optional

# Importa componentes internos del contexto de planificación
from config.config import Config
from infrastructure.pg_gateway import PostgresGateway
from infrastructure.postgres.db import get_engine

from interface_adapters.repositories.source_repository import SourceRepository
from application.planning.pipeline import PlanningContextPipeline
from interface_adapters.controllers.planning_controller import PlanningController

logger = logging.getLogger(__name__)


def _read_stdin_json() -> Optional[dict]:
    if sys.stdin is None or sys.stdin.isatty():
        return None
    raw = (sys.stdin.read() or "").strip()
    if not raw.startswith("{"):
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("JSON de stdin ignorado: %s", e)
        return None


def build_controller(config: type[Config] = Config) -> PlanningController:
    """Engine → repositorio → pipeline → controller, a partir de la configuración."""
    PostgresGateway(config=config).test_connection()

    engine = get_engine(config.sqlalchemy_dsn(), statement_timeout_s=config.FETCH_TIMEOUT_S)
    source_repo = SourceRepository(engine=engine)
    pipeline = PlanningContextPipeline(
        source_repo,
        timeout_s=config.FETCH_TIMEOUT_S,
        max_workers=config.FETCH_MAX_WORKERS,
    )
    return PlanningController(
        pipeline,
        max_interventions=config.SNAPSHOT_MAX_INTERVENTIONS,
        max_tasks_per_intervention=config.SNAPSHOT_MAX_TASKS_PER_INTERVENTION,
        max_field_chars=config.SNAPSHOT_MAX_FIELD_CHARS,
    )


def run_planning_cli(
    project: str,
    message: str = "",
    force_plan: bool = False,
    week_start: Optional[str] = None,
) -> dict:
    """Devuelve un dict serializable para integraciones."""
    controller = build_controller()
    result = controller.prepare(project, message=message, force_plan=force_plan, week_start=week_start)
    return {
        "ok": result["ok"],
        "message": result.get("message", "Contexte de planification préparé"),
        "params": {
            "project": project,
            "message": message,
            "force_plan": force_plan,
            "week_start": week_start,
        },
        "result": result,
    }


def main():
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    # 1) Intentar leer JSON de stdin
    data = _read_stdin_json()

    # 2) Si no llega JSON, parsear argumentos
    parser = argparse.ArgumentParser(description="Planning context / prompt builder")
    parser.add_argument("--project", type=str, default=None, help="Id del proyecto (projects.id)")
    parser.add_argument("--message", type=str, default="", help="Mensaje del usuario")
    parser.add_argument("--force-plan", action="store_true", help="Prompt completo de planificación")
    parser.add_argument("--week-start", type=str, default=None, help="Lunes de la semana objetivo (YYYY-MM-DD)")
    args, _ = parser.parse_known_args()

    try:
        if data:
            project = data["project"]
            message = data.get("message") or ""
            force_plan = bool(data.get("force_plan", False))
            week_start = data.get("week_start")
        else:
            if not args.project:
                raise ValueError("Falta el parámetro project (ni JSON en stdin ni argumentos).")
            project = args.project
            message = args.message
            force_plan = args.force_plan
            week_start = args.week_start

        out = run_planning_cli(project, message, force_plan, week_start)
        print(json.dumps(out, ensure_ascii=False))
        sys.exit(0 if out["ok"] else 1)
    except Exception as e:
        logger.exception("Planning error")
        err = {"ok": False, "message": f"Planning error: {e}"}
        print(json.dumps(err, ensure_ascii=False))
        sys.exit(1)


if __name__ == "__main__":
    main()
