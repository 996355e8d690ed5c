# application/planning/serializer.py
"""
Texto legible (humano / LLM) de un ProjectPlanningContext.

Es el único punto donde se acota el tamaño: como máximo `max_interventions`
intervenciones, `max_tasks_per_intervention` tareas por intervención y
`max_field_chars` caracteres por campo de texto libre; lo que no se muestra
se anuncia con un aviso de truncado (o con `…` al final del campo).
"""
from __future__ import annotations

from typing import List, Optional

from domain.planning_context import InterventionSnapshot, ProjectPlanningContext, TaskSnapshot

DEFAULT_MAX_INTERVENTIONS = 40
DEFAULT_MAX_TASKS_PER_INTERVENTION = 30
DEFAULT_MAX_FIELD_CHARS = 200

MISSING = "non renseigné"
ELLIPSIS = "…"
EMPTY_MARKER = "=== AUCUNE INTERVENTION CRÉÉE ==="
EMPTY_SENTENCE = "Aucune intervention n'existe encore pour ce projet."
UNREAD_SENTENCE = (
    "Les interventions n'ont pas pu être lues (lecture expirée) : "
    "ne pas en déduire qu'aucune intervention n'existe."
)


def _clip(text: str, limit: int) -> str:
    # Recorte con marca visible; el total nunca supera `limit`
    if len(text) <= limit:
        return text
    return text[: max(limit - 1, 0)] + ELLIPSIS


def _val(v: Optional[object], limit: int) -> str:
    return MISSING if v is None or v == "" else _clip(str(v), limit)


def _money(v: Optional[float]) -> str:
    if v is None:
        return MISSING
    amount = str(int(v)) if float(v).is_integer() else f"{v:.2f}"
    return f"{amount} €"


def _task_line(task: TaskSnapshot, limit: int) -> str:
    parts = [
        f"    - [{_clip(task.status.upper(), limit)}] {_clip(task.title, limit)}"
        f" (id: {_clip(task.id, limit)})"
    ]
    parts.append(f" (échéance: {_clip(task.due_date, limit)})" if task.due_date else " (sans échéance)")
    if task.completed_at:
        parts.append(f" (terminée le: {_clip(task.completed_at, limit)})")
    if task.is_late:
        parts.append(f" [RETARD: {task.delay_days}j]")
    return "".join(parts)


def _intervention_block(intervention: InterventionSnapshot, max_tasks: int, limit: int) -> List[str]:
    lines = [
        f"--- Intervention : {_clip(intervention.name, limit)}"
        f" (id: {_clip(intervention.id, limit)}) ---"
    ]
    if intervention.is_synthetic:
        lines.append("  Nature : tâches du projet non rattachées à une intervention")
    lines.append(f"  Type : {_val(intervention.lot_type, limit)}")
    lines.append(f"  Statut : {_clip(intervention.status, limit)}")
    lines.append(f"  Progression : {intervention.progress_percent}%")
    lines.append(f"  Début : {_val(intervention.start_date, limit)}")
    lines.append(f"  Fin : {_val(intervention.end_date, limit)}")
    lines.append(f"  Entreprise : {_val(intervention.company_name, limit)}")
    lines.append(f"  Budget estimé : {_money(intervention.budget_estimated)}")
    lines.append(f"  Budget réel : {_money(intervention.budget_actual)}")

    tasks = intervention.tasks
    if not tasks:
        lines.append("  Tâches : aucune")
        return lines

    lines.append(f"  Tâches ({len(tasks)}) :")
    lines.extend(_task_line(t, limit) for t in tasks[:max_tasks])
    hidden = len(tasks) - max_tasks
    if hidden > 0:
        late_hidden = sum(1 for t in tasks[max_tasks:] if t.is_late)
        lines.append(
            f"    … {hidden} tâche(s) supplémentaire(s) non affichée(s)"
            f" (dont {late_hidden} en retard)"
        )
    return lines


def serialize_planning_context(
    ctx: ProjectPlanningContext,
    max_interventions: int = DEFAULT_MAX_INTERVENTIONS,
    max_tasks_per_intervention: int = DEFAULT_MAX_TASKS_PER_INTERVENTION,
    max_field_chars: int = DEFAULT_MAX_FIELD_CHARS,
) -> str:
    p, s = ctx.project, ctx.stats
    limit = max_field_chars
    lines: List[str] = []

    lines.append("=== ÉTAT DU PROJET ===")
    lines.append(f"Id : {_clip(p.id, limit)}")
    lines.append(f"Nom : {_clip(p.name, limit)}")
    lines.append(f"Type : {_val(p.type, limit)}")
    lines.append(f"Statut : {_clip(p.status, limit) if p.status else 'inconnu'}")
    lines.append(f"Adresse : {_val(p.address, limit)}")
    lines.append(f"Ville : {_val(p.city, limit)}")
    lines.append(f"Budget total : {_money(p.budget_total)}")
    lines.append(f"Créé le : {_val(p.created_at, limit)}")
    lines.append(f"Date snapshot : {ctx.snapshot_date}")
    if ctx.incomplete_sources:
        lines.append(
            f"Données partielles : lecture expirée pour {', '.join(ctx.incomplete_sources)}"
            " (ne pas interpréter comme une absence de travaux)"
        )
    lines.append("")

    lines.append("=== AVANCEMENT GLOBAL ===")
    lines.append(f"Interventions : {s.total_interventions}")
    lines.append(
        f"Tâches totales : {s.total_tasks} (terminées: {s.tasks_done}, "
        f"en cours: {s.tasks_in_progress}, à faire: {s.tasks_todo})"
    )
    lines.append(f"Tâches en retard : {s.tasks_late}")
    lines.append(f"Progression globale : {s.overall_progress_percent}%")
    types = ", ".join(_clip(t, limit) for t in s.intervention_types) if s.intervention_types else "aucun"
    lines.append(f"Types d'interventions présents : {types}")
    lines.append("")

    if not ctx.interventions:
        lines.append(EMPTY_MARKER)
        # Con lecturas expiradas, el vacío no prueba que no haya intervenciones
        lines.append(UNREAD_SENTENCE if ctx.incomplete_sources else EMPTY_SENTENCE)
        lines.append("")
        return "\n".join(lines)

    lines.append("=== INTERVENTIONS ET TÂCHES ===")
    shown = ctx.interventions[:max_interventions]
    for intervention in shown:
        lines.extend(_intervention_block(intervention, max_tasks_per_intervention, limit))
        lines.append("")

    rest = ctx.interventions[max_interventions:]
    if rest:
        rest_tasks = sum(len(i.tasks) for i in rest)
        lines.append(
            f"… {len(rest)} intervention(s) supplémentaire(s) non affichée(s) "
            f"({rest_tasks} tâche(s))"
        )
        lines.append("")

    return "\n".join(lines)
