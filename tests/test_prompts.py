from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from application.planning.prompts import (
    PLANNING_RESPONSE_KEYS,
    RESPONSE_SCHEMA,
    build_light_planning_hint,
    build_planning_system_prompt,
    current_week_start,
)
from application.planning.serializer import serialize_planning_context
from domain.construction_knowledge import KNOWLEDGE_VERSION, TRADE_CATEGORIES, TRADE_SEQUENCE
from tests.conftest import make_context, make_intervention, make_task

GOLDEN_DIR = Path(__file__).parent / "golden"


@pytest.fixture
def snapshot_text() -> str:
    ctx = make_context([make_intervention("lot-1", [make_task("t1", due_date="2025-01-14", is_late=True, delay_days=1)])])
    return serialize_planning_context(ctx)


def test_full_prompt_is_byte_identical_for_identical_inputs(snapshot_text):
    first = build_planning_system_prompt(snapshot_text, "2025-01-13")
    second = build_planning_system_prompt(snapshot_text, "2025-01-13")
    assert first == second
    assert first.encode("utf-8") == second.encode("utf-8")


def test_full_prompt_embeds_snapshot_verbatim(snapshot_text):
    assert snapshot_text in build_planning_system_prompt(snapshot_text)


def test_week_label(snapshot_text):
    assert "Semaine du 2025-01-13" in build_planning_system_prompt(snapshot_text, "2025-01-13")
    assert "Semaine en cours" in build_planning_system_prompt(snapshot_text)


def test_full_prompt_describes_the_reasoning_steps(snapshot_text):
    prompt = build_planning_system_prompt(snapshot_text)
    positions = [prompt.index(step) for step in ("ÉTAPE 1", "ÉTAPE 2", "ÉTAPE 3", "ÉTAPE 4")]
    assert positions == sorted(positions)
    assert "2 à 5 tâches initiales avec dates" in prompt


def test_full_prompt_specifies_output_contract(snapshot_text):
    prompt = build_planning_system_prompt(snapshot_text)
    assert RESPONSE_SCHEMA in prompt
    for key in PLANNING_RESPONSE_KEYS:
        assert f'"{key}"' in prompt
    for field in ("intervention_id", "task_id", "suggested_tasks", "lot_type", "reason", "start_date", "end_date"):
        assert f'"{field}"' in prompt


def test_full_prompt_states_hard_rules(snapshot_text):
    prompt = build_planning_system_prompt(snapshot_text)
    assert "JAMAIS répondre uniquement par un résumé des tâches existantes" in prompt
    assert "TOUJOURS inclure au minimum une suggestion" in prompt
    assert "dépendances entre corps d'état doivent être respectées" in prompt
    assert "Adapte les suggestions au type de projet" in prompt


def test_full_prompt_renders_knowledge_table(snapshot_text):
    prompt = build_planning_system_prompt(snapshot_text)
    for step in TRADE_SEQUENCE:
        assert f"{step.order}. {step.name}" in prompt
    for category in TRADE_CATEGORIES:
        assert category in prompt


def test_knowledge_sequence_is_ordered():
    assert [s.order for s in TRADE_SEQUENCE] == list(range(1, len(TRADE_SEQUENCE) + 1))
    names = [s.name for s in TRADE_SEQUENCE]
    assert names.index("Réseaux secs") < names.index("Isolation / cloisons")


def test_knowledge_header_carries_the_table_version(snapshot_text):
    prompt = build_planning_system_prompt(snapshot_text)
    assert f"CONNAISSANCES MÉTIER BTP (référentiel {KNOWLEDGE_VERSION})" in prompt


def test_light_hint_embeds_snapshot_and_asks_for_a_suggestion(snapshot_text):
    hint = build_light_planning_hint(snapshot_text)
    assert snapshot_text in hint
    assert "Au moins 1 tâche ou intervention à envisager" in hint
    assert "FORMAT DE RÉPONSE" not in hint
    assert hint == build_light_planning_hint(snapshot_text)


@pytest.mark.parametrize(
    "today, monday",
    [
        (date(2025, 1, 13), date(2025, 1, 13)),
        (date(2025, 1, 15), date(2025, 1, 13)),
        (date(2025, 1, 19), date(2025, 1, 13)),
        (date(2025, 1, 1), date(2024, 12, 30)),
    ],
)
def test_current_week_start_is_monday(today, monday):
    assert current_week_start(today) == monday


def test_full_prompt_matches_golden_file():
    tasks = [
        make_task("t-1", "done", due_date="2025-01-20", completed_at="2025-01-10T09:00:00+00:00"),
        make_task("t-2", "in_progress", due_date="2025-01-14", is_late=True, delay_days=1),
        make_task("t-3", "todo"),
    ]
    ctx = make_context([make_intervention("lot-1", tasks)])
    prompt = build_planning_system_prompt(serialize_planning_context(ctx), "2025-01-13")

    expected = (GOLDEN_DIR / "planning_prompt_2025-01-13.txt").read_text(encoding="utf-8")
    assert prompt == expected
