from __future__ import annotations

from datetime import date, datetime, timezone

import numpy as np
import pandas as pd
import pytest

from domain.lateness import NOT_LATE, Lateness, compute_lateness, parse_date, parse_instant

NOW = datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("status", ["todo", "in_progress", "done"])
@pytest.mark.parametrize("completed_at", [None, "2025-03-01T12:00:00+00:00"])
def test_no_due_date_is_never_late(status, completed_at):
    for due in (None, "", float("nan"), pd.NaT):
        assert compute_lateness(due, completed_at, status, NOW) == NOT_LATE


@pytest.mark.parametrize("due", ["pas une date", "2025-13-45", "demain"])
def test_unparsable_due_date_fails_safe(due):
    assert compute_lateness(due, None, "todo", NOW) == NOT_LATE


def test_done_without_completion_is_not_late_even_if_overdue():
    assert compute_lateness("2020-01-01", None, "done", NOW) == NOT_LATE


def test_done_with_unparsable_completion_is_not_late():
    assert compute_lateness("2020-01-01", "n/a", "done", NOW) == NOT_LATE


@pytest.mark.parametrize(
    "completed_at",
    ["2025-01-09T08:00:00", "2025-01-10T00:00:00", "2025-01-10T23:59:59", "2025-01-10T23:59:59+00:00"],
)
def test_done_on_or_before_end_of_due_day(completed_at):
    assert compute_lateness("2025-01-10", completed_at, "done", NOW) == NOT_LATE


@pytest.mark.parametrize(
    "completed_at, expected_days",
    [
        ("2025-01-11T00:00:00", 1),
        ("2025-01-11T10:00:00", 1),
        ("2025-01-11T23:59:59", 1),
        ("2025-01-12T00:00:00", 2),
        ("2025-01-13T00:00:01", 3),
        ("2025-02-09T12:00:00", 30),
    ],
)
def test_done_after_due_day_counts_ceil_days(completed_at, expected_days):
    result = compute_lateness("2025-01-10", completed_at, "done", NOW)
    assert result == Lateness(is_late=True, delay_days=expected_days)
    assert result.delay_days >= 1


def test_done_uses_completion_not_now():
    # Terminada a tiempo hace mucho: "now" no cuenta
    assert compute_lateness("2024-06-01", "2024-05-30T12:00:00", "done", NOW) == NOT_LATE


@pytest.mark.parametrize("status", ["todo", "in_progress"])
def test_open_task_past_due_is_late(status):
    result = compute_lateness("2025-01-14", None, status, NOW)
    assert result.is_late is True
    assert result.delay_days == 1


def test_open_task_ignores_completion_timestamp():
    # Referencia = now para tareas no terminadas
    result = compute_lateness("2025-01-05", "2025-01-04T00:00:00", "in_progress", NOW)
    assert result == Lateness(is_late=True, delay_days=10)


def test_open_task_due_today_or_future_is_not_late():
    assert compute_lateness("2025-01-15", None, "todo", NOW) == NOT_LATE
    assert compute_lateness("2025-01-22", None, "in_progress", NOW) == NOT_LATE


def test_timezone_aware_completion_is_compared_in_utc():
    # 01:00 +02:00 del día 11 = 23:00 UTC del día 10
    assert compute_lateness("2025-01-10", "2025-01-11T01:00:00+02:00", "done", NOW) == NOT_LATE


def test_naive_now_is_accepted():
    naive = datetime(2025, 1, 15, 10, 0)
    assert compute_lateness("2025-01-14", None, "todo", naive) == Lateness(True, 1)


@pytest.mark.parametrize(
    "due",
    [date(2025, 1, 14), pd.Timestamp("2025-01-14"), datetime(2025, 1, 14, 8, 0), "2025-01-14T00:00:00"],
)
def test_due_date_accepts_store_types(due):
    assert compute_lateness(due, None, "todo", NOW) == Lateness(True, 1)


def test_parsers_never_raise():
    assert parse_instant(None) is None
    assert parse_instant(np.nan) is None
    assert parse_instant("   ") is None
    assert parse_instant(True) is None
    assert parse_date("2025-01-10T15:00:00") == date(2025, 1, 10)
