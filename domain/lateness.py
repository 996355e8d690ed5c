# domain/lateness.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

import pandas as pd

SECONDS_PER_DAY = 86_400


@dataclass(frozen=True)
class Lateness:
    is_late: bool
    delay_days: int


NOT_LATE = Lateness(is_late=False, delay_days=0)


def _naive_utc(dt: datetime) -> datetime:
    """Instantes con zona → UTC sin tzinfo; los naive se dejan tal cual."""
    if dt.tzinfo is not None:
        return pd.Timestamp(dt).tz_convert("UTC").tz_localize(None).to_pydatetime()
    return dt


def parse_instant(value: Any) -> Optional[datetime]:
    """
    Convierte str / date / datetime / Timestamp en datetime naive (UTC).
    Vacíos, NaN/NaT o valores no parseables → None (nunca lanza).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        ts = pd.to_datetime(value, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return _naive_utc(ts.to_pydatetime())


def parse_date(value: Any) -> Optional[date]:
    dt = parse_instant(value)
    return dt.date() if dt is not None else None


def end_of_day(d: date) -> datetime:
    return datetime.combine(d, time(23, 59, 59))


def compute_lateness(due_date: Any, completed_at: Any, status: Optional[str], now: datetime) -> Lateness:
    """
    ¿Va tarde la tarea y cuántos días?

    Reglas, en orden:
      1. Sin fecha de vencimiento → no va tarde.
      2. Fecha de vencimiento no parseable → no va tarde.
      3. 'done' sin completed_at registrado → no va tarde (no hay instante con el que medir).
      4. Referencia = completed_at si está 'done', si no `now`.
      5. Referencia <= fin del día de vencimiento (23:59:59) → no va tarde.
      6. Si no, tarde: ceil(días entre fin del día y referencia), mínimo 1.

    `now` se pasa explícitamente; la función no lee el reloj.
    """
    due = parse_date(due_date)
    if due is None:
        return NOT_LATE

    if status == "done":
        reference = parse_instant(completed_at)
        if reference is None:
            return NOT_LATE
    else:
        reference = _naive_utc(now)

    diff: timedelta = reference - end_of_day(due)
    if diff <= timedelta(0):
        return NOT_LATE

    days = math.ceil(diff.total_seconds() / SECONDS_PER_DAY)
    return Lateness(is_late=True, delay_days=max(1, days))
