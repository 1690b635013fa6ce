"""
Agregaciones puras sobre filas de progreso: porcentaje, racha, buckets
mensuales, tasas. Nada aquí toca la base de datos.
"""
from __future__ import annotations
import calendar
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from readtrack.core.timeutils import to_utc_day, utcnow

MONTHLY_WINDOW = 6

def progress_percentage(current_page: int, effective_pages: int) -> float:
    """min(current/total * 100, 100); 0 si no hay páginas."""
    if not effective_pages or effective_pages <= 0:
        return 0.0
    pct = max(int(current_page or 0), 0) / effective_pages * 100
    return min(pct, 100.0)

def reading_streak(timestamps: Iterable[datetime], today: Optional[date] = None) -> int:
    """
    Días consecutivos con actividad, contando hacia atrás desde el día de
    actividad más reciente. Si ese día no es hoy ni ayer, la racha es 0.
    """
    today = today or utcnow().date()
    days = sorted({to_utc_day(ts) for ts in timestamps if ts is not None}, reverse=True)
    # actividad "en el futuro" (reloj desfasado): se descarta antes de todo
    days = [d for d in days if d <= today]
    if not days:
        return 0
    if (today - days[0]).days > 1:
        return 0

    streak = 0
    expected = days[0]
    for d in days:
        if d != expected:
            break
        streak += 1
        expected = d - timedelta(days=1)
    return streak

def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    idx = year * 12 + (month - 1) + delta
    return idx // 12, idx % 12 + 1

def monthly_window_start(now: Optional[datetime] = None) -> datetime:
    """Primer instante del mes más antiguo de la ventana de 6 meses."""
    now = now or utcnow()
    y, m = shift_month(now.year, now.month, -(MONTHLY_WINDOW - 1))
    return datetime(y, m, 1, tzinfo=now.tzinfo)

def monthly_buckets(events: Iterable[tuple[datetime, str]], now: Optional[datetime] = None) -> list[dict]:
    """
    Exactamente 6 buckets (del más antiguo al actual). Cuenta COMPLETED como
    'completed' y READING como 'started'; total = completed + started.
    """
    now = now or utcnow()
    buckets: list[dict] = []
    index: dict[tuple[int, int], dict] = {}
    for i in range(MONTHLY_WINDOW - 1, -1, -1):
        y, m = shift_month(now.year, now.month, -i)
        b = {"month": calendar.month_abbr[m], "year": y, "completed": 0, "started": 0, "total": 0}
        buckets.append(b)
        index[(y, m)] = b

    for ts, status in events:
        if ts is None:
            continue
        day = to_utc_day(ts)
        b = index.get((day.year, day.month))
        if b is None:
            continue
        status = getattr(status, "value", status)
        if status == "COMPLETED":
            b["completed"] += 1
        elif status == "READING":
            b["started"] += 1

    for b in buckets:
        b["total"] = b["completed"] + b["started"]
    return buckets

def completion_rate(completed: int, started: int) -> int:
    if not started:
        return 0
    # redondeo "half up" (12.5 -> 13)
    return int(completed * 100 / started + 0.5)

def average_rating(ratings: Iterable[Optional[int]]) -> float:
    """Media de las calificaciones existentes, 1 decimal; 0 si no hay."""
    values = [r for r in ratings if r is not None]
    if not values:
        return 0
    return round(sum(values) / len(values), 1)
