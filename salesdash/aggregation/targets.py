from __future__ import annotations
from dataclasses import dataclass, asdict, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List

from salesdash.aggregation.aggregator import aggregate, by_month, safe_pct
from salesdash.aggregation.periods import month_keys, month_label, resolve_window
from salesdash.events.model import Event


@dataclass(frozen=True)
class MonthRow:
    month: str  # YYYY-MM
    label: str
    quote_value: float
    order_value: float
    target: float
    variance: float


@dataclass(frozen=True)
class TargetProgress:
    rows: List[MonthRow] = field(default_factory=list)
    total_target: float = 0.0
    total_quotes: float = 0.0
    total_orders: float = 0.0
    total_variance: float = 0.0
    performance_pct: float = 0.0
    achieved: float = 0.0
    remaining: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def default_target_window(today: date | datetime) -> tuple[datetime, datetime]:
    """Start of the month three months back through the end of the current month."""
    y, m = today.year, today.month - 3
    if m < 1:
        y, m = y - 1, m + 12
    start, _ = resolve_window("month", date(y, m, 1))
    _, end = resolve_window("month", today)
    return start, end


def target_progress(events: Iterable[Event], window: tuple[datetime, datetime], monthly_target: float) -> TargetProgress:
    """Orders against a flat monthly target for every month the window touches."""
    start, end = window
    monthly = aggregate(events, window, group_by=by_month)
    rows: List[MonthRow] = []
    for key in month_keys(start, end):
        m = monthly.get(key)
        qv = m.quote_value if m else 0.0
        ov = m.order_value if m else 0.0
        rows.append(MonthRow(
            month=key,
            label=month_label(key),
            quote_value=qv,
            order_value=ov,
            target=monthly_target,
            variance=ov - monthly_target,
        ))

    total_target = monthly_target * len(rows)
    total_quotes = sum(r.quote_value for r in rows)
    total_orders = sum(r.order_value for r in rows)
    return TargetProgress(
        rows=rows,
        total_target=total_target,
        total_quotes=total_quotes,
        total_orders=total_orders,
        total_variance=total_orders - total_target,
        performance_pct=safe_pct(total_orders, total_target),
        achieved=min(total_orders, total_target),
        remaining=max(total_target - total_orders, 0.0),
    )
