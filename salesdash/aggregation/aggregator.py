from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence
import logging
import math

from salesdash.aggregation.periods import Window, is_in_range
from salesdash.aggregation.rules import is_order, is_quotation
from salesdash.events.model import Event, normalize_label

log = logging.getLogger(__name__)

GroupBy = Callable[[Event], Any]

ALL_LABEL = "All"


def safe_pct(num: float, den: float) -> float:
    """num / den * 100, or 0.0 when den is zero or the ratio is not finite."""
    if not den:
        return 0.0
    pct = float(num) / float(den) * 100.0
    return pct if math.isfinite(pct) else 0.0


def by_sales_representative(e: Event) -> Optional[str]:
    return e.sales_representative


def by_line_of_work(e: Event) -> Optional[str]:
    return e.line_of_work


def by_month(e: Event) -> Optional[str]:
    return e.date.strftime("%Y-%m") if e.date is not None else None


def no_grouping(e: Event) -> str:
    return ALL_LABEL


GROUPINGS: Dict[str, GroupBy] = {
    "rep": by_sales_representative,
    "line_of_work": by_line_of_work,
    "month": by_month,
    "none": no_grouping,
}


@dataclass(frozen=True)
class GroupMetrics:
    quote_count: int = 0
    quote_value: float = 0.0
    order_count: int = 0
    order_value: float = 0.0
    conversion_rate_by_count: float = 0.0
    conversion_rate_by_value: float = 0.0
    average_quote_value: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


AggregationResult = Dict[str, GroupMetrics]


@dataclass(frozen=True)
class Totals:
    total_quote_count: int
    total_order_count: int
    total_quote_value: float
    total_order_value: float
    overall_conversion: float
    overall_conversion_by_count: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class _Acc:
    __slots__ = ("qc", "qv", "oc", "ov")

    def __init__(self):
        self.qc, self.qv, self.oc, self.ov = 0, 0.0, 0, 0.0

    def freeze(self) -> GroupMetrics:
        return GroupMetrics(
            quote_count=self.qc,
            quote_value=self.qv,
            order_count=self.oc,
            order_value=self.ov,
            conversion_rate_by_count=safe_pct(self.oc, self.qc),
            conversion_rate_by_value=safe_pct(self.ov, self.qv),
            average_quote_value=self.qv / self.qc if self.qc else 0.0,
        )


def aggregate(
    events: Iterable[Event],
    window: Optional[Window] = None,
    group_by: GroupBy = no_grouping,
    known_labels: Optional[Sequence[str]] = None,
) -> AggregationResult:
    """Fold events into per-group quotation/order metrics over a window.

    - window None (or an unset bound) applies no date filter
    - a group appears once some in-window event counts as a quotation or an order
    - every label in known_labels appears, all-zero when it saw no activity
    Labels are normalised so blank/None keys land under "Unknown".
    Output order: seeded labels first, then labels in first-seen order.
    """
    start, end = window if window is not None else (None, None)
    accs: Dict[str, _Acc] = {}
    for label in known_labels or ():
        accs.setdefault(normalize_label(label), _Acc())

    seen = 0
    for e in events:
        if not is_in_range(e.date, start, end):
            continue
        quote, order = is_quotation(e), is_order(e)
        if not (quote or order):
            continue
        seen += 1
        acc = accs.setdefault(normalize_label(group_by(e)), _Acc())
        if quote:
            acc.qc += 1
            acc.qv += e.amount
        if order:
            acc.oc += 1
            acc.ov += e.amount

    log.debug("aggregated %d matching events into %d groups", seen, len(accs))
    return {label: acc.freeze() for label, acc in accs.items()}


def derive_totals(result: AggregationResult) -> Totals:
    qc = sum(m.quote_count for m in result.values())
    oc = sum(m.order_count for m in result.values())
    qv = sum(m.quote_value for m in result.values())
    ov = sum(m.order_value for m in result.values())
    return Totals(
        total_quote_count=qc,
        total_order_count=oc,
        total_quote_value=qv,
        total_order_value=ov,
        overall_conversion=safe_pct(ov, qv),
        overall_conversion_by_count=safe_pct(oc, qc),
    )


RANK_METRICS = tuple(GroupMetrics.__dataclass_fields__.keys())


def rank_groups(result: AggregationResult, metric: str = "order_value", limit: Optional[int] = None) -> List[tuple[str, GroupMetrics]]:
    if metric not in RANK_METRICS:
        raise ValueError(f"unknown metric '{metric}'")
    if limit is not None and limit < 0:
        raise ValueError("limit must not be negative")
    ranked = sorted(result.items(), key=lambda kv: (-getattr(kv[1], metric), kv[0]))
    return ranked[:limit] if limit is not None else ranked


def top_group(result: AggregationResult, metric: str = "order_value") -> Optional[tuple[str, GroupMetrics]]:
    ranked = rank_groups(result, metric, limit=1)
    return ranked[0] if ranked else None


def result_to_dict(result: AggregationResult) -> Dict[str, Dict[str, Any]]:
    return {label: m.to_dict() for label, m in result.items()}
