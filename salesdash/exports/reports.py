from __future__ import annotations
from datetime import datetime
from typing import List, Optional, Tuple

from salesdash.aggregation.aggregator import GroupMetrics, Totals


def _window_line(window: Optional[Tuple[datetime, datetime]]) -> str:
    if not window or window[0] is None or window[1] is None:
        return "Window: all time"
    return f"Window: {window[0]:%Y-%m-%d} to {window[1]:%Y-%m-%d}"


def summary_md(title: str, totals: Totals, window: Optional[Tuple[datetime, datetime]] = None) -> str:
    lines = [f"# {title}", "", _window_line(window), ""]
    lines.append(f"- quotations: {totals.total_quote_count} ({totals.total_quote_value:.2f})")
    lines.append(f"- sales orders: {totals.total_order_count} ({totals.total_order_value:.2f})")
    lines.append(f"- conversion by value: {totals.overall_conversion:.1f}%")
    lines.append(f"- conversion by count: {totals.overall_conversion_by_count:.1f}%")
    return "\n".join(lines) + "\n"


def leaderboard_md(ranked: List[Tuple[str, GroupMetrics]], metric: str = "order_value") -> str:
    lines = ["# Leaderboard", ""]
    if not ranked:
        lines.append("_no activity_")
    for i, (label, m) in enumerate(ranked, start=1):
        lines.append(f"{i}. {label}: {getattr(m, metric)}")
    if ranked:
        lines.append(f"\nLeader: **{ranked[0][0]}**")
    return "\n".join(lines) + "\n"
