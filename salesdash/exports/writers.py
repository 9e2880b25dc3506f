from __future__ import annotations
from typing import List, Dict, Any, Iterable
import csv
import io

from salesdash.aggregation.aggregator import AggregationResult
from salesdash.aggregation.targets import TargetProgress

# Raw numbers only; currency formatting is left to the renderer
SCHEMAS = {
    "group_metrics": [
        "group","quote_count","quote_value","order_count","order_value","conversion_rate_by_count","conversion_rate_by_value","average_quote_value"
    ],
    "target_progress": [
        "month","label","quote_value","order_value","target","variance"
    ],
}


def write_csv(rows: Iterable[Dict[str, Any]], columns: List[str]) -> str:
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore")
    w.writeheader()
    for r in rows:
        w.writerow({k: r.get(k) for k in columns})
    return buf.getvalue()


def write_group_metrics(result: AggregationResult) -> str:
    return write_csv(({"group": label, **m.to_dict()} for label, m in result.items()), SCHEMAS["group_metrics"])


def write_target_progress(progress: TargetProgress) -> str:
    return write_csv((r.__dict__ for r in progress.rows), SCHEMAS["target_progress"])
