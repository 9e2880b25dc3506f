from __future__ import annotations

from salesdash.events.model import Event

# Union of the exclusion lists used across the report screens. Compared
# case-insensitively. "On Hold" is deliberately not excluded.
EXCLUDED_STATUSES = frozenset({
    "cancelled",
    "completed",
    "company blacklisted",
    "not interested in doing business with us",
})


def is_excluded_status(status: str | None) -> bool:
    return (status or "").strip().lower() in EXCLUDED_STATUSES


def is_quotation(e: Event) -> bool:
    return bool(e.quote_sent) and not is_excluded_status(e.status)


def is_order(e: Event) -> bool:
    return e.event_type == "ORDER" and bool(e.po_received)
