from __future__ import annotations
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

EVENT_TYPES = ("CGI", "QUOTE", "ORDER")
UNKNOWN = "Unknown"

LINE_OF_WORK_LABELS = {
    "EC": "Electro Motors",
    "SSC": "Steel Service Center",
    "SMP": "Structural Mechanical & Plate",
    "OEM": "OEM",
    UNKNOWN: "Other",
}

_TRUE_STRINGS = {"yes", "true", "y", "1"}


@dataclass(frozen=True)
class Event:
    id: str
    event_type: str  # CGI | QUOTE | ORDER
    date: Optional[datetime] = None  # naive local time
    quote_sent: bool = False
    po_received: bool = False
    status: str = ""
    price: Optional[float] = None
    sales_representative: Optional[str] = None
    line_of_work: Optional[str] = None
    customer_name: Optional[str] = None
    company_name: Optional[str] = None
    reference_code: Optional[str] = None
    po_number: Optional[str] = None
    quote_number: Optional[str] = None

    @property
    def amount(self) -> float:
        if self.price is None or not math.isfinite(self.price):
            return 0.0
        return self.price


def normalize_label(value: Any) -> str:
    if value is None:
        return UNKNOWN
    s = str(value).strip()
    return s if s else UNKNOWN


def line_of_work_label(code: Any) -> str:
    key = normalize_label(code)
    return LINE_OF_WORK_LABELS.get(key, key)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string (``Z`` suffix allowed) into naive local time.

    Aware values are shifted into the local zone before dropping tzinfo so
    they compare cleanly against the naive windows from ``resolve_window``.
    Returns None for anything unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        s = str(value).strip()
        if not s:
            return None
        if s.endswith("Z") or s.endswith("z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def _to_price(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(f):
        return None
    return f


def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _pick(raw: Dict[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in raw and raw[k] is not None:
            return raw[k]
    return None


def event_from_dict(raw: Dict[str, Any]) -> Event:
    """Build an Event from an API/DB record (camelCase or snake_case keys)."""
    etype = _pick(raw, "eventType", "event_type")
    return Event(
        id=_opt_str(_pick(raw, "id")) or "",
        event_type=str(etype).strip().upper() if etype is not None else "",
        date=parse_timestamp(_pick(raw, "date")),
        quote_sent=_to_bool(_pick(raw, "quoteSent", "quote_sent")),
        po_received=_to_bool(_pick(raw, "poReceived", "po_received")),
        status=str(_pick(raw, "status") or ""),
        price=_to_price(_pick(raw, "price")),
        sales_representative=_opt_str(_pick(raw, "salesRepresentative", "sales_representative")),
        line_of_work=_opt_str(_pick(raw, "lineOfWork", "line_of_work")),
        customer_name=_opt_str(_pick(raw, "customerName", "customer_name")),
        company_name=_opt_str(_pick(raw, "companyName", "company_name")),
        reference_code=_opt_str(_pick(raw, "referenceCode", "reference_code")),
        po_number=_opt_str(_pick(raw, "poNumber", "po_number")),
        quote_number=_opt_str(_pick(raw, "quoteNumber", "quote_number")),
    )
