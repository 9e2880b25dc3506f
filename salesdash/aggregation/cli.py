import json
import sys
from datetime import datetime

from salesdash.aggregation.aggregator import GROUPINGS, aggregate, derive_totals, result_to_dict
from salesdash.aggregation.periods import PERIODS, resolve_window
from salesdash.events.store import EventStoreError, JsonFileEventStore

USAGE = (
    "Usage: python -m salesdash.aggregation.cli <events.json> <week|month|quarter|year|all> "
    "[rep|line_of_work|month|none] [YYYY-MM-DD]"
)


def main():
    args = sys.argv[1:]
    if len(args) < 2 or (args[1] not in PERIODS and args[1] != "all"):
        print(USAGE)
        sys.exit(2)
    path, period = args[0], args[1]
    group = args[2] if len(args) > 2 else "rep"
    if group not in GROUPINGS:
        print(USAGE)
        sys.exit(2)
    try:
        ref = datetime.strptime(args[3], "%Y-%m-%d") if len(args) > 3 else datetime.now()
    except ValueError:
        print(USAGE)
        sys.exit(2)

    try:
        events = JsonFileEventStore(path).list_events()
    except EventStoreError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    window = None if period == "all" else resolve_window(period, ref)
    result = aggregate(events, window, GROUPINGS[group])
    print(json.dumps({
        "window": [w.isoformat() for w in window] if window else None,
        "groups": result_to_dict(result),
        "totals": derive_totals(result).to_dict(),
    }, indent=2))


if __name__ == "__main__":
    main()
