from __future__ import annotations
from datetime import datetime, time as dtime
from typing import Optional
from flask import Flask, request, jsonify, Response

import os
import time
import logging
from collections import deque, defaultdict

from salesdash.aggregation.aggregator import (
    GROUPINGS, aggregate, derive_totals, rank_groups, result_to_dict,
)
from salesdash.aggregation.dashboard import dashboard_stats
from salesdash.aggregation.periods import Window, check_window, resolve_window
from salesdash.aggregation.targets import default_target_window, target_progress
from salesdash.config.env import (
    get_refresh_config, get_roster_config, get_store_config, get_target_config,
)
from salesdash.events.model import line_of_work_label
from salesdash.events.store import EventStore, EventStoreError, JsonFileEventStore
from salesdash.exports.reports import leaderboard_md, summary_md
from salesdash.exports.writers import write_group_metrics, write_target_progress
from salesdash.utils.logger import setup_logger

setup_logger()
log = logging.getLogger(__name__)

app = Flask(__name__)

# Configuration helpers (overridable via app.config in tests)

def _get_api_key() -> str | None:
    if 'API_KEY' in app.config:
        return app.config.get('API_KEY')
    return os.environ.get('API_KEY')


def _get_rate_limit() -> tuple[int, float]:
    n = app.config.get('RATE_LIMIT_N')
    w = app.config.get('RATE_LIMIT_WINDOW_SEC')
    if n is None:
        n = int(os.environ.get('RATE_LIMIT_N', '30'))
    if w is None:
        w = float(os.environ.get('RATE_LIMIT_WINDOW_SEC', '1.0'))
    return int(n), float(w)


def _get_store() -> EventStore:
    store = app.config.get('EVENT_STORE')
    if store is None:
        store = JsonFileEventStore(get_store_config().events_path)
    return store


def _now() -> datetime:
    now = app.config.get('NOW')
    return now if now is not None else datetime.now()


_recent: dict[str, deque[float]] = defaultdict(lambda: deque(maxlen=100))


def _client_ip() -> str:
    xff = request.headers.get('X-Forwarded-For')
    if xff:
        return xff.split(',')[0].strip()
    return request.remote_addr or 'anon'


def _check_api_key():
    api_key = _get_api_key()
    if api_key:
        provided = request.headers.get('X-API-Key')
        if provided != api_key:
            return jsonify({'error': 'unauthorized'}), 401
    return None


def _check_rate_limit(ip: str):
    n, window = _get_rate_limit()
    if n <= 0:
        return None
    now = time.time()
    dq = _recent[ip]
    while dq and now - dq[0] > window:
        dq.popleft()
    if len(dq) >= n:
        retry = max(0.0, window - (now - dq[0]))
        resp = jsonify({'error': 'rate_limited'})
        resp.status_code = 429
        resp.headers['Retry-After'] = f"{retry:.2f}"
        return resp
    dq.append(now)
    return None


@app.before_request
def _auth_and_rate_limit():
    if request.path.startswith('/reports') or request.path == '/dashboard-stats':
        unauthorized = _check_api_key()
        if unauthorized is not None:
            return unauthorized
        rl = _check_rate_limit(_client_ip())
        if rl is not None:
            return rl
    return None


@app.errorhandler(EventStoreError)
def _store_failed(e: EventStoreError):
    log.error("event store failure: %s", e)
    return jsonify({'error': 'failed_to_load_events'}), 503


@app.errorhandler(ValueError)
def _bad_request(e: ValueError):
    return jsonify({'error': str(e)}), 400


def _parse_day(name: str) -> Optional[datetime]:
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        return datetime.strptime(raw, '%Y-%m-%d')
    except ValueError:
        raise ValueError(f"{name} must be YYYY-MM-DD")


def _window_from_args() -> Optional[Window]:
    """Explicit start/end wins; otherwise a quick period around ?date (or now)."""
    start, end = _parse_day('start'), _parse_day('end')
    if start is not None or end is not None:
        if end is not None:
            end = datetime.combine(end.date(), dtime(23, 59, 59, 999000))
        check_window(start, end)
        return start, end
    period = request.args.get('period', 'week')
    if period == 'all':
        return None
    return resolve_window(period, _parse_day('date') or _now())


def _grouped():
    group = request.args.get('group_by', 'rep')
    if group not in GROUPINGS:
        raise ValueError(f"group_by must be one of {', '.join(GROUPINGS)}")
    known = None
    if request.args.get('roster') in ('1', 'true') and group == 'rep':
        known = list(get_roster_config().sales_reps)
    window = _window_from_args()
    result = aggregate(_get_store().list_events(), window, GROUPINGS[group], known_labels=known)
    return window, result


def _window_json(window: Optional[Window]):
    if window is None:
        return None
    return [w.isoformat() if w is not None else None for w in window]


@app.get('/dashboard-stats')
def get_dashboard_stats():
    events = _get_store().list_events()
    body = dashboard_stats(events, get_target_config().dashboard_target)
    body['refresh_interval_sec'] = get_refresh_config().interval_sec
    return jsonify(body)


@app.get('/reports/conversion')
def get_conversion():
    window, result = _grouped()
    body = {
        'window': _window_json(window),
        'groups': result_to_dict(result),
        'totals': derive_totals(result).to_dict(),
    }
    if request.args.get('group_by') == 'line_of_work':
        body['labels'] = {code: line_of_work_label(code) for code in result}
    return jsonify(body)


@app.get('/reports/conversion.csv')
def get_conversion_csv():
    _, result = _grouped()
    return Response(write_group_metrics(result), mimetype='text/csv')


@app.get('/reports/summary.md')
def get_summary_md():
    window, result = _grouped()
    return Response(summary_md('Conversion Summary', derive_totals(result), window), mimetype='text/markdown')


@app.get('/reports/leaderboard')
def get_leaderboard():
    metric = request.args.get('metric', 'order_value')
    limit = request.args.get('limit', type=int)
    _, result = _grouped()
    ranked = rank_groups(result, metric, limit)
    if request.args.get('format') == 'md':
        return Response(leaderboard_md(ranked, metric), mimetype='text/markdown')
    return jsonify({
        'metric': metric,
        'ranking': [{'group': label, **m.to_dict()} for label, m in ranked],
        'leader': ranked[0][0] if ranked else None,
    })


@app.get('/reports/targets')
def get_targets():
    # no explicit range or quick period -> the rolling default window
    period = request.args.get('period')
    explicit = request.args.get('start') or request.args.get('end')
    window = _window_from_args() if explicit or (period and period != 'custom') else None
    if window is None or window[0] is None or window[1] is None:
        window = default_target_window(_now())
    progress = target_progress(_get_store().list_events(), window, get_target_config().monthly_target)
    if request.args.get('format') == 'csv':
        return Response(write_target_progress(progress), mimetype='text/csv')
    return jsonify({'window': _window_json(window), **progress.to_dict()})


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=8000)
