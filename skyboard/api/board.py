"""
Board read endpoints.

Provides:
- GET /            - HTML departures board for the current snapshot
- GET /api         - JSON feed of the current snapshot
- GET /api/status  - Ingestion and store status

All handlers are read-only. They fetch the snapshot once per request, so
a page or feed is always rendered from a single consistent snapshot.
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, Response, current_app, jsonify, render_template

from skyboard.config import config
from skyboard.store import SnapshotStore

logger = logging.getLogger(__name__)

board_bp = Blueprint('board', __name__)


def _store() -> SnapshotStore:
    return current_app.config['SNAPSHOT_STORE']


@board_bp.route('/', methods=['GET'])
def board_page():
    """Render the departures board."""
    snapshot = _store().read()
    region = current_app.config['REGION']

    html = render_template(
        'board.html',
        aircraft=snapshot.records,
        last_update=snapshot.last_updated,
        count=snapshot.count,
        region=region,
        refresh_seconds=config.board.page_refresh_seconds,
        poll_minutes=max(1, round(config.ingestion.poll_interval / 60)),
    )
    return Response(html, mimetype='text/html')


@board_bp.route('/api', methods=['GET'])
def board_feed():
    """
    JSON feed of the current snapshot.

    Shape: {"aircraft": [...], "last_update": str, "count": int}
    """
    return jsonify(_store().read().to_dict())


@board_bp.route('/api/status', methods=['GET'])
def board_status():
    """
    Get ingestion and store status.

    Returns:
    - Pipeline statistics (cycle counts, errors, timings)
    - Snapshot store statistics
    - Watched region and polling configuration
    """
    start_time = time.perf_counter()

    pipeline = current_app.config.get('INGESTION_PIPELINE')
    pipeline_stats = pipeline.stats if pipeline else {'running': False}
    store_stats = _store().stats
    region = current_app.config['REGION']

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'status': 'healthy' if (pipeline_stats.get('running') and not store_stats['error']) else 'degraded',
        'ingestion': pipeline_stats,
        'snapshot': store_stats,
        'region': {
            'name': region.name,
            'lat_min': region.lat_min,
            'lon_min': region.lon_min,
            'lat_max': region.lat_max,
            'lon_max': region.lon_max,
        },
        'config': {
            'poll_interval': config.ingestion.poll_interval,
            'request_timeout': config.ingestion.request_timeout,
        },
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })
