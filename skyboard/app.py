"""
SkyBoard Flask Application.

Main entry point for the web application. Initializes:
- Snapshot store
- Ingestion pipeline (background thread, first cycle immediately)
- Board routes

Usage:
    python -m skyboard.app

Or with gunicorn (single worker, the pipeline lives in-process):
    gunicorn -w 1 'skyboard.app:create_app()'
"""

import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from skyboard.api import board_bp
from skyboard.config import RegionConfig, config
from skyboard.ingestion import BoundingBox, IngestionPipeline
from skyboard.store import SnapshotStore

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False) -> None:
    """Configure root logging for the process."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def create_app(
    store: Optional[SnapshotStore] = None,
    pipeline: Optional[IngestionPipeline] = None,
    region: Optional[RegionConfig] = None,
    start_ingestion: bool = True,
) -> Flask:
    """
    Application factory for Flask.

    Args:
        store: Snapshot store shared with the pipeline (new one if None)
        pipeline: Ingestion pipeline writing to store (built from config if None)
        region: Watched region shown on the board (configured region if None)
        start_ingestion: Whether to start the background ingestion pipeline.
                        Set to False for testing.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)
    # Keep feed keys in column order
    app.json.sort_keys = False

    # Enable CORS for the JSON feed
    CORS(app, resources={r'/api*': {'origins': '*'}})

    store = store or SnapshotStore()
    region = region or config.region

    if pipeline is None and start_ingestion:
        pipeline = IngestionPipeline(store=store, bbox=BoundingBox.from_region(region))

    app.config['SNAPSHOT_STORE'] = store
    app.config['REGION'] = region
    app.config['INGESTION_PIPELINE'] = pipeline

    app.register_blueprint(board_bp)

    if start_ingestion and pipeline is not None:
        pipeline.start_background()
        logger.info(
            f'Ingestion started for {region.name} '
            f'(lat {region.lat_min}..{region.lat_max}, lon {region.lon_min}..{region.lon_max})'
        )

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    return app


def run_server():
    """Run the web server with ingestion in the background."""
    configure_logging(config.debug)

    app = create_app()
    port = config.port

    logger.info(f'Starting SkyBoard on http://localhost:{port}')
    logger.info(f'Board view: http://localhost:{port}/')
    logger.info(f'API endpoint: http://localhost:{port}/api')

    app.run(
        host='0.0.0.0',
        port=port,
        debug=config.debug,
        use_reloader=False,  # Disable reloader to prevent duplicate pipeline threads
    )


if __name__ == '__main__':
    run_server()
