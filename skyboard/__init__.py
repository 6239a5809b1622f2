"""
SkyBoard Package.

Live departures board for the aircraft over one region, built with Flask
and requests.

Modules:
    api/         Read-only board endpoints (HTML page, JSON feed, status)
    ingestion/   OpenSky acquisition and the cycle pipeline
    services/    adsbdb lookups and record enrichment
    store.py     Thread-safe holder of the published snapshot
    config.py    Centralized configuration from environment variables
"""

__version__ = '1.0.0'
