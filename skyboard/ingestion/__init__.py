"""
Data ingestion module for SkyBoard.

Handles polling OpenSky for the aircraft in the watched region and
driving the enrich-and-publish cycle.
"""

from skyboard.ingestion.opensky_client import (
    BoundingBox,
    OpenSkyClient,
    TrackedAircraft,
    extract_tracked_aircraft,
)
from skyboard.ingestion.pipeline import IngestionPipeline

__all__ = [
    'BoundingBox',
    'OpenSkyClient',
    'TrackedAircraft',
    'extract_tracked_aircraft',
    'IngestionPipeline',
]
