"""
External integration services.

Handles adsbdb lookups and merges their results into board records,
degrading gracefully when route data is unavailable.
"""

from skyboard.services.adsbdb import (
    AdsbdbClient,
    AircraftInfo,
    AircraftLookup,
    Airport,
    FlightRoute,
    LookupStatus,
    RouteLookup,
)
from skyboard.services.enrichment import MetadataEnricher, assemble_record

__all__ = [
    'AdsbdbClient',
    'AircraftInfo',
    'AircraftLookup',
    'Airport',
    'FlightRoute',
    'LookupStatus',
    'RouteLookup',
    'MetadataEnricher',
    'assemble_record',
]
