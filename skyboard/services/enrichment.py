"""
Aircraft enrichment - merges registry and route data into board records.

A failed aircraft lookup drops the aircraft from the cycle. A failed or
skipped route lookup keeps it, with origin and destination left as
'Unknown'.
"""

import logging
from typing import Optional, Tuple

from skyboard.services.adsbdb import AdsbdbClient, AircraftInfo, FlightRoute
from skyboard.store import UNKNOWN, AircraftRecord

logger = logging.getLogger(__name__)


def assemble_record(
    aircraft: AircraftInfo,
    route: Optional[FlightRoute],
    timestamp: str,
) -> AircraftRecord:
    """Build the display record for one aircraft."""
    origin = destination = UNKNOWN
    if route is not None:
        origin = route.origin.label
        destination = route.destination.label

    return AircraftRecord(
        registration=aircraft.registration,
        owner=aircraft.registered_owner,
        manufacturer=aircraft.manufacturer,
        type=aircraft.type,
        origin=origin,
        destination=destination,
        last_updated=timestamp,
    )


class MetadataEnricher:
    """Resolves one tracked aircraft into an AircraftRecord."""

    def __init__(self, client: Optional[AdsbdbClient] = None):
        self.client = client or AdsbdbClient.from_config()

    def enrich(
        self,
        identifier: str,
        callsign: str,
        timestamp: str = '',
    ) -> Tuple[Optional[AircraftRecord], bool]:
        """
        Enrich a single aircraft.

        Returns:
            (record, True) on success, (None, False) when the aircraft
            metadata could not be resolved.
        """
        lookup = self.client.lookup_aircraft(identifier)
        if not lookup.ok:
            logger.warning(f'{identifier} -> adsbdb aircraft {lookup.status.value}: {lookup.detail}')
            return None, False

        route = None
        if callsign:
            route_lookup = self.client.lookup_route(identifier, callsign)
            if route_lookup.ok:
                route = route_lookup.route
            else:
                logger.debug(f'{identifier} ({callsign}) -> no route: {route_lookup.detail}')

        return assemble_record(lookup.aircraft, route, timestamp), True
