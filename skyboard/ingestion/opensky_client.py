"""
OpenSky Network API client.

Handles communication with the OpenSky REST API:
- Bounding box queries for the configured region
- Extraction of (icao24, callsign) pairs from raw state vectors
- Error logging, with failures re-raised to the pipeline

OpenSky state vector format (array indices):
0: icao24          - ICAO24 hex address
1: callsign        - Callsign (8 chars max, space padded)
2: origin_country  - Country of registration
3: time_position   - Unix timestamp of last position update
4: last_contact    - Unix timestamp of last message
5: longitude       - WGS84 longitude
6: latitude        - WGS84 latitude
7: baro_altitude   - Barometric altitude (meters)
8: on_ground       - Boolean
...
Only the first two positions are used here; the rest are ignored.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

import requests

from skyboard.config import RegionConfig, config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundingBox:
    """
    Geographic bounding box for API queries.

    OpenSky expects: lamin, lomin, lamax, lomax
    (latitude min, longitude min, latitude max, longitude max)
    """
    lat_min: float
    lon_min: float
    lat_max: float
    lon_max: float

    @classmethod
    def from_region(cls, region: RegionConfig) -> 'BoundingBox':
        return cls(
            lat_min=region.lat_min,
            lon_min=region.lon_min,
            lat_max=region.lat_max,
            lon_max=region.lon_max,
        )

    def to_params(self) -> dict:
        """Convert to OpenSky API query parameters."""
        return {
            'lamin': self.lat_min,
            'lomin': self.lon_min,
            'lamax': self.lat_max,
            'lomax': self.lon_max,
        }


@dataclass(frozen=True)
class TrackedAircraft:
    """
    An aircraft seen inside the bounding box during one acquisition.

    identifier is the upper-case ICAO24 address (adsbdb expects upper case,
    OpenSky reports lower case). callsign is stripped and may be empty.
    """
    identifier: str
    callsign: str = ''

    @classmethod
    def from_row(cls, row: Any) -> Optional['TrackedAircraft']:
        """
        Parse a raw OpenSky state row.

        Returns None if the row is malformed or has no identifier.
        """
        if not isinstance(row, (list, tuple)) or len(row) < 2:
            return None

        identifier = row[0]
        if not isinstance(identifier, str) or not identifier.strip():
            return None

        callsign = row[1] if isinstance(row[1], str) else ''

        return cls(
            identifier=identifier.strip().upper(),
            callsign=callsign.strip(),
        )


def extract_tracked_aircraft(rows: Optional[Iterable[Any]]) -> List[TrackedAircraft]:
    """
    Deduplicate raw state rows into aircraft sorted by identifier.

    The first row seen for an identifier wins. Malformed rows are skipped.
    """
    if not rows:
        return []

    seen = {}
    for row in rows:
        aircraft = TrackedAircraft.from_row(row)
        if aircraft is None:
            continue
        if aircraft.identifier in seen:
            continue
        seen[aircraft.identifier] = aircraft

    return sorted(seen.values(), key=lambda a: a.identifier)


class OpenSkyClient:
    """
    Client for the OpenSky Network states endpoint.

    Anonymous access only. Every request uses the configured timeout so
    a stalled upstream cannot hold a cycle open indefinitely.
    """

    def __init__(
        self,
        base_url: str = 'https://opensky-network.org/api',
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, session: Optional[requests.Session] = None) -> 'OpenSkyClient':
        """Create client from application configuration."""
        return cls(
            base_url=config.opensky.base_url,
            timeout=config.ingestion.request_timeout,
            session=session,
        )

    def get_tracked_aircraft(self, bbox: BoundingBox) -> List[TrackedAircraft]:
        """
        Fetch the aircraft currently inside bbox.

        Returns:
            Deduplicated aircraft sorted by identifier.

        Raises:
            requests.RequestException on network/API errors
            ValueError if the response body is not a JSON object
        """
        url = f'{self.base_url}/states/all'
        params = bbox.to_params()

        logger.debug(f'Fetching states: {url} params={params}')

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()

        except requests.exceptions.Timeout:
            logger.error('OpenSky API timeout')
            raise
        except requests.exceptions.HTTPError as e:
            if e.response is not None and e.response.status_code == 429:
                logger.warning('OpenSky rate limit exceeded')
            else:
                status = e.response.status_code if e.response is not None else '?'
                logger.error(f'OpenSky API error: {status}')
            raise
        except requests.exceptions.RequestException as e:
            logger.error(f'OpenSky request failed: {e}')
            raise

        if not isinstance(data, dict):
            logger.error('OpenSky returned an unexpected payload')
            raise ValueError('OpenSky states payload is not an object')

        rows = data.get('states')
        if rows is None:
            rows = []
        elif not isinstance(rows, list):
            logger.error(f'OpenSky states field has unexpected type {type(rows).__name__}')
            raise ValueError('OpenSky states field is not a list')

        aircraft = extract_tracked_aircraft(rows)

        logger.info(f'Received {len(rows)} state vectors from OpenSky, {len(aircraft)} distinct aircraft')

        return aircraft
