"""
adsbdb client - registry metadata and flight routes.

Two lookups are made per aircraft:
- /aircraft/<mode_s>                      registration, owner, manufacturer, type
- /aircraft/<mode_s>?callsign=<callsign>  the same payload plus the flight route

Neither lookup raises. Each returns a result tagged with a LookupStatus so
the caller can tell a missing record (404) apart from a transport or
decoding failure, and decide which of the two is fatal for the aircraft.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests

from skyboard.config import config

logger = logging.getLogger(__name__)


class LookupStatus(str, Enum):
    """Outcome of a single adsbdb lookup."""
    FOUND = 'found'
    NOT_FOUND = 'not_found'
    ERROR = 'error'


@dataclass(frozen=True)
class AircraftInfo:
    """Registry metadata for one airframe."""
    mode_s: str = ''
    registration: str = ''
    manufacturer: str = ''
    type: str = ''
    icao_type: str = ''
    registered_owner: str = ''
    registered_owner_country_name: str = ''
    url_photo: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> 'AircraftInfo':
        return cls(
            mode_s=payload.get('mode_s') or '',
            registration=payload.get('registration') or '',
            manufacturer=payload.get('manufacturer') or '',
            type=payload.get('type') or '',
            icao_type=payload.get('icao_type') or '',
            registered_owner=payload.get('registered_owner') or '',
            registered_owner_country_name=payload.get('registered_owner_country_name') or '',
            url_photo=payload.get('url_photo'),
        )


@dataclass(frozen=True)
class Airport:
    """Origin or destination airport of a route."""
    name: str = ''
    icao_code: str = ''
    iata_code: str = ''
    municipality: str = ''
    country_name: str = ''

    @classmethod
    def from_payload(cls, payload: Optional[dict]) -> 'Airport':
        payload = payload or {}
        return cls(
            name=payload.get('name') or '',
            icao_code=payload.get('icao_code') or '',
            iata_code=payload.get('iata_code') or '',
            municipality=payload.get('municipality') or '',
            country_name=payload.get('country_name') or '',
        )

    @property
    def is_complete(self) -> bool:
        """True when both the name and ICAO code are known."""
        return bool(self.name and self.icao_code)

    @property
    def label(self) -> str:
        """Board label, e.g. 'London Heathrow Airport (EGLL)'."""
        return f'{self.name} ({self.icao_code})'


@dataclass(frozen=True)
class FlightRoute:
    """Route flown under a callsign."""
    callsign: str
    origin: Airport
    destination: Airport

    @classmethod
    def from_payload(cls, payload: dict) -> 'FlightRoute':
        return cls(
            callsign=payload.get('callsign') or '',
            origin=Airport.from_payload(payload.get('origin')),
            destination=Airport.from_payload(payload.get('destination')),
        )


@dataclass(frozen=True)
class AircraftLookup:
    """Result of an aircraft metadata lookup."""
    status: LookupStatus
    aircraft: Optional[AircraftInfo] = None
    detail: str = ''

    @property
    def ok(self) -> bool:
        return self.status is LookupStatus.FOUND


@dataclass(frozen=True)
class RouteLookup:
    """Result of a route lookup."""
    status: LookupStatus
    route: Optional[FlightRoute] = None
    detail: str = ''

    @property
    def ok(self) -> bool:
        return self.status is LookupStatus.FOUND


class AdsbdbClient:
    """
    Client for the public adsbdb API.

    No authentication and no local caching: every call goes to the API
    and is bounded by the configured timeout.
    """

    def __init__(
        self,
        base_url: str = 'https://api.adsbdb.com/v0',
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, session: Optional[requests.Session] = None) -> 'AdsbdbClient':
        """Create client from application configuration."""
        return cls(
            base_url=config.adsbdb.base_url,
            timeout=config.ingestion.request_timeout,
            session=session,
        )

    def lookup_aircraft(self, identifier: str) -> AircraftLookup:
        """
        Look up registry metadata for a Mode S identifier.

        404 maps to NOT_FOUND; any other non-200 status, transport error,
        undecodable body or empty aircraft record maps to ERROR.
        """
        url = f'{self.base_url}/aircraft/{identifier}'

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            return AircraftLookup(LookupStatus.ERROR, detail=f'request failed: {e}')

        if response.status_code == 404:
            return AircraftLookup(
                LookupStatus.NOT_FOUND,
                detail=f'unknown aircraft ({identifier}): {_unknown_reason(response)}',
            )
        if response.status_code != 200:
            return AircraftLookup(
                LookupStatus.ERROR,
                detail=f'unexpected status {response.status_code} for {identifier}',
            )

        try:
            payload = response.json()['response']['aircraft']
            aircraft = AircraftInfo.from_payload(payload)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            return AircraftLookup(LookupStatus.ERROR, detail=f'undecodable aircraft payload: {e}')

        if not aircraft.mode_s and not aircraft.registration:
            return AircraftLookup(LookupStatus.ERROR, detail='empty aircraft payload')

        return AircraftLookup(LookupStatus.FOUND, aircraft=aircraft)

    def lookup_route(self, identifier: str, callsign: str) -> RouteLookup:
        """
        Look up the route for an aircraft flying under callsign.

        No request is made without a callsign.
        """
        if not callsign:
            return RouteLookup(LookupStatus.ERROR, detail='no callsign available for route lookup')

        url = f'{self.base_url}/aircraft/{identifier}'

        try:
            response = self.session.get(
                url,
                params={'callsign': callsign},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            return RouteLookup(LookupStatus.ERROR, detail=f'request failed: {e}')

        if response.status_code == 404:
            return RouteLookup(
                LookupStatus.NOT_FOUND,
                detail=f'flight route not found for callsign {callsign}',
            )
        if response.status_code != 200:
            return RouteLookup(
                LookupStatus.ERROR,
                detail=f'unexpected status {response.status_code} for callsign {callsign}',
            )

        try:
            payload = response.json()['response'].get('flightroute')
            if not payload:
                return RouteLookup(
                    LookupStatus.NOT_FOUND,
                    detail=f'no flight route in response for callsign {callsign}',
                )
            route = FlightRoute.from_payload(payload)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            return RouteLookup(LookupStatus.ERROR, detail=f'undecodable route payload: {e}')

        if not (route.origin.is_complete and route.destination.is_complete):
            return RouteLookup(
                LookupStatus.NOT_FOUND,
                detail=f'incomplete flight route for callsign {callsign}',
            )

        return RouteLookup(LookupStatus.FOUND, route=route)


def _unknown_reason(response: requests.Response) -> str:
    """Best-effort read of the 404 body, e.g. {"response": "unknown aircraft"}."""
    try:
        reason = response.json().get('response')
    except (ValueError, AttributeError):
        return ''
    return reason if isinstance(reason, str) else ''
