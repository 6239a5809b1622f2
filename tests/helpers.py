"""Canned adsbdb/OpenSky responses and a fake upstream for a mocked HTTP session."""

import json

import requests

from skyboard.config import RegionConfig

OPENSKY_URL = 'https://opensky.test/api'
ADSBDB_URL = 'https://adsbdb.test/v0'

TEST_REGION = RegionConfig(
    name='North London',
    lat_min=51.50,
    lon_min=-0.50,
    lat_max=51.80,
    lon_max=0.20,
)


def make_response(status_code: int, payload=None, body: bytes = None) -> requests.Response:
    """Build a real requests.Response carrying a JSON (or raw) body."""
    response = requests.Response()
    response.status_code = status_code
    response.url = 'https://test.invalid/'
    if body is None:
        body = json.dumps(payload).encode() if payload is not None else b''
    response._content = body
    return response


def aircraft_payload(mode_s='4008F6', registration='G-VROS', **overrides) -> dict:
    aircraft = {
        'type': '747 400',
        'icao_type': 'B744',
        'manufacturer': 'Boeing',
        'mode_s': mode_s,
        'registration': registration,
        'registered_owner_country_iso_name': 'GB',
        'registered_owner_country_name': 'United Kingdom',
        'registered_owner_operator_flag_code': 'VIR',
        'registered_owner': 'Virgin Atlantic Airways',
        'url_photo': None,
        'url_photo_thumbnail': None,
    }
    aircraft.update(overrides)
    return {'response': {'aircraft': aircraft}}


def airport(name, icao, iata):
    return {
        'country_iso_name': 'GB',
        'country_name': 'United Kingdom',
        'elevation': 83,
        'iata_code': iata,
        'icao_code': icao,
        'latitude': 51.47,
        'longitude': -0.46,
        'municipality': 'London',
        'name': name,
    }


def route_payload(callsign='BAW123', mode_s='4008F6') -> dict:
    return {
        'response': {
            'aircraft': aircraft_payload(mode_s=mode_s)['response']['aircraft'],
            'flightroute': {
                'callsign': callsign,
                'callsign_icao': callsign,
                'callsign_iata': None,
                'origin': airport('London Heathrow Airport', 'EGLL', 'LHR'),
                'destination': airport('John F Kennedy International Airport', 'KJFK', 'JFK'),
            },
        }
    }


class FakeUpstream:
    """
    Routes session.get() calls to canned responses.

    states:    value returned for /states/all (Response, or exception to raise)
    aircraft:  identifier -> Response / exception for the metadata lookup
    routes:    identifier -> Response / exception for the callsign lookup
    """

    def __init__(self):
        self.states = make_response(200, {'time': 1700000000, 'states': []})
        self.aircraft = {}
        self.routes = {}
        self.calls = []

    def get(self, url, params=None, timeout=None, **kwargs):
        self.calls.append((url, dict(params or {})))

        if url.endswith('/states/all'):
            return self._resolve(self.states)

        identifier = url.rsplit('/', 1)[-1]
        if params and 'callsign' in params:
            result = self.routes.get(identifier, make_response(404, {'response': 'unknown callsign'}))
        else:
            result = self.aircraft.get(identifier, make_response(404, {'response': 'unknown aircraft'}))
        return self._resolve(result)

    @staticmethod
    def _resolve(result):
        if isinstance(result, BaseException):
            raise result
        return result

    def route_calls(self):
        return [c for c in self.calls if 'callsign' in c[1]]
