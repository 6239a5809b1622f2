"""Tests for OpenSky state extraction and the states client."""

import pytest
import requests

from skyboard.ingestion import BoundingBox, TrackedAircraft, extract_tracked_aircraft
from tests.helpers import OPENSKY_URL, TEST_REGION, make_response


class TestExtractTrackedAircraft:
    """Tests for extract_tracked_aircraft."""

    def test_uppercases_and_trims(self):
        result = extract_tracked_aircraft([['4008f6', 'BA123   ', 'United Kingdom']])
        assert result == [TrackedAircraft(identifier='4008F6', callsign='BA123')]

    def test_duplicates_case_insensitive_first_wins(self):
        rows = [
            ['4008f6', 'BAW1 '],
            ['4008F6', 'BAW2 '],
            ['3c6444', 'DLH4 '],
        ]
        result = extract_tracked_aircraft(rows)
        assert [a.identifier for a in result] == ['3C6444', '4008F6']
        assert result[1].callsign == 'BAW1'

    def test_sorted_by_identifier(self):
        rows = [['c0ffee', ''], ['000001', ''], ['a1b2c3', ''], ['40621d', '']]
        result = extract_tracked_aircraft(rows)
        identifiers = [a.identifier for a in result]
        assert identifiers == sorted(identifiers)

    def test_idempotent(self):
        rows = [['abc123', 'EZY1 '], ['abc123', 'EZY2'], ['def456', None]]
        assert extract_tracked_aircraft(rows) == extract_tracked_aircraft(rows)

    def test_malformed_rows_skipped(self):
        rows = [
            ['bad'],
            [],
            None,
            'not-a-row',
            ['', 'EZY1'],
            [None, 'EZY2'],
            [12345, 'EZY3'],
            ['   ', 'EZY4'],
            ['4ca7b4', 'RYR9 '],
        ]
        result = extract_tracked_aircraft(rows)
        assert result == [TrackedAircraft(identifier='4CA7B4', callsign='RYR9')]

    def test_missing_callsign_is_empty(self):
        result = extract_tracked_aircraft([['4ca7b4', None], ['4ca7b5', '   ']])
        assert [a.callsign for a in result] == ['', '']

    @pytest.mark.parametrize('rows', [None, []])
    def test_empty_payload(self, rows):
        assert extract_tracked_aircraft(rows) == []


class TestBoundingBox:
    def test_params_from_region(self):
        bbox = BoundingBox.from_region(TEST_REGION)
        assert bbox.to_params() == {
            'lamin': 51.50,
            'lomin': -0.50,
            'lamax': 51.80,
            'lomax': 0.20,
        }


class TestOpenSkyClient:
    """Tests for OpenSkyClient.get_tracked_aircraft with a mocked session."""

    def test_fetches_bbox_and_extracts(self, opensky_client, upstream, session):
        upstream.states = make_response(200, {
            'time': 1700000000,
            'states': [
                ['4008f6', 'BA123   ', 'United Kingdom', 1700000000, 1700000000, -0.2, 51.6],
                ['3c6444', 'DLH4    ', 'Germany', 1700000000, 1700000000, -0.1, 51.7],
            ],
        })

        bbox = BoundingBox.from_region(TEST_REGION)
        result = opensky_client.get_tracked_aircraft(bbox)

        assert [a.identifier for a in result] == ['3C6444', '4008F6']
        session.get.assert_called_once_with(
            f'{OPENSKY_URL}/states/all',
            params=bbox.to_params(),
            timeout=10,
        )

    def test_null_states_means_no_aircraft(self, opensky_client, upstream):
        upstream.states = make_response(200, {'time': 1700000000, 'states': None})
        assert opensky_client.get_tracked_aircraft(BoundingBox.from_region(TEST_REGION)) == []

    def test_non_success_status_raises(self, opensky_client, upstream):
        upstream.states = make_response(503, {'error': 'unavailable'})
        with pytest.raises(requests.HTTPError):
            opensky_client.get_tracked_aircraft(BoundingBox.from_region(TEST_REGION))

    def test_rate_limited_raises(self, opensky_client, upstream):
        upstream.states = make_response(429)
        with pytest.raises(requests.HTTPError):
            opensky_client.get_tracked_aircraft(BoundingBox.from_region(TEST_REGION))

    def test_timeout_raises(self, opensky_client, upstream):
        upstream.states = requests.exceptions.Timeout('read timed out')
        with pytest.raises(requests.exceptions.Timeout):
            opensky_client.get_tracked_aircraft(BoundingBox.from_region(TEST_REGION))

    def test_undecodable_body_raises(self, opensky_client, upstream):
        upstream.states = make_response(200, body=b'<html>maintenance</html>')
        with pytest.raises((requests.RequestException, ValueError)):
            opensky_client.get_tracked_aircraft(BoundingBox.from_region(TEST_REGION))

    def test_non_object_payload_raises(self, opensky_client, upstream):
        upstream.states = make_response(200, [['4008f6', 'BA123']])
        with pytest.raises(ValueError):
            opensky_client.get_tracked_aircraft(BoundingBox.from_region(TEST_REGION))

    @pytest.mark.parametrize('states', [5, True, 3.5, 'abc'])
    def test_non_list_states_raises(self, opensky_client, upstream, states):
        upstream.states = make_response(200, {'time': 1700000000, 'states': states})
        with pytest.raises(ValueError):
            opensky_client.get_tracked_aircraft(BoundingBox.from_region(TEST_REGION))
