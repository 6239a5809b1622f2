"""Shared fixtures: a mocked HTTP session wired to FakeUpstream."""

from datetime import datetime
from unittest import mock

import pytest
import requests

from skyboard.ingestion import BoundingBox, IngestionPipeline, OpenSkyClient
from skyboard.services import AdsbdbClient, MetadataEnricher
from skyboard.store import SnapshotStore
from tests.helpers import ADSBDB_URL, OPENSKY_URL, TEST_REGION, FakeUpstream


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def session(upstream):
    s = mock.Mock(spec=requests.Session)
    s.get.side_effect = upstream.get
    return s


@pytest.fixture
def opensky_client(session):
    return OpenSkyClient(base_url=OPENSKY_URL, timeout=10, session=session)


@pytest.fixture
def adsbdb_client(session):
    return AdsbdbClient(base_url=ADSBDB_URL, timeout=10, session=session)


@pytest.fixture
def store():
    return SnapshotStore()


@pytest.fixture
def pipeline(store, opensky_client, adsbdb_client):
    return IngestionPipeline(
        store=store,
        client=opensky_client,
        enricher=MetadataEnricher(adsbdb_client),
        bbox=BoundingBox.from_region(TEST_REGION),
        clock=lambda: datetime(2025, 6, 15, 8, 30, 0),
    )
