"""
Ingestion pipeline - orchestrates data flow from OpenSky to the board.

Pipeline stages, run once per cycle:
1. Fetch: Poll OpenSky for the aircraft inside the bounding box
2. Enrich: Resolve each aircraft against adsbdb, one at a time
3. Publish: Swap a new Snapshot into the SnapshotStore

Cycles never overlap. The background loop runs them back to back, and
run_cycle() holds a lock so a manual trigger waits for the running cycle
to publish before it starts.
"""

import logging
import threading
import time
from datetime import datetime
from typing import Callable, List, Optional

import requests

from skyboard.config import config
from skyboard.ingestion.opensky_client import BoundingBox, OpenSkyClient
from skyboard.services.enrichment import MetadataEnricher
from skyboard.store import AircraftRecord, Snapshot, SnapshotStore

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


class IngestionPipeline:
    """
    Manages the acquisition, enrichment and publish lifecycle.

    Can run as a background thread for continuous polling.
    """

    def __init__(
        self,
        store: SnapshotStore,
        client: Optional[OpenSkyClient] = None,
        enricher: Optional[MetadataEnricher] = None,
        bbox: Optional[BoundingBox] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the ingestion pipeline.

        Args:
            store: Snapshot store that receives each cycle's result
            client: OpenSky API client (created from config if None)
            enricher: adsbdb enricher (created from config if None)
            bbox: Region to watch (configured region if None)
            clock: Source of cycle start times
        """
        self.store = store
        self.client = client or OpenSkyClient.from_config()
        self.enricher = enricher or MetadataEnricher()
        self.bbox = bbox or BoundingBox.from_region(config.region)
        self._clock = clock

        self._cycle_lock = threading.Lock()

        # State tracking
        self._running = False
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._last_cycle_time: float = 0
        self._last_cycle_duration: float = 0
        self._cycle_count: int = 0
        self._error_count: int = 0

    @property
    def is_running_cycle(self) -> bool:
        """True while a cycle is in progress."""
        return self._cycle_lock.locked()

    def run_cycle(self) -> Snapshot:
        """
        Execute one acquisition-enrichment-publish cycle.

        Always publishes a snapshot, even when OpenSky is unreachable or
        the cycle fails unexpectedly.
        Returns the published snapshot.
        """
        with self._cycle_lock:
            started = time.perf_counter()
            timestamp = self._clock().strftime(TIMESTAMP_FORMAT)

            try:
                snapshot = self._build_snapshot(timestamp)
            except Exception:
                self._error_count += 1
                logger.exception('Cycle failed, publishing an empty snapshot')
                snapshot = Snapshot.failed(timestamp)

            self.store.replace(snapshot)

            self._cycle_count += 1
            self._last_cycle_time = time.time()
            self._last_cycle_duration = time.perf_counter() - started

        logger.info(
            f'Cycle {self._cycle_count} published {snapshot.count} aircraft '
            f'in {self._last_cycle_duration:.1f}s'
        )
        return snapshot

    def _build_snapshot(self, timestamp: str) -> Snapshot:
        logger.info(f'=== Aircraft check at {timestamp} ===')

        # Stage 1: Fetch from OpenSky
        try:
            tracked = self.client.get_tracked_aircraft(self.bbox)
        except (requests.RequestException, ValueError) as e:
            self._error_count += 1
            logger.error(f'Failed to fetch OpenSky states: {e}')
            return Snapshot.failed(timestamp)

        if not tracked:
            logger.info(f'No aircraft currently reported over {config.region.name}')
            return Snapshot(records=(), last_updated=timestamp)

        logger.info(f'Found {len(tracked)} aircraft, enriching via adsbdb')

        # Stage 2: Enrich sequentially, preserving identifier order
        records: List[AircraftRecord] = []
        for aircraft in tracked:
            record, ok = self.enricher.enrich(aircraft.identifier, aircraft.callsign, timestamp)
            if not ok:
                continue

            logger.info(
                f'Reg: {record.registration} | Owner: {record.owner} | '
                f'Manufacturer: {record.manufacturer} | Type: {record.type} | '
                f'Origin: {record.origin} | Destination: {record.destination}'
            )
            records.append(record)

        # Stage 3: Publish
        return Snapshot(records=tuple(records), last_updated=timestamp)

    def run_continuous(self, interval: Optional[float] = None) -> None:
        """
        Run cycles continuously, the first one immediately.

        This method blocks - use start_background() for non-blocking.
        """
        if interval is None:
            interval = config.ingestion.poll_interval
        self._running = True

        logger.info(f'Starting continuous ingestion (interval={interval}s)')

        while self._running:
            try:
                self.run_cycle()
            except Exception:
                logger.exception('Ingestion cycle failed')

            if self._stop_event.wait(interval):
                break

        self._running = False
        logger.info('Ingestion stopped')

    def start_background(self, interval: Optional[float] = None) -> None:
        """Start ingestion in background thread."""
        if self._thread and self._thread.is_alive():
            logger.warning('Ingestion already running')
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run_continuous,
            args=(interval,),
            name='skyboard-ingestion',
            daemon=True,
        )
        self._thread.start()
        logger.info('Background ingestion started')

    def stop(self, timeout: float = 5) -> None:
        """Stop background ingestion."""
        self._running = False
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=timeout)

    @property
    def stats(self) -> dict:
        """Get ingestion statistics."""
        return {
            'cycle_count': self._cycle_count,
            'error_count': self._error_count,
            'last_cycle_time': self._last_cycle_time,
            'last_cycle_duration': round(self._last_cycle_duration, 3),
            'cycle_in_progress': self.is_running_cycle,
            'running': self._running,
        }
