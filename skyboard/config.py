"""
Configuration management for SkyBoard.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# (display name, (lamin, lomin, lamax, lomax))
REGION_PRESETS: Dict[str, Tuple[str, Tuple[float, float, float, float]]] = {
    'north_london': ('North London', (51.50, -0.50, 51.80, 0.20)),
    'london': ('London', (51.30, -0.50, 51.70, 0.30)),
}

DEFAULT_REGION = 'north_london'


def _parse_bounds(value: str) -> Optional[Tuple[float, float, float, float]]:
    """Parse 'lamin,lomin,lamax,lomax' string into tuple, or None if empty/invalid."""
    if not value:
        return None
    try:
        lamin, lomin, lamax, lomax = (float(part.strip()) for part in value.split(','))
    except (ValueError, AttributeError):
        logger.warning(f'Ignoring malformed BBOX value: {value!r}')
        return None

    if lamin >= lamax or lomin >= lomax:
        logger.warning(f'Ignoring BBOX with inverted bounds: {value!r}')
        return None
    return (lamin, lomin, lamax, lomax)


def _resolve_region(key: str) -> Tuple[str, Tuple[float, float, float, float]]:
    """Look up a region preset, falling back to the default one."""
    preset = REGION_PRESETS.get(key.strip().lower())
    if preset is None:
        logger.warning(f'Unknown REGION {key!r}, using {DEFAULT_REGION}')
        preset = REGION_PRESETS[DEFAULT_REGION]
    return preset


@dataclass(frozen=True)
class RegionConfig:
    """Geographic bounding box watched by this instance."""
    name: str
    lat_min: float
    lon_min: float
    lat_max: float
    lon_max: float

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return (self.lat_min, self.lon_min, self.lat_max, self.lon_max)


@dataclass(frozen=True)
class OpenSkyConfig:
    """OpenSky API configuration."""
    base_url: str = os.getenv('OPENSKY_BASE_URL', 'https://opensky-network.org/api')


@dataclass(frozen=True)
class AdsbdbConfig:
    """adsbdb API configuration for aircraft and route metadata."""
    base_url: str = os.getenv('ADSBDB_BASE_URL', 'https://api.adsbdb.com/v0')


@dataclass(frozen=True)
class IngestionConfig:
    """Acquisition cycle settings."""
    poll_interval: int = int(os.getenv('POLL_INTERVAL_SECONDS', '300'))
    request_timeout: float = float(os.getenv('REQUEST_TIMEOUT_SECONDS', '10'))


@dataclass(frozen=True)
class BoardConfig:
    """Read surface settings."""
    page_refresh_seconds: int = int(os.getenv('PAGE_REFRESH_SECONDS', '60'))


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    region: RegionConfig
    opensky: OpenSkyConfig
    adsbdb: AdsbdbConfig
    ingestion: IngestionConfig
    board: BoardConfig

    # Flask settings
    port: int
    debug: bool


def load_region() -> RegionConfig:
    """Build the region from REGION, with BBOX and REGION_NAME overrides."""
    name, bounds = _resolve_region(os.getenv('REGION', DEFAULT_REGION))
    bounds = _parse_bounds(os.getenv('BBOX', '')) or bounds
    name = os.getenv('REGION_NAME') or name

    lat_min, lon_min, lat_max, lon_max = bounds
    return RegionConfig(
        name=name,
        lat_min=lat_min,
        lon_min=lon_min,
        lat_max=lat_max,
        lon_max=lon_max,
    )


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        region=load_region(),
        opensky=OpenSkyConfig(),
        adsbdb=AdsbdbConfig(),
        ingestion=IngestionConfig(),
        board=BoardConfig(),
        port=int(os.getenv('PORT', '4545')),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
    )


# Singleton instance
config = load_config()
