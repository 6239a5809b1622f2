"""Tests for region configuration."""

import pytest

from skyboard.config import REGION_PRESETS, load_region


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('REGION', 'BBOX', 'REGION_NAME'):
        monkeypatch.delenv(name, raising=False)


class TestLoadRegion:
    def test_default_is_north_london(self):
        region = load_region()
        assert region.name == 'North London'
        assert region.bounds == (51.50, -0.50, 51.80, 0.20)

    def test_london_preset(self, monkeypatch):
        monkeypatch.setenv('REGION', 'London')
        region = load_region()
        assert region.bounds == REGION_PRESETS['london'][1]

    def test_unknown_region_falls_back(self, monkeypatch):
        monkeypatch.setenv('REGION', 'atlantis')
        assert load_region().name == 'North London'

    def test_bbox_override(self, monkeypatch):
        monkeypatch.setenv('BBOX', '48.7, 2.2, 49.0, 2.6')
        monkeypatch.setenv('REGION_NAME', 'Paris')
        region = load_region()
        assert region.name == 'Paris'
        assert region.bounds == (48.7, 2.2, 49.0, 2.6)

    @pytest.mark.parametrize('value', ['1,2,3', 'a,b,c,d', '51.8,-0.5,51.5,0.2'])
    def test_invalid_bbox_ignored(self, monkeypatch, value):
        monkeypatch.setenv('BBOX', value)
        assert load_region().bounds == (51.50, -0.50, 51.80, 0.20)
