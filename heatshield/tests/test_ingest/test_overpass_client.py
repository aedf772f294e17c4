"""Tests for the Overpass client: query building, parsing and retries."""

import json
from pathlib import Path
from unittest.mock import patch
from urllib.parse import parse_qs

import httpx
import pytest
import respx

from heatshield.ingest.overpass_client import OverpassClient, build_query, parse_elements
from heatshield.models.zones import Coordinate, CoolZoneType

URL = "https://test-overpass.example.com/api/interpreter"
CENTER = Coordinate(25.6866, -100.3161)


@pytest.fixture
def overpass() -> OverpassClient:
    return OverpassClient(base_url=URL, timeout=10, max_retries=1, retry_base_delay=0.01)


@pytest.fixture
def parks_payload(fixtures_dir: Path) -> dict:
    return json.loads((fixtures_dir / "overpass_parks.json").read_text())


class TestBuildQuery:
    def test_park_query(self):
        q = build_query(CoolZoneType.PARK, CENTER, 1500)
        assert q.startswith("[out:json][timeout:25];")
        assert 'node["leisure"="park"](around:1500,25.6866,-100.3161);' in q
        assert 'way["leisure"="park"](around:1500,25.6866,-100.3161);' in q
        assert q.endswith("out center;")

    def test_community_tag(self):
        q = build_query(CoolZoneType.COMMUNITY, CENTER, 800, timeout=10)
        assert "[timeout:10]" in q
        assert '"amenity"="community_centre"' in q

    def test_hospital_not_searchable(self):
        with pytest.raises(KeyError):
            build_query(CoolZoneType.HOSPITAL, CENTER, 800)


class TestParseElements:
    def test_fixture(self, parks_payload: dict):
        places = parse_elements(parks_payload)
        assert [p["name"] for p in places] == ["Parque Fundidora", "Plaza Zaragoza"]
        assert places[0]["latitude"] == 25.6782
        assert places[0]["url"] == "https://www.parquefundidora.org"
        assert places[1]["longitude"] == -100.3170
        assert places[1]["phone"] is None

    def test_contact_tags(self):
        data = {
            "elements": [{
                "type": "node", "lat": 1.0, "lon": 2.0,
                "tags": {
                    "name": "Biblioteca Central",
                    "contact:phone": "+52 81 1234 5678",
                    "contact:website": "https://biblio.example.org",
                },
            }]
        }
        place = parse_elements(data)[0]
        assert place["phone"] == "+52 81 1234 5678"
        assert place["url"] == "https://biblio.example.org"

    def test_empty(self):
        assert parse_elements({}) == []


class TestSearch:
    @respx.mock
    def test_posts_query(self, overpass: OverpassClient, parks_payload: dict):
        route = respx.post(URL).mock(return_value=httpx.Response(200, json=parks_payload))
        places = overpass.search(CoolZoneType.PARK, CENTER, 1500)
        assert len(places) == 2
        body = parse_qs(route.calls[0].request.content.decode())
        assert 'way["leisure"="park"]' in body["data"][0]
        assert "[timeout:10]" in body["data"][0]

    @respx.mock
    def test_retry_on_429(self, overpass: OverpassClient, parks_payload: dict):
        route = respx.post(URL).mock(
            side_effect=[httpx.Response(429), httpx.Response(200, json=parks_payload)]
        )
        with patch("heatshield.ingest.retry.time.sleep"):
            places = overpass.search(CoolZoneType.PARK, CENTER, 1500)
        assert len(places) == 2
        assert route.call_count == 2

    @respx.mock
    def test_exhausted_retries(self, overpass: OverpassClient):
        respx.post(URL).mock(return_value=httpx.Response(503))
        with patch("heatshield.ingest.retry.time.sleep"), pytest.raises(
            httpx.HTTPStatusError
        ):
            overpass.search(CoolZoneType.MALL, CENTER, 1500)

    @respx.mock
    def test_timeout_raised(self, overpass: OverpassClient):
        respx.post(URL).mock(side_effect=httpx.ReadTimeout("slow"))
        with patch("heatshield.ingest.retry.time.sleep"), pytest.raises(
            httpx.ReadTimeout
        ):
            overpass.search(CoolZoneType.LIBRARY, CENTER, 1500)
