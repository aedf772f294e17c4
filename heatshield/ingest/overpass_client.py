"""OpenStreetMap Overpass API client for nearby cool-zone candidates."""

import httpx

from heatshield.ingest.retry import RetryPolicy, send_with_retry
from heatshield.models.zones import Coordinate, CoolZoneType

OVERPASS_URL = "https://overpass-api.de/api/interpreter"

# One OSM tag per searchable category
CATEGORY_TAGS: dict[CoolZoneType, tuple[str, str]] = {
    CoolZoneType.MALL: ("shop", "mall"),
    CoolZoneType.PARK: ("leisure", "park"),
    CoolZoneType.LIBRARY: ("amenity", "library"),
    CoolZoneType.COMMUNITY: ("amenity", "community_centre"),
}


def build_query(category: CoolZoneType, center: Coordinate, radius_m: int, timeout: int = 25) -> str:
    key, value = CATEGORY_TAGS[category]
    around = f"(around:{radius_m},{center.latitude},{center.longitude})"
    return (
        f"[out:json][timeout:{timeout}];\n"
        f"(\n"
        f'  node["{key}"="{value}"]{around};\n'
        f'  way["{key}"="{value}"]{around};\n'
        f");\n"
        f"out center;"
    )


def parse_elements(data: dict) -> list[dict]:
    """Extract named places from an Overpass response.

    Nodes carry lat/lon directly, ways carry them in ``center``. Unnamed
    elements and elements without coordinates are skipped.
    """
    places = []
    for element in data.get("elements", []):
        tags = element.get("tags", {})
        name = tags.get("name")
        if not name:
            continue
        if element.get("type") == "node":
            lat, lon = element.get("lat"), element.get("lon")
        elif "center" in element:
            lat, lon = element["center"].get("lat"), element["center"].get("lon")
        else:
            continue
        if lat is None or lon is None:
            continue
        places.append({
            "name": name,
            "latitude": float(lat),
            "longitude": float(lon),
            "phone": tags.get("phone") or tags.get("contact:phone"),
            "url": tags.get("website") or tags.get("contact:website"),
        })
    return places


class OverpassClient:
    def __init__(
        self,
        base_url: str = OVERPASS_URL,
        timeout: float = 25.0,
        max_retries: int = 2,
        retry_base_delay: float = 2.0,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.retry = RetryPolicy(max_retries, retry_base_delay)

    def search(self, category: CoolZoneType, center: Coordinate, radius_m: int) -> list[dict]:
        """Named places of one category within ``radius_m`` of ``center``."""
        query = build_query(category, center, radius_m, timeout=int(self.timeout))
        resp = send_with_retry(
            lambda: httpx.post(self.base_url, data={"data": query}, timeout=self.timeout),
            self.retry,
            f"Overpass {category.value}",
        )
        return parse_elements(resp.json())
