"""Zone searcher: finds nearby cool zones across all searchable categories."""

import logging
import time

import httpx

from heatshield.config.schema import HeatShieldConfig
from heatshield.ingest.overpass_client import CATEGORY_TAGS, OverpassClient
from heatshield.models.zones import Coordinate, CoolZone, CoolZoneType
from heatshield.zones.distance import haversine_m

logger = logging.getLogger(__name__)


class ZoneSearcher:
    def __init__(self, config: HeatShieldConfig, client: OverpassClient):
        self.config = config
        self.client = client

    @classmethod
    def from_config(cls, config: HeatShieldConfig) -> "ZoneSearcher":
        client = OverpassClient(
            base_url=config.zones.overpass_url,
            timeout=config.zones.timeout_seconds,
        )
        return cls(config, client)

    def search(
        self,
        center: Coordinate,
        categories: list[CoolZoneType] | None = None,
    ) -> list[CoolZone]:
        """Query each category around ``center`` and return zones nearest first.

        A category whose query fails is logged and skipped.
        """
        if categories is None:
            categories = list(CATEGORY_TAGS)
        radius = self.config.zones.search_radius_m

        found: list[CoolZone] = []
        for category in categories:
            if category not in CATEGORY_TAGS:
                logger.debug("No place search for category %s", category)
                continue
            try:
                places = self.client.search(category, center, radius)
            except (httpx.HTTPError, ValueError):
                logger.warning("Skipping %s search after error", category, exc_info=True)
                continue

            logger.info("Found %d %s places within %dm", len(places), category, radius)
            found.extend(_to_zone(category, p) for p in places)

            # Rate limiting
            delay_s = self.config.ops.request_delay_ms / 1000.0
            if delay_s > 0:
                time.sleep(delay_s)

        return sorted(found, key=lambda z: haversine_m(center, z.coordinate))


def _to_zone(category: CoolZoneType, place: dict) -> CoolZone:
    return CoolZone(
        name=place["name"],
        zone_type=category,
        coordinate=Coordinate(place["latitude"], place["longitude"]),
        open_24_hours=category.usually_open_24_hours,
        description=category.default_description,
        verified=True,
        phone=place.get("phone"),
        url=place.get("url"),
    )
