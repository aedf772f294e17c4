"""Repository for cool zones found by the nearby-places search."""

import sqlite3

from heatshield.models.zones import Coordinate, CoolZone, CoolZoneType


def replace_detected_zones(
    conn: sqlite3.Connection, center: Coordinate, zones: list[CoolZone]
) -> int:
    """Replace the stored search results with a new set. Returns rows written."""
    conn.execute("DELETE FROM detected_zones")
    conn.executemany(
        "INSERT INTO detected_zones "
        "(search_latitude, search_longitude, name, zone_type, latitude, longitude, "
        "open_24_hours, description, verified, phone, url) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        [
            (
                center.latitude, center.longitude, z.name, z.zone_type.value,
                z.coordinate.latitude, z.coordinate.longitude,
                int(z.open_24_hours), z.description, int(z.verified),
                z.phone, z.url,
            )
            for z in zones
        ],
    )
    conn.commit()
    return len(zones)


def get_detected_zones(conn: sqlite3.Connection) -> list[CoolZone]:
    rows = conn.execute("SELECT * FROM detected_zones ORDER BY id").fetchall()
    return [
        CoolZone(
            name=r["name"],
            zone_type=CoolZoneType(r["zone_type"]),
            coordinate=Coordinate(r["latitude"], r["longitude"]),
            open_24_hours=bool(r["open_24_hours"]),
            description=r["description"],
            verified=bool(r["verified"]),
            phone=r["phone"],
            url=r["url"],
        )
        for r in rows
    ]
