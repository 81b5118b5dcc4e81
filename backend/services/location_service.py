"""Location listing and proximity lookups."""

import logging
from typing import Optional

import h3
from sqlalchemy import func
from sqlalchemy.orm import Session

from config import NEARBY_SEARCH_RINGS
from models.checkins import CheckinRecord
from models.location import Location
from services.errors import INVALID_COORDINATES, CoreError
from services.geo import haversine_distance, is_valid_coordinate


logger = logging.getLogger(__name__)

H3_RESOLUTION = 8


def register_location(
    db: Session,
    name: str,
    latitude: float,
    longitude: float,
    radius_m: int = 100,
    category: Optional[str] = None,
    description: Optional[str] = None,
    is_active: bool = True,
) -> Location:
    """Create a location with its H3 cell populated. Used by admin tooling and seeding."""
    if not is_valid_coordinate(latitude, longitude):
        raise CoreError(INVALID_COORDINATES, "Latitude/longitude out of range")
    if radius_m <= 0:
        raise ValueError("radius_m must be positive")

    location = Location(
        name=name,
        description=description,
        category=category,
        latitude=latitude,
        longitude=longitude,
        radius_m=radius_m,
        h3_res8=h3.latlng_to_cell(latitude, longitude, H3_RESOLUTION),
        is_active=is_active,
    )
    db.add(location)
    db.commit()
    db.refresh(location)

    logger.info("Registered location %s (%s) at cell %s", location.id, name, location.h3_res8)
    return location


class LocationService:
    """Location queries from one user's point of view."""

    def __init__(self, db: Session, user_id: int):
        self.db = db
        self.user_id = user_id

    def visited_location_ids(self) -> set[int]:
        rows = (
            self.db.query(CheckinRecord.location_id)
            .filter(CheckinRecord.user_id == self.user_id)
            .all()
        )
        return {row.location_id for row in rows}

    def list_locations(self, category: Optional[str] = None) -> list[dict]:
        """Active locations with the caller's visited flag and overall check-in count."""
        counts = (
            self.db.query(CheckinRecord.location_id, func.count(CheckinRecord.id).label("checkins"))
            .group_by(CheckinRecord.location_id)
            .subquery()
        )
        query = (
            self.db.query(Location, func.coalesce(counts.c.checkins, 0))
            .outerjoin(counts, counts.c.location_id == Location.id)
            .filter(Location.is_active.is_(True))
        )
        if category:
            query = query.filter(Location.category == category)

        visited = self.visited_location_ids()
        return [
            {
                "id": location.id,
                "name": location.name,
                "description": location.description,
                "category": location.category,
                "latitude": location.latitude,
                "longitude": location.longitude,
                "radius_m": location.radius_m,
                "visited": location.id in visited,
                "checkin_count": checkin_count,
            }
            for location, checkin_count in query.order_by(Location.name).all()
        ]

    def nearest_unvisited(self, latitude: float, longitude: float, limit: int = 3) -> list[dict]:
        """Closest active locations the user has not checked into yet.

        Candidates are first narrowed to H3 cells around the position. When that
        yields too few, or a result lies beyond the radius the ring search fully
        covers, every active unvisited location is ranked instead.
        """
        if not is_valid_coordinate(latitude, longitude):
            raise CoreError(INVALID_COORDINATES, "Latitude/longitude out of range")

        visited = self.visited_location_ids()
        base = self.db.query(Location).filter(Location.is_active.is_(True))
        if visited:
            base = base.filter(Location.id.notin_(visited))

        origin = h3.latlng_to_cell(latitude, longitude, H3_RESOLUTION)
        nearby_cells = list(h3.grid_disk(origin, NEARBY_SEARCH_RINGS))
        covered_m = NEARBY_SEARCH_RINGS * h3.average_hexagon_edge_length(H3_RESOLUTION, unit="m")

        def rank(locations: list[Location]) -> list[tuple[float, Location]]:
            return sorted(
                ((haversine_distance(latitude, longitude, loc.latitude, loc.longitude), loc) for loc in locations),
                key=lambda pair: pair[0],
            )

        ranked = rank(base.filter(Location.h3_res8.in_(nearby_cells)).all())
        if len(ranked) < limit or ranked[limit - 1][0] > covered_m:
            ranked = rank(base.all())
        return [
            {
                "id": loc.id,
                "name": loc.name,
                "category": loc.category,
                "latitude": loc.latitude,
                "longitude": loc.longitude,
                "distance_m": round(distance, 1),
            }
            for distance, loc in ranked[:limit]
        ]
