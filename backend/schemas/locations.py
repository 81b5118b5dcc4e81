"""Pydantic schemas for location listing endpoints."""

from typing import Optional

from pydantic import BaseModel


class LocationSummary(BaseModel):
    """Active location with the caller's visited flag."""

    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    latitude: float
    longitude: float
    radius_m: int
    visited: bool
    checkin_count: int


class LocationsResponse(BaseModel):
    """Response for GET /locations."""

    locations: list[LocationSummary]
    total: int


class NearbyLocation(BaseModel):
    """Unvisited location ranked by distance from the caller."""

    id: int
    name: str
    category: Optional[str] = None
    latitude: float
    longitude: float
    distance_m: float


class NearestLocationsResponse(BaseModel):
    """Response for GET /locations/nearest."""

    locations: list[NearbyLocation]
