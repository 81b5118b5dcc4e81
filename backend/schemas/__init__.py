# Schemas package

from .checkin import (
    CheckinRequest,
    CheckinResponse,
    MissionProgress,
)

from .locations import (
    LocationSummary,
    LocationsResponse,
    NearbyLocation,
    NearestLocationsResponse,
)
