"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from config import LOG_LEVEL, validate_config
from routers import achievements, admin, friends, location, missions, profile, trips
from services import errors


logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

validate_config()


ERROR_STATUS = {
    errors.OUT_OF_RANGE: status.HTTP_400_BAD_REQUEST,
    errors.INVALID_COORDINATES: status.HTTP_400_BAD_REQUEST,
    errors.LOCATION_INACTIVE: status.HTTP_400_BAD_REQUEST,
    errors.INVALID_TIMESTAMP: status.HTTP_400_BAD_REQUEST,
    errors.SELF_REQUEST: status.HTTP_400_BAD_REQUEST,
    errors.INVALID_TRIP_DATES: status.HTTP_400_BAD_REQUEST,
    errors.NOT_AUTHORIZED: status.HTTP_403_FORBIDDEN,
    errors.LOCATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    errors.TRIP_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    errors.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    errors.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    errors.DUPLICATE_REQUEST: status.HTTP_409_CONFLICT,
    errors.ALREADY_FRIENDS: status.HTTP_409_CONFLICT,
    errors.CONCURRENT_UPDATE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


app = FastAPI(title="Trailmark API", version="1.0.0")

app.state.limiter = location.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(errors.CoreError)
async def core_error_handler(request: Request, exc: errors.CoreError) -> JSONResponse:
    status_code = ERROR_STATUS.get(exc.reason, status.HTTP_400_BAD_REQUEST)
    if status_code >= 500:
        logger.error("%s on %s %s: %s", exc.reason, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.to_detail()})


app.include_router(location.router, prefix="/api/locations", tags=["locations"])
app.include_router(profile.router, prefix="/api", tags=["profile"])
app.include_router(friends.router, prefix="/api/friends", tags=["friends"])
app.include_router(achievements.router, prefix="/api/achievements", tags=["achievements"])
app.include_router(missions.router, prefix="/api/missions", tags=["missions"])
app.include_router(trips.router, prefix="/api/trips", tags=["trips"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])


@app.get("/health")
def health():
    return {"status": "ok"}
