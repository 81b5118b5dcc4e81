"""Points of interest that users check into."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Float, Integer, String, Text

from database import Base


class Location(Base):
    """A geofenced point of interest. Managed by admin tooling, read by the engine."""

    __tablename__ = "locations"
    __table_args__ = (
        CheckConstraint("radius_m > 0", name="ck_locations_radius_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(64), nullable=True, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    radius_m = Column(Integer, nullable=False, default=100)
    h3_res8 = Column(String(25), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
