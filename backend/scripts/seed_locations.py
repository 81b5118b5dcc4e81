#!/usr/bin/env python3
"""Populate a development database with sample points of interest.

Usage:
    cd backend
    python scripts/seed_locations.py

Environment Variables:
    DATABASE_URL: Connection string for the database (defaults to development DB)
"""

import os
import sys

# Add parent directory to path so we can import from backend
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import SessionLocal
from models.location import Location
from services.location_service import register_location


SAMPLE_LOCATIONS = [
    {"name": "Brandenburger Tor", "latitude": 52.516275, "longitude": 13.377704,
     "radius_m": 150, "category": "landmark"},
    {"name": "Fernsehturm", "latitude": 52.520815, "longitude": 13.409419,
     "radius_m": 150, "category": "landmark"},
    {"name": "Museumsinsel", "latitude": 52.521918, "longitude": 13.397634,
     "radius_m": 300, "category": "museum"},
    {"name": "East Side Gallery", "latitude": 52.505036, "longitude": 13.439715,
     "radius_m": 400, "category": "art"},
    {"name": "Tempelhofer Feld", "latitude": 52.473000, "longitude": 13.403000,
     "radius_m": 800, "category": "park"},
]


def main():
    db = SessionLocal()
    try:
        existing = {name for (name,) in db.query(Location.name).all()}
        created = 0
        for data in SAMPLE_LOCATIONS:
            if data["name"] in existing:
                print(f"Skipping existing location: {data['name']}")
                continue
            location = register_location(db, **data)
            print(f"Created location {location.id}: {location.name} ({location.h3_res8})")
            created += 1
        print(f"\nDone. Created {created} locations.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
