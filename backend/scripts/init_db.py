#!/usr/bin/env python
"""
Initialize a database with tables and catalog seed data.

Use this for local development and tests; production schemas are managed
by Alembic migrations.
"""
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import Base, SessionLocal, engine
import models  # noqa: F401
from services.achievement_service import sync_achievement_catalog
from services.mission_service import seed_default_missions


def init_database(bind=engine, session_factory=SessionLocal) -> None:
    """Create all tables, then seed achievements and default missions."""
    print("Creating database tables...")
    Base.metadata.create_all(bind=bind)
    print("Tables created.")

    db = session_factory()
    try:
        catalog = sync_achievement_catalog(db)
        missions = seed_default_missions(db)
        db.commit()
    finally:
        db.close()

    print(f"Seeded {len(catalog)} achievements and {missions} missions.")
    print("Database initialization complete!")


if __name__ == "__main__":
    init_database()
