"""Seed achievement catalog and default missions

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19

"""
from alembic import op
from sqlalchemy.sql import table, column
from sqlalchemy import Boolean, Integer, String


# revision identifiers, used by Alembic.
revision = '20261019_0002'
down_revision = '20261019_0001'
branch_labels = None
depends_on = None


# Snapshot of the catalog at this revision; codes must match
# services.achievement_service.ACHIEVEMENT_DEFINITIONS.
ACHIEVEMENTS = [
    {"code": "FIRST_CHECKIN", "name": "First Steps",
     "description": "Check in at your first location", "icon": "📍", "sort_order": 0},
    {"code": "CHECKINS_5", "name": "Explorer",
     "description": "Check in at 5 different locations", "icon": "🧭", "sort_order": 1},
    {"code": "CHECKINS_10", "name": "Pathfinder",
     "description": "Check in at 10 different locations", "icon": "🗺️", "sort_order": 2},
    {"code": "STREAK_3", "name": "On a Roll",
     "description": "Check in on 3 consecutive days", "icon": "🔥", "sort_order": 3},
    {"code": "STREAK_7", "name": "Unstoppable",
     "description": "Check in on 7 consecutive days", "icon": "🏆", "sort_order": 4},
]

MISSIONS = [
    {"name": "Getting Started", "description": "Check in at 3 locations",
     "goal_type": "TOTAL_CHECKINS", "target_value": 3, "is_active": True},
    {"name": "City Explorer", "description": "Check in at 15 locations",
     "goal_type": "TOTAL_CHECKINS", "target_value": 15, "is_active": True},
    {"name": "Weekly Habit", "description": "Keep a 7-day check-in streak",
     "goal_type": "STREAK_DAYS", "target_value": 7, "is_active": True},
]


def upgrade():
    achievements_table = table(
        'achievements',
        column('code', String),
        column('name', String),
        column('description', String),
        column('icon', String),
        column('sort_order', Integer),
    )
    missions_table = table(
        'missions',
        column('name', String),
        column('description', String),
        column('goal_type', String),
        column('target_value', Integer),
        column('is_active', Boolean),
    )

    op.bulk_insert(achievements_table, ACHIEVEMENTS)
    op.bulk_insert(missions_table, MISSIONS)


def downgrade():
    codes = ", ".join(f"'{a['code']}'" for a in ACHIEVEMENTS)
    op.execute(f"DELETE FROM achievements WHERE code IN ({codes})")
    names = ", ".join(f"'{m['name']}'" for m in MISSIONS)
    op.execute(f"DELETE FROM missions WHERE name IN ({names})")
