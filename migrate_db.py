#!/usr/bin/env python
"""
Database migration script
Applies, rolls back, or reports Alembic migrations for the Retro Meeting database
"""
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from alembic.config import Config
from alembic import command

ALEMBIC_INI = str(Path(__file__).parent / "alembic.ini")


def upgrade_db(revision: str = "head"):
    """Upgrade the database to a revision (latest by default)"""
    alembic_cfg = Config(ALEMBIC_INI)
    print(f"Upgrading database to {revision}...")
    command.upgrade(alembic_cfg, revision)
    print("✓ Database migrations completed successfully!")


def downgrade_db(revision: str = "-1"):
    """Downgrade the database by one revision (or to a specific revision)"""
    alembic_cfg = Config(ALEMBIC_INI)
    print(f"Downgrading database to revision: {revision}")
    command.downgrade(alembic_cfg, revision)
    print("✓ Database downgrade completed!")


def show_current_revision():
    """Compare the database revision with the newest migration"""
    from alembic.script import ScriptDirectory
    from alembic.runtime.migration import MigrationContext
    from retro_meeting.db import engine

    alembic_cfg = Config(ALEMBIC_INI)
    script = ScriptDirectory.from_config(alembic_cfg)
    with engine.connect() as connection:
        current_rev = MigrationContext.configure(connection).get_current_revision()

    head_rev = script.get_current_head()
    if not current_rev:
        print("Database is not initialized. Run migrations first.")
    elif current_rev == head_rev:
        print(f"Database is up to date at {current_rev}")
    else:
        print(f"Database is at {current_rev}; latest migration is {head_rev}")


if __name__ == "__main__":
    action = sys.argv[1] if len(sys.argv) > 1 else "upgrade"
    target = sys.argv[2] if len(sys.argv) > 2 else None

    if action == "upgrade":
        upgrade_db(target or "head")
    elif action == "downgrade":
        downgrade_db(target or "-1")
    elif action == "current":
        show_current_revision()
    else:
        print("Usage: python migrate_db.py [upgrade [revision]|downgrade [revision]|current]")
        sys.exit(2)
