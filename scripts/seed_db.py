#!/usr/bin/env python
"""
Database seeding script
Populates a dev database with an org, a team, a reflect template and an agenda
"""
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from retro_meeting.auth import create_auth_token
from retro_meeting.db import (
    SessionLocal,
    init_db,
    User,
    Organization,
    OrganizationUser,
    OrgUserRole,
    Team,
    TeamMember,
    AgendaItem,
    ReflectTemplate,
    RetroPhaseItem,
)
from retro_meeting.db.models import team_member_id
from retro_meeting.services.palette import PALETTE_OPTIONS

PROMPTS = [
    "What went well?",
    "What could have gone better?",
    "What should we try next time?",
]


def seed_database():
    """Seed database with initial data"""
    init_db()
    db = SessionLocal()

    try:
        existing_users = db.query(User).count()
        if existing_users > 0:
            print(f"⚠️  Database already contains {existing_users} users. Skipping seed.")
            return

        print("Seeding database with initial data...")

        leader = User(email="leader@example.com", preferred_name="Lee Leader")
        member = User(email="member@example.com", preferred_name="Max Member")
        db.add_all([leader, member])
        db.flush()

        # No Stripe subscription: seat changes in dev stay local
        org = Organization(name="Example Org", active_user_count=2, inactive_user_count=0)
        db.add(org)
        db.flush()
        db.add(OrganizationUser(org_id=org.id, user_id=leader.id, role=OrgUserRole.BILLING_LEADER.value))
        db.add(OrganizationUser(org_id=org.id, user_id=member.id, role=OrgUserRole.MEMBER.value))
        print(f"✓ Created organization: {org.name}")

        team = Team(name="Example Team", org_id=org.id)
        db.add(team)
        db.flush()
        for user in (leader, member):
            db.add(TeamMember(id=team_member_id(user.id, team.id), team_id=team.id, user_id=user.id))
        print(f"✓ Created team: {team.name}")

        template = ReflectTemplate(team_id=team.id, name="Working & Stuck")
        db.add(template)
        db.flush()
        for sort_order, question in enumerate(PROMPTS):
            db.add(RetroPhaseItem(
                team_id=team.id,
                template_id=template.id,
                question=question,
                group_color=PALETTE_OPTIONS[sort_order].hex,
                sort_order=sort_order,
            ))
        print(f"✓ Created template: {template.name} ({len(PROMPTS)} prompts)")

        db.add(AgendaItem(
            team_id=team.id,
            team_member_id=team_member_id(member.id, team.id),
            content="Release checklist",
            sort_order=0,
        ))

        db.commit()

        print("\n✅ Database seeded successfully!")
        print(f"\nToken for {leader.email}:")
        print(create_auth_token(leader.id, [team.id]))

    except Exception as e:
        db.rollback()
        print(f"❌ Error seeding database: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
