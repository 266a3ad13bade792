"""
Pytest configuration and fixtures
"""
import os
import sys
import tempfile
import time
from pathlib import Path
from typing import Generator
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

# Add project root and src to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(project_root / "src"))

# Set test environment variables before importing
os.environ["ENV"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-for-retro-meeting-tests-min-32-chars"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORAGE_PROVIDER"] = "local"
os.environ["STORAGE_PATH"] = tempfile.mkdtemp(prefix="retro-storage-")
os.environ["API_BASE_URL"] = "http://testserver"
os.environ["MAX_MONTHLY_PAUSES"] = "2"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce log noise in tests

# Import after setting env vars
from retro_meeting.auth import AuthToken, create_auth_token
from retro_meeting.db import (
    Base,
    SessionLocal,
    engine,
    get_db,
    Organization,
    OrganizationUser,
    OrgUserRole,
    Team,
    TeamMember,
    User,
)
from retro_meeting.db.models import team_member_id
from retro_meeting.dependencies import get_gateway, get_storage
from retro_meeting.services.billing_gateway import BillingGateway
from retro_meeting.services.storage_provider import LocalDiskStorageProvider
from api_server import app


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Fresh in-memory schema for each test"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def billing_period():
    """Current billing period as epoch seconds, surrounding now"""
    now = int(time.time())
    return {"start": now - 10 * 24 * 3600, "end": now + 20 * 24 * 3600}


@pytest.fixture
def mock_gateway(billing_period):
    """Billing gateway that never talks to Stripe"""
    gateway = Mock(spec=BillingGateway)
    subscription = {
        "subscription_id": "sub_test",
        "status": "trialing",
        "quantity": 1,
        "current_period_start": billing_period["start"],
        "current_period_end": billing_period["end"],
    }
    gateway.create_customer.return_value = {"customer_id": "cus_test"}
    gateway.create_subscription.return_value = subscription
    gateway.retrieve_subscription.return_value = subscription
    gateway.update_subscription_quantity.return_value = subscription
    gateway.update_customer_source.return_value = {"customer_id": "cus_test"}
    gateway.update_invoice_item.side_effect = lambda item_id, metadata: {
        "invoice_item_id": item_id, "metadata": metadata
    }
    return gateway


@pytest.fixture
def storage(tmp_path):
    return LocalDiskStorageProvider(str(tmp_path), "http://testserver")


@pytest.fixture
def make_user(db_session):
    """Factory creating users with unique emails"""
    counter = {"n": 0}

    def _make_user(preferred_name: str = None, inactive: bool = False) -> User:
        counter["n"] += 1
        user = User(
            email=f"user{counter['n']}@example.com",
            preferred_name=preferred_name or f"User {counter['n']}",
            inactive=inactive,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def org_setup(db_session, make_user):
    """
    An org on a paid subscription with one billing leader and one member,
    both on the same team
    """
    leader = make_user("Lee Leader")
    member = make_user("Max Member")

    org = Organization(
        name="Parabol",
        stripe_id="cus_test",
        stripe_subscription_id="sub_test",
        active_user_count=2,
        inactive_user_count=0,
    )
    db_session.add(org)
    db_session.flush()
    db_session.add(OrganizationUser(org_id=org.id, user_id=leader.id, role=OrgUserRole.BILLING_LEADER.value))
    db_session.add(OrganizationUser(org_id=org.id, user_id=member.id, role=OrgUserRole.MEMBER.value))

    team = Team(name="Engineering", org_id=org.id)
    db_session.add(team)
    db_session.flush()
    for user in (leader, member):
        db_session.add(TeamMember(id=team_member_id(user.id, team.id), team_id=team.id, user_id=user.id))
    db_session.commit()

    return {"org": org, "team": team, "leader": leader, "member": member}


@pytest.fixture
def leader_token(org_setup):
    return AuthToken(sub=org_setup["leader"].id, tms=[org_setup["team"].id])


@pytest.fixture
def member_token(org_setup):
    return AuthToken(sub=org_setup["member"].id, tms=[org_setup["team"].id])


@pytest.fixture(scope="function")
def client(db_session, mock_gateway, storage) -> Generator[TestClient, None, None]:
    """Test client wired to the test session and mocked providers"""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gateway] = lambda: mock_gateway
    app.dependency_overrides[get_storage] = lambda: storage

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build Authorization headers for a user and their teams"""

    def _auth_headers(user_id: str, team_ids=None) -> dict:
        token = create_auth_token(user_id, team_ids or [])
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
