# tests/conftest.py
import os
import uuid
from datetime import datetime, timedelta, timezone

# Settings are read at import time by app.database / app.main
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("MIDTRANS_SERVER_KEY", "SB-Mid-server-test")

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import get_settings
from app.core.midtrans_client import MidtransClient, get_midtrans_client
from app.database import get_session
from app.main import app
from app.models.catalog import Category, PriceTier
from app.models.project import Project
from app.models.scheduling import Photographer, PhotoSession
from app.models.user import User

SNAP_TOKEN = "snap-token-123"
SNAP_REDIRECT = "https://app.sandbox.midtrans.com/snap/v4/redirection/snap-token-123"


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="snap_requests")
def snap_requests_fixture():
    """Bodies of every Snap request the mocked gateway received."""
    return []


@pytest.fixture(name="gateway")
def gateway_fixture(snap_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        snap_requests.append(request)
        return httpx.Response(
            201,
            json={"token": SNAP_TOKEN, "redirect_url": SNAP_REDIRECT},
        )

    return MidtransClient(
        server_key=get_settings().MIDTRANS_SERVER_KEY,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture(name="client")
def client_fixture(session, gateway):
    def get_session_override():
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_midtrans_client] = lambda: gateway
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def make_token(user: User) -> str:
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    settings = get_settings()
    return jwt.encode(claims, settings.SUPABASE_JWT_SECRET, algorithm=settings.SUPABASE_JWT_ALG)


@pytest.fixture(name="admin_user")
def admin_user_fixture(session):
    user = User(id=uuid.uuid4(), email="owner@studio.co.id", name="owner", role="admin")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(name="admin_headers")
def admin_headers_fixture(admin_user):
    return {"Authorization": f"Bearer {make_token(admin_user)}"}


@pytest.fixture(name="staff_headers")
def staff_headers_fixture(session):
    user = User(id=uuid.uuid4(), email="crew@studio.co.id", name="crew", role="staff")
    session.add(user)
    session.commit()
    return {"Authorization": f"Bearer {make_token(user)}"}


# ---- Data helpers ----


@pytest.fixture(name="wedding")
def wedding_fixture(session):
    category = Category(name="Wedding", slug="wedding", base_price=5_000_000)
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


@pytest.fixture(name="wedding_premium")
def wedding_premium_fixture(session, wedding):
    tier = PriceTier(
        category_id=wedding.id,
        name="Premium",
        price=8_500_000,
        session_count=2,
        session_duration=240,
    )
    session.add(tier)
    session.commit()
    session.refresh(tier)
    return tier


@pytest.fixture(name="project")
def project_fixture(session, wedding):
    project = Project(
        title="Rani & Dimas",
        slug="rani-dimas",
        category_id=wedding.id,
        is_published=True,
    )
    session.add(project)
    session.commit()
    session.refresh(project)
    return project


@pytest.fixture(name="make_photographer")
def make_photographer_fixture(session):
    def _make(name: str = "Bayu", is_active: bool = True) -> Photographer:
        photographer = Photographer(name=name, contact="0812000000", is_active=is_active)
        session.add(photographer)
        session.commit()
        session.refresh(photographer)
        return photographer

    return _make


@pytest.fixture(name="make_session")
def make_session_fixture(session, project):
    def _make(start: datetime, end: datetime, project_id: uuid.UUID | None = None) -> PhotoSession:
        photo_session = PhotoSession(
            project_id=project_id or project.id,
            start_at=start,
            end_at=end,
        )
        session.add(photo_session)
        session.commit()
        session.refresh(photo_session)
        return photo_session

    return _make
