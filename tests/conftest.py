"""Shared fixtures for API and service tests.

Settings are read once at import time, so the environment is prepared
before anything from vendorvault_api is imported.
"""

import copy
import os
import tempfile
from collections.abc import AsyncGenerator

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-key-for-vendorvault-0123456789abcdef"
os.environ["ENVIRONMENT"] = "development"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="vendorvault-uploads-")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from vendorvault_api.database import get_db
from vendorvault_api.main import app
from vendorvault_api.models.domain.station import ApprovalStatus, OperationalStatus
from vendorvault_api.models.domain.user import UserRole, UserStatus
from vendorvault_api.models.orm import Base
from vendorvault_api.models.orm.station import StationLayoutORM, StationORM
from vendorvault_api.models.orm.user import UserORM
from vendorvault_api.security.auth import create_access_token
from vendorvault_api.security.password import get_password_service

TEST_PASSWORD = "Str0ng!Passw0rd"

SHOP_ID = "P1-S1"

LAYOUT_PLATFORMS = [
    {
        "id": "platform-1",
        "name": "Platform 1",
        "number": 1,
        "shops": [
            {"id": SHOP_ID, "x": 0, "y": 0, "width": 100, "height": 100, "category": "FOOD", "is_allocated": False},
            {"id": "P1-S2", "x": 120, "y": 0, "width": 80, "height": 80, "category": "RETAIL", "is_allocated": False},
        ],
    }
]


@pytest.fixture
async def engine():
    """In-memory SQLite engine shared across connections."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging test data directly."""
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with the test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def create_user(
    session: AsyncSession,
    role: UserRole,
    email: str,
    name: str,
    status: UserStatus = UserStatus.ACTIVE,
    phone: str = "9876543210",
) -> UserORM:
    """Insert a user with the shared test password."""
    user = UserORM(
        email=email,
        password_hash=get_password_service().hash_password(TEST_PASSWORD),
        name=name,
        phone=phone,
        role=role.value,
        status=status.value,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


def auth_headers(user: UserORM) -> dict[str, str]:
    """Bearer header for a user."""
    token = create_access_token(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def vendor_user(db_session) -> UserORM:
    return await create_user(db_session, UserRole.VENDOR, "vendor@vendorvault.in", "Ravi Kumar")


@pytest.fixture
async def manager_user(db_session) -> UserORM:
    return await create_user(
        db_session, UserRole.STATION_MANAGER, "manager@vendorvault.in", "Anita Sharma", phone="9123456780"
    )


@pytest.fixture
async def admin_user(db_session) -> UserORM:
    return await create_user(
        db_session, UserRole.RAILWAY_ADMIN, "admin@vendorvault.in", "Railway Admin", phone="9000000001"
    )


@pytest.fixture
async def station(db_session, manager_user) -> StationORM:
    """Approved station with a two-shop layout, managed by manager_user."""
    station = StationORM(
        station_name="New Delhi",
        station_code="NDLS",
        railway_zone="Northern Railway",
        division="Delhi",
        station_category="NSG-1",
        platforms_count=16,
        daily_footfall_avg=500000,
        station_manager_id=manager_user.id,
        operational_status=OperationalStatus.ACTIVE.value,
        approval_status=ApprovalStatus.APPROVED.value,
        layout_completed=True,
    )
    db_session.add(station)
    await db_session.flush()
    db_session.add(
        StationLayoutORM(
            station_id=station.id,
            platforms=copy.deepcopy(LAYOUT_PLATFORMS),
            infrastructure_blocks=[],
            canvas_settings={"width": 2000, "height": 1200, "grid_size": 20},
            pricing={"unit_to_meters": 0.0158},
            created_by=manager_user.id,
        )
    )
    await db_session.commit()
    await db_session.refresh(station)
    return station
