import os
import tempfile

# Configure the app for tests before anything from hrms is imported
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["UPLOAD_PATH"] = tempfile.mkdtemp(prefix="hrms-uploads-")
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="hrms-logs-")

import pytest
from datetime import date
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from hrms.auth.jwt_handler import issue_access_token
from hrms.core.database import get_async_session
from hrms.core.security import get_password_hash
from hrms.main import app
from hrms.models import User
from hrms.models.base import Base
from hrms.models.shared.enums import Role
from hrms.utils.rate_limiter import login_rate_limiter

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()

@pytest.fixture
def session_maker(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

@pytest.fixture
async def session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as db:
        yield db

@pytest.fixture
def make_user(session_maker):
    """Factory inserting a user straight into the database"""
    counter = {"n": 0}

    async def _make_user(role: Role = Role.EMPLOYEE, password: str = "secret123", **fields) -> User:
        counter["n"] += 1
        n = counter["n"]
        values = {
            "employee_id": f"EMP-{n:03d}",
            "username": f"user{n}",
            "email": f"user{n}@example.com",
            "first_name": f"User{n}",
            "last_name": "Test",
            "role": role,
            "is_active": True,
            "casual_leave": 12,
            "on_duty_leave": 10,
            "leave_without_pay": 0,
            "joining_date": date(2024, 1, 1),
        }
        values.update(fields)
        async with session_maker() as db:
            user = User(hashed_password=get_password_hash(password), **values)
            db.add(user)
            await db.commit()
            await db.refresh(user)
            return user

    return _make_user

@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {issue_access_token(user)}"}
    return _headers

@pytest.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as db:
            yield db

    app.dependency_overrides[get_async_session] = override_get_db
    login_rate_limiter.reset()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
