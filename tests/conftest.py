"""
Pytest configuration and shared fixtures.

Fixtures available to all tests:
  • db           : fresh sqlite schema per test (tables dropped/created)
  • client       : httpx AsyncClient bound to the FastAPI app
  • make_user    : insert a user row and return (user_dict, auth headers)
  • make_item    : insert an item row and return its id
  • fetch_item   : reload an item row
"""

import os
import sys
import tempfile

import pytest
import pytest_asyncio

# Environment must be prepared before any impoot import builds the engine.
_TMP_DIR = tempfile.mkdtemp(prefix="impoot-test-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_FILE"] = ""
os.environ["ADMIN_EMAIL"] = ""
os.environ["ADMIN_PASSWORD"] = ""
os.environ["GEMINI_API_KEY"] = ""
os.environ["DEFAULT_COMMISSION_RATE"] = "15"

# Ensure the project root is on the path so config / impoot imports resolve.
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import httpx  # noqa: E402

from impoot.app_factory import create_application  # noqa: E402
from impoot.auth.auth_service import AuthService  # noqa: E402
from impoot.auth.models import User  # noqa: E402
from impoot.database import drop_db, init_db, get_session, seed_default_settings  # noqa: E402
from impoot.models.marketplace import Item  # noqa: E402


@pytest.fixture(scope="session")
def app():
    return create_application("testing")


@pytest_asyncio.fixture
async def db():
    await drop_db()
    await init_db()
    await seed_default_settings()
    yield
    await drop_db()


@pytest_asyncio.fixture
async def client(app, db):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# Row factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    async def _factory(name: str = "회원", roles=None, phone: str = "010-1234-5678"):
        counter["n"] += 1
        async with get_session() as session:
            user = User(
                email=f"user{counter['n']}@impoot.kr",
                password_hash="!",
                name=name,
                phone=phone,
                interests=[],
                roles=list(roles or []),
            )
            session.add(user)
            await session.flush()
            data = user.to_dict()

        token = AuthService.create_session(data["id"])
        return data, {"Authorization": f"Bearer {token}"}

    return _factory


@pytest.fixture
def make_item(db):
    async def _factory(category_type: str = "networking", **columns):
        columns.setdefault("title", "테스트 모임")
        columns.setdefault("price", "30,000원")
        columns.setdefault("status", "open")
        columns.setdefault("settlement_status", "pending")
        async with get_session() as session:
            item = Item(category_type=category_type, **columns)
            session.add(item)
            await session.flush()
            return item.id

    return _factory


@pytest.fixture
def fetch_item(db):
    async def _fetch(item_id: int) -> Item:
        async with get_session() as session:
            return await session.get(Item, item_id)

    return _fetch
