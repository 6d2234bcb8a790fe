"""
Shared test fixtures and data helpers
"""
import os
from typing import AsyncGenerator, Dict, Optional, Tuple

# Test environment, set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_TO_FILE"] = "false"
os.environ["LOG_FORMAT"] = "console"
os.environ["SEED_INITIAL_DATA"] = "false"
os.environ["SIRINE_VERIFY_ON_REGISTER"] = "true"

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from label_tracker.core.database import Base
from label_tracker.core.password import hash_password
from label_tracker.core.throttle import LoginThrottle
from label_tracker.models import Label, ProductionOrder, User, Workstation
from label_tracker.models.enums import OrderStatus, OrderType, UserRole
from label_tracker.services.production_orders import compute_rim_breakdown, plan_labels
from label_tracker.services.sirine_client import SirineApiClient

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
SIRINE_TEST_URL = "https://sirine.test/sirine/api"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={
            "check_same_thread": False,
        },
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


@pytest.fixture
async def clean_db(test_engine):
    """Drop and recreate all tables before the test."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield


@pytest.fixture
async def db_session_clean(clean_db, db_session) -> AsyncSession:
    return db_session


# ---------------------------------------------------------------------------
# SIRINE fake
# ---------------------------------------------------------------------------

def sirine_payload(po_number: int, **overrides) -> Dict:
    """A SIRINE detail-order payload as the real API returns it."""
    payload = {
        "no_po": po_number,
        "no_obc": "OBC-001",
        "jenis": "PCHT",
        "tgl_obc": "2025-01-10",
        "tgl_jt": "2025-02-10",
        "jml_order": 40000,
        "rencet": 10500,
        "mesin": "KBA-01",
        "desain": "2024",
        "status": "OPEN",
        "jml_cetak": 1200,
        "hcs_verif": 1000,
        "hcts_verif": 15,
        "kemas": 900,
        "kirim": 500,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def spec_payload():
    """The SIRINE payload builder, for tests that need custom fields."""
    return sirine_payload


class FakeSirine:
    """
    Routes requests by path to canned responses.

    ``responses`` maps a path such as ``/detail-order-pcht/123`` to either
    ``(status_code, json_body)`` or an exception instance to raise.
    """

    def __init__(self):
        self.responses: Dict[str, object] = {}
        self.requests: list = []

    def add(self, path: str, body, status_code: int = 200) -> None:
        self.responses[path] = (status_code, body)

    def fail(self, path: str, exc: Exception) -> None:
        self.responses[path] = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.replace("/sirine/api", "", 1)
        entry = self.responses.get(path)
        if entry is None:
            return httpx.Response(404, json={"message": "not found"})
        if isinstance(entry, Exception):
            raise entry
        status_code, body = entry
        if isinstance(body, (bytes, str)):
            return httpx.Response(status_code, content=body)
        return httpx.Response(status_code, json=body)

    def client(self) -> SirineApiClient:
        return SirineApiClient(
            base_url=SIRINE_TEST_URL,
            timeout=1.0,
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture
def fake_sirine() -> FakeSirine:
    return FakeSirine()


@pytest.fixture
def sirine_client(fake_sirine) -> SirineApiClient:
    return fake_sirine.client()


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------

@pytest.fixture
async def client(db_session_clean, fake_sirine):
    from label_tracker.api.deps import get_db, get_sirine_client
    from label_tracker.core.throttle import get_login_throttle
    from label_tracker.main import app

    throttle = LoginThrottle(max_attempts=5, window_seconds=60)

    async def override_get_db():
        yield db_session_clean

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_sirine_client] = fake_sirine.client
    app.dependency_overrides[get_login_throttle] = lambda: throttle

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Test data factory
# ---------------------------------------------------------------------------

class TestDataFactory:
    """Creates persisted rows with sensible defaults."""

    __test__ = False

    def __init__(self, db: AsyncSession):
        self.db = db

    async def workstation(self, name: str = "Team 1", is_active: bool = True) -> Workstation:
        workstation = Workstation(name=name, is_active=is_active)
        self.db.add(workstation)
        await self.db.commit()
        return workstation

    async def user(
        self,
        np: str = "OP001",
        password: str = "secret123",
        role: UserRole = UserRole.OPERATOR,
        is_active: bool = True,
        workstation: Optional[Workstation] = None,
        name: Optional[str] = None,
    ) -> User:
        user = User(
            np=np,
            name=name or f"User {np}",
            password_hash=hash_password(password),
            role=role,
            is_active=is_active,
            workstation_id=workstation.id if workstation else None,
        )
        self.db.add(user)
        await self.db.commit()
        return user

    async def admin(self, np: str = "ADMIN", password: str = "secret123", **kwargs) -> User:
        return await self.user(np=np, password=password, role=UserRole.ADMIN, **kwargs)

    async def order(
        self,
        po_number: int = 1001,
        order_type: OrderType = OrderType.REGULAR,
        total_sheets: int = 3500,
        start_rim: int = 1,
        status: OrderStatus = OrderStatus.REGISTERED,
        team: Optional[Workstation] = None,
        with_labels: bool = True,
    ) -> ProductionOrder:
        total_rims, inschiet = compute_rim_breakdown(total_sheets, order_type)
        order = ProductionOrder(
            po_number=po_number,
            obc_number=f"OBC-{po_number}",
            order_type=order_type,
            product_type="PCHT" if order_type == OrderType.REGULAR else "MMEA",
            total_sheets=total_sheets,
            total_rims=total_rims,
            start_rim=start_rim,
            end_rim=start_rim + total_rims - 1,
            inschiet_sheets=inschiet,
            team_id=team.id if team else None,
            status=status,
        )
        self.db.add(order)
        await self.db.flush()
        if with_labels:
            self.db.add_all(
                Label(
                    production_order_id=order.id,
                    rim_number=item.rim_number,
                    cut_side=item.cut_side,
                    is_inschiet=item.is_inschiet,
                )
                for item in plan_labels(order)
            )
        await self.db.commit()
        return order


@pytest.fixture
def factory(db_session_clean) -> TestDataFactory:
    return TestDataFactory(db_session_clean)


@pytest.fixture
def login(client):
    """Log in through the API and return the auth headers."""

    async def _login(np: str, password: str = "secret123") -> Dict[str, str]:
        res = await client.post("/api/auth/login", json={"np": np, "password": password})
        assert res.status_code == 200, res.text
        data = res.json()
        return {data["api_key_header"]: data["api_key"]}

    return _login


@pytest.fixture
async def admin_headers(factory, login) -> Tuple[User, Dict[str, str]]:
    admin = await factory.admin()
    return admin, await login(admin.np)


@pytest.fixture
async def operator_headers(factory, login) -> Tuple[User, Dict[str, str]]:
    workstation = await factory.workstation("Team 9")
    operator = await factory.user(np="OP001", workstation=workstation)
    return operator, await login(operator.np)
