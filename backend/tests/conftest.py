"""
Pytest configuration and shared fixtures for the food ordering tests.

Provides an in-memory SQLite DB, an httpx client bound to the FastAPI app,
bearer tokens, and seeded owner/customer/restaurant/order records.
"""
import pytest
import pytest_asyncio
from datetime import timedelta
from typing import AsyncGenerator

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from database import Base, get_db
from config import settings
from middleware.auth import issue_access_token
from middleware.rate_limit import get_limiter

# ── Test Configuration ───────────────────────────────────────────────
# Local HS256 tokens only; never reach out to an Auth0 tenant from tests.
settings.auth0_domain = ""
if not settings.jwt_secret:
    settings.jwt_secret = "test-jwt-secret-for-pytest-only"


# ── Database Fixtures ────────────────────────────────────────────────


@pytest_asyncio.fixture(scope="function")
async def session_factory():
    """
    Session factory over a fresh in-memory SQLite database.

    Uses StaticPool so every session shares the single in-memory connection.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    httpx client for the app with get_db overridden to the test session.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    get_limiter().reset()
    yield
    get_limiter().reset()


# ── Auth Helpers ─────────────────────────────────────────────────────


def auth_headers(auth0_id: str) -> dict:
    """Authorization header with a valid token for the given Auth0 subject."""
    token = issue_access_token(subject=auth0_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_headers():
    return auth_headers


# ── Test Data Fixtures ────────────────────────────────────────────────


@pytest_asyncio.fixture
async def owner(db_session: AsyncSession):
    """Restaurant owner user."""
    from db_models import User

    user = User(auth0_id="auth0|owner-1", email="owner@example.com", name="Olive Owner")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def other_owner(db_session: AsyncSession):
    """A second owner with their own restaurant."""
    from db_models import MenuItem, Restaurant, User

    user = User(auth0_id="auth0|owner-2", email="rival@example.com", name="Rita Rival")
    db_session.add(user)
    await db_session.flush()
    db_session.add(
        Restaurant(
            user_id=user.id,
            restaurant_name="Rival Ramen",
            city="London",
            country="United Kingdom",
            delivery_price=299,
            estimated_delivery_time=25,
            cuisines=["Japanese", "Noodles"],
            menu_items=[MenuItem(name="Shoyu Ramen", price=1150, position=0)],
        )
    )
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def customer(db_session: AsyncSession):
    """Customer user."""
    from db_models import User

    user = User(
        auth0_id="auth0|customer-1",
        email="carla@example.com",
        name="Carla Customer",
        address_line1="1 High Street",
        city="London",
        country="United Kingdom",
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def restaurant(db_session: AsyncSession, owner):
    """Owner's restaurant with a two-item menu."""
    from db_models import MenuItem, Restaurant

    r = Restaurant(
        user_id=owner.id,
        restaurant_name="Pasta Palace",
        city="London",
        country="United Kingdom",
        delivery_price=350,
        estimated_delivery_time=30,
        cuisines=["Italian", "Pasta"],
        image_url="https://img.example.com/pasta.jpg",
        menu_items=[
            MenuItem(name="Margherita", price=900, position=0),
            MenuItem(name="Carbonara", price=1200, position=1),
        ],
    )
    db_session.add(r)
    await db_session.commit()
    return r


@pytest_asyncio.fixture
async def placed_order(db_session: AsyncSession, restaurant, customer):
    """Order in status `placed`, created five minutes ago."""
    from db_models import Order, OrderItem, utcnow

    margherita = restaurant.menu_items[0]
    order = Order(
        restaurant=restaurant,
        user_id=customer.id,
        delivery_name="Carla Customer",
        delivery_email="carla@example.com",
        delivery_address_line1="1 High Street",
        delivery_city="London",
        total_amount=2 * margherita.price + restaurant.delivery_price,
        status="placed",
        created_at=utcnow() - timedelta(minutes=5),
        items=[
            OrderItem(menu_item_id=margherita.id, name=margherita.name, quantity=2, position=0),
        ],
    )
    db_session.add(order)
    await db_session.commit()
    return order
