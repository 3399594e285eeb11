"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Settings are read at import time, so the environment comes first
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SEED_ADMIN_PASSWORD", "")

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from rest_api.main import app
from rest_api.models import Base, MenuCategory, MenuItem, Restaurant, User
from shared.config.constants import SubscriptionTier
from shared.infrastructure.db import engine, get_db
from shared.security.auth import sign_access_token
from shared.security.password import hash_password
from shared.utils.dates import utcnow


# The application engine is an in-memory SQLite with a StaticPool,
# so the app's startup hooks and the tests share one database.
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

OWNER_PASSWORD = "ownerpass123"
ADMIN_PASSWORD = "adminpass123"


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Tables are created before and dropped after every test.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client
        # Release the shared connection before lifespan shutdown disposes the engine
        db_session.close()

    app.dependency_overrides.clear()


def make_user(db_session, username: str, *, password: str = OWNER_PASSWORD, **fields) -> User:
    user = User(
        username=username,
        email=f"{username}@test.com",
        password=hash_password(password),
        subscription_tier=fields.pop("subscription_tier", SubscriptionTier.FREE),
        **fields,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def headers_for(user: User) -> dict[str, str]:
    """Bearer header for a user without going through /login."""
    token = sign_access_token(user.id, user.username, user.email, user.is_admin, user.token_version or 0)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner(db_session):
    """A free-tier restaurant owner."""
    return make_user(db_session, "owner", full_name="Olivia Owner")


@pytest.fixture
def other_owner(db_session):
    return make_user(db_session, "intruder")


@pytest.fixture
def premium_owner(db_session):
    """A premium owner with 30 days left."""
    now = utcnow()
    return make_user(
        db_session,
        "premium",
        subscription_tier=SubscriptionTier.PREMIUM,
        premium_start_date=now,
        premium_end_date=now + timedelta(days=30),
        premium_duration="1_month",
    )


@pytest.fixture
def admin_user(db_session):
    return make_user(db_session, "admin", password=ADMIN_PASSWORD, is_admin=True)


@pytest.fixture
def auth_headers(owner):
    return headers_for(owner)


@pytest.fixture
def premium_headers(premium_owner):
    return headers_for(premium_owner)


@pytest.fixture
def admin_headers(admin_user):
    return headers_for(admin_user)


def make_restaurant(db_session, user: User, name: str = "Joe's Diner") -> Restaurant:
    restaurant = Restaurant(user_id=user.id, name=name, theme_settings={})
    db_session.add(restaurant)
    db_session.commit()
    db_session.refresh(restaurant)
    return restaurant


@pytest.fixture
def restaurant(db_session, owner):
    return make_restaurant(db_session, owner)


@pytest.fixture
def premium_restaurant(db_session, premium_owner):
    return make_restaurant(db_session, premium_owner, name="Premium Bistro")


@pytest.fixture
def menu(db_session, restaurant):
    """
    One category with three items:
    a vegan salad, a peanut noodle dish and a cheeseburger.
    """
    category = MenuCategory(restaurant_id=restaurant.id, name="Mains", display_order=0)
    db_session.add(category)
    db_session.flush()

    items = [
        MenuItem(
            category_id=category.id,
            name="Garden Salad",
            price="8.50",
            display_order=0,
            dietary_info={"vegan": True, "vegetarian": True},
            calories=350,
            allergens=[],
        ),
        MenuItem(
            category_id=category.id,
            name="Peanut Noodles",
            price="12.00",
            display_order=1,
            dietary_info={"vegan": True},
            calories=700,
            allergens=["peanuts"],
        ),
        MenuItem(
            category_id=category.id,
            name="Cheeseburger",
            price="14.00",
            display_order=2,
            dietary_info={"vegan": False},
            calories=900,
            allergens=["dairy", "gluten"],
        ),
    ]
    db_session.add_all(items)
    db_session.commit()
    db_session.refresh(category)
    return {"category": category, "items": items}
