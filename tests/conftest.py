"""Shared pytest fixtures: in-memory database, seeded users/products, API client."""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.api import create_app
from storefront.data.database import get_db, init_db
from storefront.data.models import ProductModel, UserModel
from storefront.services.cart_identity import CartIdentityResolver


@pytest.fixture()
def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def user(db) -> UserModel:
    u = UserModel(id=1, name="Alice")
    db.add(u)
    db.commit()
    return u


@pytest.fixture()
def other_user(db) -> UserModel:
    u = UserModel(id=2, name="Bob")
    db.add(u)
    db.commit()
    return u


@pytest.fixture()
def products(db, user) -> dict[str, ProductModel]:
    """A small catalog listed by ``user``."""
    catalog = {
        "keyboard": ProductModel(title="Keyboard", brand="Lenovo", model="K1", price=Decimal("199.99"), owner=user),
        "mouse": ProductModel(title="Mouse", brand="Lenovo", model="M2", price=Decimal("49.50"), owner=user),
        "monitor": ProductModel(title="Monitor", brand="Lenovo", model="T27", price=Decimal("899.00"), owner=user),
    }
    db.add_all(catalog.values())
    db.commit()
    return catalog


@pytest.fixture()
def resolver(db) -> CartIdentityResolver:
    return CartIdentityResolver(db)


@pytest.fixture()
def guest_cart(resolver):
    return resolver.create_guest_cart()


@pytest.fixture()
def client(session_factory) -> TestClient:
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)
