"""
Pytest configuration and shared fixtures.

Puts the project root on sys.path and points the application at an in-memory
SQLite database before any application module is imported.
"""

import os
import sys
from pathlib import Path

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "testing")

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from decimal import Decimal
from typing import Generator

import pytest
from sqlalchemy.orm import Session, sessionmaker

from domain.models import Base, build_engine


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Database session bound to a fresh in-memory SQLite schema.

    Each test gets its own empty database, so no cleanup between tests is
    needed.
    """
    engine = build_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture(scope="function")
def file_session_factory(tmp_path) -> Generator[sessionmaker, None, None]:
    """
    Session factory over a file-backed SQLite database.

    Sessions from this factory use separate connections, which lets a test
    interleave two "requests" writing the same cart.
    """
    engine = build_engine(f"sqlite+pysqlite:///{tmp_path / 'mealorder.db'}")
    Base.metadata.create_all(engine)
    try:
        yield sessionmaker(bind=engine, expire_on_commit=False)
    finally:
        engine.dispose()


@pytest.fixture(scope="function")
def meals(db_session: Session):
    """A small catalog committed to ``db_session``"""
    from test_fixtures import make_meal

    catalog = [
        make_meal(meal_name="Nasi Goreng", price=Decimal("10.00")),
        make_meal(meal_name="Grilled Salmon", price=Decimal("24.50"), category="seafood"),
        make_meal(meal_name="Caesar Salad", price=Decimal("8.75"), category="salad"),
    ]
    db_session.add_all(catalog)
    db_session.commit()
    return catalog


@pytest.fixture(scope="function")
def api_client(db_session: Session):
    """TestClient whose routes use ``db_session`` instead of the app engine"""
    from api.dependencies import get_db
    from test_fixtures import client
    from main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield client
    finally:
        app.dependency_overrides.pop(get_db, None)
