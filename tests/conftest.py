"""Shared pytest fixtures."""

import os

# Приложение создает engine при импорте, поэтому БД подменяется до импорта app.*
os.environ["DATABASE_URL"] = "sqlite://"

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app as fastapi_app
from app.services.image_store import ImageStore, get_image_store
from app.services.property_repository import PropertyRepository
from app.schemas.property import PropertyCreate

PLACEHOLDER_BYTES = b"placeholder-image-bytes"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory) -> Iterator[Session]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def repository(db: Session) -> PropertyRepository:
    return PropertyRepository(db)


@pytest.fixture
def placeholder_path(tmp_path: Path) -> Path:
    path = tmp_path / "placeholder-property.jpg"
    path.write_bytes(PLACEHOLDER_BYTES)
    return path


@pytest.fixture
def image_store(tmp_path: Path, placeholder_path: Path) -> ImageStore:
    return ImageStore(tmp_path / "uploads", placeholder_path)


@pytest.fixture
def client(session_factory, image_store: ImageStore) -> Iterator[TestClient]:
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_image_store] = lambda: image_store
    with TestClient(fastapi_app) as test_client:
        yield test_client
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def listing_form() -> dict[str, str]:
    """Поля формы создания объявления в том виде, как их отправляет браузер."""
    return {
        "title": "Test Villa",
        "description": "Four walls and a roof",
        "price": "100000",
        "propertyType": "HOUSE",
        "bedrooms": "3",
        "bathrooms": "2",
        "address": "1 Main St",
        "city": "Accra",
        "state": "Greater Accra",
        "postalCode": "00233",
        "country": "Ghana",
        "agentId": "a1",
    }


@pytest.fixture
def make_property():
    """Фабрика PropertyCreate с переопределяемыми полями."""

    def _make(**overrides) -> PropertyCreate:
        data = {
            "title": "Test Villa",
            "price": 100000,
            "property_type": "HOUSE",
            "bedrooms": 3,
            "bathrooms": 2,
            "address": "1 Main St",
            "city": "Accra",
            "state": "Greater Accra",
            "postal_code": "00233",
            "country": "Ghana",
            "agent_id": "a1",
        }
        data.update(overrides)
        return PropertyCreate(**data)

    return _make
