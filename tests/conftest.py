import os
import uuid

# Settings are read once, so the environment has to be in place before any
# surplus module is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["R2_BUCKET"] = "test-bucket"
os.environ["CLOUDFLARE_ACCOUNT_ID"] = "test-account"
os.environ["AWS_ACCESS_KEY_ID"] = "test-key"
os.environ["AWS_SECRET_ACCESS_KEY"] = "test-secret-key"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from surplus.db.db import get_session
from surplus.main import app
from surplus.models.listing import Listing
from surplus.models.user import User


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def deleted_objects(monkeypatch):
    deleted = []
    monkeypatch.setattr("surplus.routers.listings.delete_s3_object", deleted.append)
    return deleted


@pytest.fixture
def client(engine, monkeypatch, deleted_objects):
    def override_get_session():
        with Session(engine) as session:
            yield session

    def fake_signed_url(key, expires_in=3600):
        return f"https://signed.example/{key}"

    monkeypatch.setattr("surplus.utils.s3_service.generate_signed_url", fake_signed_url)
    monkeypatch.setattr("surplus.routers.listings.generate_signed_url", fake_signed_url)

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    def _make(name="Owner"):
        slug = name.lower().replace(" ", "-")
        user = User(
            public_id=f"{slug}-{uuid.uuid4().hex[:8]}",
            name=name,
            email=f"{slug}@example.com",
            image=f"https://avatars.example/{slug}.png",
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_listing(session):
    def _make(owner, **overrides):
        fields = {
            "title": "Sourdough loaves",
            "description": "Two loaves baked this morning, still fresh.",
            "category": "bakery",
            "quantity": "2 loaves",
            "location": "Elm Street",
            "images": ["uploads/bread-1.webp", "uploads/bread-2.webp"],
        }
        fields.update(overrides)

        listing = Listing(user_id=owner.id, **fields)
        session.add(listing)
        session.commit()
        session.refresh(listing)
        return listing

    return _make


@pytest.fixture
def owner(make_user):
    return make_user("Olivia")


@pytest.fixture
def requester(make_user):
    return make_user("Ravi")


@pytest.fixture
def listing(make_listing, owner):
    return make_listing(owner)
