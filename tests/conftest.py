# tests/conftest.py
from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Generator, Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("MEDIA_DIR", os.path.join(tempfile.gettempdir(), "cityscope-test-media"))

from cityscope.api.v1 import dependencies
from cityscope.core.errors import StorageError
from cityscope.core.security import create_access_token, hash_password
from cityscope.db.session import Base, use_immediate_transactions
from cityscope.db.session import get_db as app_get_session
from cityscope.main import app as fastapi_app
from cityscope.models import User
from cityscope.schemas.post import PostResponse
from cityscope.services.identity import Identity
from cityscope.services.image_store import ImageUpload
from cityscope.services.post_service import PostService

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "hunter22"


class InMemoryImageStore:
    """Image store double that keeps uploads in a dict."""

    base_url = "https://images.test"

    def __init__(self) -> None:
        self.images: dict[str, bytes] = {}
        self.fail = False

    def save(self, upload: ImageUpload) -> str:
        if self.fail:
            raise StorageError("image store unavailable")
        url = f"{self.base_url}/{len(self.images) + 1}-{upload.filename}"
        self.images[url] = upload.data
        return url

    def discard(self, url: str) -> None:
        self.images.pop(url, None)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    use_immediate_transactions(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def image_store() -> InMemoryImageStore:
    return InMemoryImageStore()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    image_store: InMemoryImageStore,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[dependencies.get_image_store_dep] = lambda: image_store
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(dependencies.get_image_store_dep, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory that persists users with the shared test password."""

    def _make_user(username: str, location: str | None = "Elm Street", bio: str | None = None) -> User:
        user = User(
            username=username,
            password_hash=hash_password(TEST_PASSWORD),
            location=location,
            bio=bio,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def alice(make_user: Callable[..., User]) -> User:
    return make_user("alice")


@pytest.fixture()
def bob(make_user: Callable[..., User]) -> User:
    return make_user("bob", location="Oak Avenue")


@pytest.fixture()
def carol(make_user: Callable[..., User]) -> User:
    return make_user("carol", location=None)


def identity_of(user: User) -> Identity:
    return Identity(user_id=user.id, username=user.username)


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def alice_auth(alice: User) -> dict[str, str]:
    """Return authorization headers for alice."""
    return auth_headers(alice)


@pytest.fixture()
def bob_auth(bob: User) -> dict[str, str]:
    """Return authorization headers for bob."""
    return auth_headers(bob)


@pytest.fixture()
def carol_auth(carol: User) -> dict[str, str]:
    """Return authorization headers for carol."""
    return auth_headers(carol)


@pytest.fixture()
def post_service(db_session: Session, image_store: InMemoryImageStore) -> PostService:
    return PostService(db_session, image_store)


@pytest.fixture()
def make_post(post_service: PostService) -> Callable[..., Any]:
    """Return a factory that publishes posts through the service."""

    def _make_post(
        author: User,
        content: str = "Lost cat near the park",
        post_type: str | None = "update",
        location: str = "Elm Street",
    ) -> Any:
        return post_service.create(identity_of(author), content, post_type, location)

    return _make_post


@pytest.fixture()
def alice_post(alice: User, make_post: Callable[..., Any]) -> PostResponse:
    """A baseline post written by alice."""
    return make_post(alice, content="Block party Saturday!", post_type="event")
