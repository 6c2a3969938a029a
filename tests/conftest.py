# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import timedelta
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("POLL_EXPIRY_ENABLED", "false")

from talent_radar.core.security import create_access_token
from talent_radar.db.session import Base, build_engine, create_tables, drop_tables
from talent_radar.db.session import get_db as app_get_session
from talent_radar.db.time import utcnow
from talent_radar.main import app as fastapi_app
from talent_radar.models import (
    DiscussionCategory,
    DiscussionThread,
    Player,
    Poll,
    PollOption,
    PollType,
    RatingCategory,
    User,
    UserFollow,
    UserRole,
)

TEST_DB_URL = "sqlite://"

_USERNAME_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool)
    create_tables(engine)
    try:
        yield engine
    finally:
        drop_tables(engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(engine: Engine, session_factory: sessionmaker[Session]) -> Iterator[Session]:
    # Services own their transactions, so each test starts from empty tables
    # instead of an outer transaction that is rolled back.
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def auth_headers(user: User) -> dict[str, str]:
    """Return authorization headers for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory for persisted users with an optional role and reputation."""

    def _make_user(
        username: str | None = None,
        role: UserRole = UserRole.USER,
        reputation_score: int = 0,
    ) -> User:
        user = User(
            username=username or f"user{next(_USERNAME_COUNTER)}",
            role=role,
            reputation_score=reputation_score,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return the primary test user."""
    return make_user("alice")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second test user."""
    return make_user("bob")


@pytest.fixture()
def moderator(make_user: Callable[..., User]) -> User:
    return make_user("coach", role=UserRole.COACH)


@pytest.fixture()
def admin(make_user: Callable[..., User]) -> User:
    return make_user("admin", role=UserRole.ADMIN)


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return auth_headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return auth_headers(other_user)


@pytest.fixture()
def follow(db_session: Session) -> Callable[[User, User], UserFollow]:
    """Factory making ``follower`` follow ``following``."""

    def _follow(follower: User, following: User, enabled: bool = True) -> UserFollow:
        edge = UserFollow(
            follower_id=follower.id,
            following_id=following.id,
            notification_enabled=enabled,
        )
        db_session.add(edge)
        db_session.commit()
        return edge

    return _follow


@pytest.fixture()
def player(db_session: Session) -> Player:
    """Create a baseline player."""
    player = Player(name="Lamine Yamal", position="RW", nationality="Spain")
    db_session.add(player)
    db_session.commit()
    return player


@pytest.fixture()
def category(db_session: Session) -> DiscussionCategory:
    category = DiscussionCategory(name="General", description="Anything goes")
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture()
def rating_categories(db_session: Session) -> list[RatingCategory]:
    categories = [
        RatingCategory(name="Technical", description="Ball skills"),
        RatingCategory(name="Physical", description="Pace and strength"),
    ]
    db_session.add_all(categories)
    db_session.commit()
    return categories


@pytest.fixture()
def thread(db_session: Session, test_user: User) -> DiscussionThread:
    """Create a thread authored by the primary test user."""
    thread = DiscussionThread(
        author_id=test_user.id,
        title="Best young winger?",
        content="Who is the best winger under 21?",
    )
    db_session.add(thread)
    db_session.commit()
    return thread


@pytest.fixture()
def make_poll(db_session: Session, test_user: User) -> Callable[..., Poll]:
    """Factory for persisted polls; options default to three players."""

    def _make_poll(
        *,
        is_anonymous: bool = False,
        poll_type: PollType = PollType.SINGLE_CHOICE,
        is_active: bool = True,
        expires_in: timedelta | None = timedelta(days=1),
        options: tuple[str, ...] = ("Yamal", "Musiala", "Wirtz"),
    ) -> Poll:
        poll = Poll(
            author_id=test_user.id,
            question="Who will win the Ballon d'Or first?",
            poll_type=poll_type,
            is_anonymous=is_anonymous,
            is_active=is_active,
            expires_at=utcnow() + expires_in if expires_in is not None else None,
            options=[
                PollOption(option_text=text, display_order=index)
                for index, text in enumerate(options)
            ],
        )
        db_session.add(poll)
        db_session.commit()
        return poll

    return _make_poll
