import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fakes import FakeProvider
from quizbank.db import init_db
from ultangber.events import ActionEvent, event_bus


@pytest.fixture()
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture()
def events():
    """Collect every ActionEvent emitted during the test."""
    seen: list[ActionEvent] = []
    event_bus.subscribe(ActionEvent, seen.append)
    yield seen
    event_bus.unsubscribe(ActionEvent, seen.append)


@pytest.fixture()
def session_factory():
    # one shared in-memory connection per test
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    yield factory
    engine.dispose()
