"""Shared fixtures: in-memory SQLite store and fake provider sources."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vnmarket.core.errors import ProviderError
from vnmarket.models import Base
from vnmarket.services.asset_store import AssetStore
from vnmarket.tests.factories import FakeListingSource, make_symbol


@pytest.fixture
def engine():
    """Fresh in-memory database shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    with session_factory() as session:
        yield session


@pytest.fixture
def store(db):
    return AssetStore(db)


@pytest.fixture
def listings():
    return [
        make_symbol("FPT", organ_short_name="FPT Corp"),
        make_symbol("ACB", board="HNX"),
        make_symbol("VNINDEX", board="HSX", type="INDEX", organ_name="VN-Index"),
        make_symbol("E1VFVN30", type="ETF"),
        make_symbol("OLDCO", board="DELISTED", listed=False),
    ]


@pytest.fixture
def failing_listing_source():
    return FakeListingSource(error=ProviderError("vci", "connection refused"))
