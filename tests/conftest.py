import os

# settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.api.deps import get_cart_store, get_repo
from storefront.data.database import Base
from storefront.data.seed import DEMO_PRODUCTS
from storefront.main import app
from storefront.repos.cart_store import MemoryCartStore
from storefront.repos.json_repo import JsonStorefrontRepo
from storefront.repos.sql_repo import SqlStorefrontRepo


@pytest.fixture
def sql_repo():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield SqlStorefrontRepo(session)
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def json_repo(tmp_path):
    return JsonStorefrontRepo(str(tmp_path / "data" / "db.json"))


@pytest.fixture(params=["sql", "json"])
def empty_repo(request):
    return request.getfixturevalue(f"{request.param}_repo")


@pytest.fixture
def repo(empty_repo):
    empty_repo.seed_if_empty(DEMO_PRODUCTS)
    return empty_repo


@pytest.fixture
def cart_store():
    return MemoryCartStore(ttl_seconds=3600, lock_wait_seconds=1)


@pytest.fixture
def client(repo, cart_store):
    app.dependency_overrides[get_repo] = lambda: repo
    app.dependency_overrides[get_cart_store] = lambda: cart_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
