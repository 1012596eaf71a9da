# storefront/api/deps.py
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from fastapi import Request

from storefront.data.database import Base, SessionLocal, engine
from storefront.repos.base import StorefrontRepo
from storefront.repos.cart_store import CartStore, MemoryCartStore, RedisCartStore
from storefront.repos.json_repo import JsonStorefrontRepo
from storefront.repos.sql_repo import SqlStorefrontRepo
from storefront.services.catalog_service import CatalogService
from storefront.services.chat_client import ChatService
from storefront.services.payment_client import PaymentClient
from storefront.utils import settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

BACKENDS = ("sql", "json")


@lru_cache
def _json_repo() -> JsonStorefrontRepo:
    return JsonStorefrontRepo(settings.JSON_DB_PATH)


@contextmanager
def open_repo() -> Iterator[StorefrontRepo]:
    backend = settings.STOREFRONT_BACKEND
    if backend not in BACKENDS:
        raise ValueError(f"Unknown STOREFRONT_BACKEND {backend!r}, expected one of {BACKENDS}")

    if backend == "json":
        yield _json_repo()
        return

    db = SessionLocal()
    try:
        yield SqlStorefrontRepo(db)
    finally:
        db.close()


def get_repo() -> Iterator[StorefrontRepo]:
    with open_repo() as repo:
        yield repo


@lru_cache
def get_cart_store() -> CartStore:
    if settings.CART_STORE == "redis":
        logger.info("Session carts kept in redis")
        return RedisCartStore.from_url(
            settings.REDIS_URL,
            ttl_seconds=settings.CART_TTL_SECONDS,
            lock_ttl_seconds=settings.CART_LOCK_TTL_SECONDS,
            lock_wait_seconds=settings.CART_LOCK_WAIT_SECONDS,
        )
    return MemoryCartStore(
        ttl_seconds=settings.CART_TTL_SECONDS,
        lock_wait_seconds=settings.CART_LOCK_WAIT_SECONDS,
    )


def get_session_id(request: Request) -> str:
    return request.state.session_id


def get_chat_service() -> ChatService:
    return ChatService()


def get_payment_client() -> PaymentClient:
    return PaymentClient()


def init_storage() -> None:
    """Create tables for the sql backend and seed the demo catalog once."""
    if settings.STOREFRONT_BACKEND == "sql":
        # models are registered on Base through the sql_repo import
        Base.metadata.create_all(bind=engine)
        logger.info(f"Tables ready: {list(Base.metadata.tables.keys())}")

    with open_repo() as repo:
        CatalogService(repo).seed()
