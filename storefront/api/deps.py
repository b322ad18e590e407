from typing import Iterator
import httpx
from redis import Redis
from sqlalchemy.orm import Session
from storefront.core.config import settings
from storefront.db.session import SessionLocal, PrivilegedSessionLocal
from storefront.services.storage import BlobStorage
from storefront.store.view_cache import ViewCache

def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try: yield db
    finally: db.close()

def get_privileged_db() -> Iterator[Session]:
    db = PrivilegedSessionLocal()
    try: yield db
    finally: db.close()

def get_view_cache() -> ViewCache:
    return ViewCache(Redis.from_url(settings.REDIS_URL, decode_responses=True))

def get_storage() -> BlobStorage:
    return BlobStorage.from_settings()

def get_functions_client() -> Iterator[httpx.Client]:
    with httpx.Client(base_url=settings.FUNCTIONS_BASE, timeout=10.0) as client:
        yield client
