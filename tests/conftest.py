import fnmatch
import os
from datetime import datetime
from decimal import Decimal

os.environ.setdefault("POSTGRES_DSN", "sqlite://")
os.environ.setdefault("SERVICE_POSTGRES_DSN", "sqlite://")
os.environ.setdefault("KAFKA_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.api import deps
from storefront.db.models import Category, Product, User
from storefront.db.session import Base
from storefront.main import app
from storefront.security.utils import create_access_token
from storefront.services.storage import BlobStorage
from storefront.store.view_cache import ViewCache


class FakeRedis:
    """Dictionary-backed stand-in for the few Redis calls the view cache makes."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ex=None):
        self.data[key] = value

    def delete(self, *keys):
        for k in keys:
            self.data.pop(k, None)

    def scan_iter(self, match="*"):
        return [k for k in list(self.data) if fnmatch.fnmatchcase(k, match)]


class FakeObject:
    def __init__(self, name, size):
        self.object_name = name
        self.size = size


class FakeMinio:
    def __init__(self):
        self.buckets = set()
        self.objects = {}
        self.removed = []

    def bucket_exists(self, bucket):
        return bucket in self.buckets

    def make_bucket(self, bucket):
        self.buckets.add(bucket)

    def put_object(self, bucket, path, data, length, content_type=None):
        self.objects[(bucket, path)] = data.read()

    def remove_object(self, bucket, path):
        self.removed.append(path)
        self.objects.pop((bucket, path), None)

    def list_objects(self, bucket, prefix="", recursive=False):
        return [FakeObject(p, len(v)) for (b, p), v in self.objects.items() if b == bucket and p.startswith(prefix)]


@pytest.fixture()
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)

    @event.listens_for(eng, "connect")
    def _fk_on(dbapi_conn, _):
        dbapi_conn.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture()
def db_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture()
def db(db_factory):
    session = db_factory()
    yield session
    session.close()


@pytest.fixture()
def redis_client():
    return FakeRedis()


@pytest.fixture()
def cache(redis_client):
    return ViewCache(redis_client, ttl=60)


@pytest.fixture()
def minio_client():
    return FakeMinio()


@pytest.fixture()
def storage(minio_client):
    return BlobStorage(minio_client, "storefront-media", "http://minio:9000/storefront-media")


@pytest.fixture()
def client(db_factory, cache, storage):
    def _db():
        session = db_factory()
        try:
            yield session
        finally:
            session.close()

    test_client = TestClient(app)

    def _functions():
        yield test_client

    app.dependency_overrides[deps.get_db] = _db
    app.dependency_overrides[deps.get_privileged_db] = _db
    app.dependency_overrides[deps.get_view_cache] = lambda: cache
    app.dependency_overrides[deps.get_storage] = lambda: storage
    app.dependency_overrides[deps.get_functions_client] = _functions
    yield test_client
    app.dependency_overrides.clear()


def auth_headers(user_id, email="shopper@example.com", role="customer"):
    token, _ = create_access_token(user_id, email, role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_user(db):
    def _make(email="shopper@example.com", role="customer", first_name="Sam", last_name="Shopper"):
        user = User(email=email, role=role, first_name=first_name, last_name=last_name,
                    created_at=datetime.utcnow(), updated_at=datetime.utcnow())
        db.add(user); db.commit(); db.refresh(user)
        return user
    return _make


@pytest.fixture()
def customer(make_user):
    return make_user()


@pytest.fixture()
def admin(make_user):
    return make_user(email="admin@example.com", role="admin", first_name="Ada", last_name="Admin")


@pytest.fixture()
def customer_headers(customer):
    return auth_headers(customer.id, customer.email, customer.role)


@pytest.fixture()
def admin_headers(admin):
    return auth_headers(admin.id, admin.email, admin.role)


@pytest.fixture()
def make_product(db):
    def _make(name="Widget", price="10.00", category=None, rating=0, images=None, created_at=None):
        images = images or []
        product = Product(
            name=name, description=f"{name} description", price=Decimal(price),
            category_id=category.id if category else None, stock_quantity=10, rating=rating,
            image_url=images[0] if images else None, additional_images=list(images[1:]),
            created_at=created_at or datetime.utcnow(),
        )
        db.add(product); db.commit(); db.refresh(product)
        return product
    return _make


@pytest.fixture()
def make_category(db):
    def _make(name):
        cat = Category(name=name)
        db.add(cat); db.commit(); db.refresh(cat)
        return cat
    return _make


@pytest.fixture()
def headers_for():
    return auth_headers
