"""Pytest fixtures for testing"""

import random
import threading
import uuid
from collections import defaultdict
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from lending_gateway.api.main import create_app
from lending_gateway.domain.exceptions import ConflictError
from lending_gateway.infrastructure.database.models import Base
from lending_gateway.infrastructure.database.repositories import SqlRecordStore
from lending_gateway.infrastructure.database.session import build_engine, get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

OWNER_ID = "9f2c61d0-5a8e-4c1b-9d7e-2b3f4a5c6d7e"
OTHER_OWNER_ID = "41b7e2aa-0c3d-4f5e-8a9b-1c2d3e4f5a6b"


class InMemoryRecordStore:
    """Dict-backed RecordStore with the same unique constraints as the database"""

    UNIQUE_COLUMNS = {"referrals": ("user_id", "referral_code")}

    def __init__(self):
        self.collections = defaultdict(list)
        self.lock = threading.Lock()
        self.insert_calls = 0

    def insert(self, collection, record):
        with self.lock:
            self.insert_calls += 1
            rows = self.collections[collection]
            for column in self.UNIQUE_COLUMNS.get(collection, ()):
                if any(row[column] == record[column] for row in rows):
                    raise ConflictError(f"Duplicate {column} in {collection}")
            stored = {"id": str(uuid.uuid4()), **record}
            rows.append(stored)
            return dict(stored)

    def get_one(self, collection, filters):
        with self.lock:
            for row in self.collections[collection]:
                if all(row.get(key) == value for key, value in filters.items()):
                    return dict(row)
        return None

    def list_ordered(self, collection, filters, order_by, descending=True):
        with self.lock:
            rows = [
                dict(row)
                for row in self.collections[collection]
                if all(row.get(key) == value for key, value in filters.items())
            ]
        return sorted(rows, key=lambda row: row[order_by], reverse=descending)

    def upsert(self, collection, key, record):
        with self.lock:
            for row in self.collections[collection]:
                if row.get(key) == record[key]:
                    row.update(record)
                    return dict(row)
        return self.insert(collection, record)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db: Session) -> SqlRecordStore:
    """Record store over the test database"""
    return SqlRecordStore(db)


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def rng() -> random.Random:
    """Seeded randomness so generated codes are reproducible"""
    return random.Random(1234)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def owner_headers() -> dict:
    return {"X-User-ID": OWNER_ID}


@pytest.fixture
def other_owner_headers() -> dict:
    return {"X-User-ID": OTHER_OWNER_ID}
