"""Shared fixtures: an in-memory Motor client seeded with a small collection."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from bson import ObjectId

DB = "test_db"
COLLECTION = "people"

ALICE_ID = ObjectId("65a1f0c2e4b0a1b2c3d4e5f1")
BOB_ID = ObjectId("65a1f0c2e4b0a1b2c3d4e5f2")
CAROL_ID = ObjectId("65a1f0c2e4b0a1b2c3d4e5f3")


@pytest.fixture
def mock_client():
    """Create an in-memory Motor client."""
    try:
        from mongomock_motor import AsyncMongoMockClient
    except ImportError:
        pytest.skip("mongomock-motor not installed")
    return AsyncMongoMockClient()


@pytest.fixture
async def seeded_client(mock_client):
    """Client whose ``test_db.people`` holds three documents."""
    await mock_client[DB][COLLECTION].insert_many(
        [
            {"_id": ALICE_ID, "name": "alice", "age": 31, "team": "red"},
            {"_id": BOB_ID, "name": "bob", "age": 25, "team": "blue"},
            {
                "_id": CAROL_ID,
                "name": "carol",
                "age": 42,
                "team": "red",
                "friends": [ALICE_ID, BOB_ID],
            },
        ]
    )
    return mock_client


@pytest.fixture
def failing_collection():
    """A MagicMock client and the collection every lookup resolves to."""
    client = MagicMock()
    coll = MagicMock()
    client.__getitem__.return_value.__getitem__.return_value = coll
    return client, coll
