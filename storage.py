"""
Subscription Storage - MongoDB persistence for subscription records

The connection is opened lazily on first use so the importer and CLI run
without a database.
"""

from typing import Dict, List, Optional

from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from config import MONGODB_URI, MONGODB_DATABASE, SUBSCRIPTIONS_COLLECTION


class StorageUnavailableError(RuntimeError):
    """Raised when MongoDB cannot be reached"""


class SubscriptionStore:
    """
    Subscription records in one MongoDB collection

    Records carry their own string 'id'; Mongo's '_id' is never returned.
    """

    def __init__(self, collection=None, uri: str = MONGODB_URI,
                 database: str = MONGODB_DATABASE):
        """
        Args:
            collection: Pre-built collection (tests pass a fake one)
            uri: MongoDB connection string
            database: Database name
        """
        self._collection = collection
        self.uri = uri
        self.database = database
        self._client = None

    @property
    def collection(self):
        if self._collection is None:
            self._collection = self._connect()
        return self._collection

    def _connect(self):
        try:
            self._client = MongoClient(
                self.uri,
                serverSelectionTimeoutMS=2000,
                connectTimeoutMS=2000,
                socketTimeoutMS=2000
            )
            self._client.admin.command('ping')
        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            print(f"[ERROR] MongoDB connection failed: {e}", flush=True)
            self._client = None
            raise StorageUnavailableError(str(e)) from e

        db = self._client[self.database]
        collection = db[SUBSCRIPTIONS_COLLECTION]
        collection.create_index([('id', 1)], unique=True, background=True)
        collection.create_index([('user_id', 1)], background=True)
        print(f"[OK] MongoDB connected: {self.uri}{self.database}", flush=True)
        return collection

    def insert_many(self, records: List[Dict]) -> int:
        """Insert records in one batch; returns the number inserted"""
        if not records:
            return 0
        # insert_many adds '_id' to the dicts it is given
        documents = [dict(record) for record in records]
        result = self.collection.insert_many(documents)
        return len(result.inserted_ids)

    def list_for_user(self, user_id: str) -> List[Dict]:
        return list(self.collection.find({'user_id': user_id}, {'_id': 0}))

    def get(self, subscription_id: str) -> Optional[Dict]:
        return self.collection.find_one({'id': subscription_id}, {'_id': 0})

    def mark_not_duplicate(self, subscription_id: str) -> bool:
        """Flag a record so duplicate detection skips it; False if not found"""
        result = self.collection.update_one(
            {'id': subscription_id},
            {'$set': {'marked_as_not_duplicate': True}}
        )
        return result.matched_count > 0
