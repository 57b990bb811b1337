"""
In-memory Firestore stand-in for local development and tests.

Implements the subset of the google-cloud-firestore client surface the
services use: collection/document references, set/update/delete, get,
and where/order_by/limit/stream queries. Documents are deep-copied on
every read and write so callers get the same whole-document semantics
as the real client.

When a path is given, the full database is snapshotted to JSON after
every write and reloaded on startup.
"""

import copy
import json
import logging
import os
import threading
import uuid
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

ASCENDING = "ASCENDING"
DESCENDING = "DESCENDING"

# Datetimes snapshot as {_TYPE_KEY: "datetime", "value": iso}. Cart
# quantities are ints, so no cart entry decodes as a datetime.
_TYPE_KEY = "__mock_firestore_type__"


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return {_TYPE_KEY: "datetime", "value": value.isoformat()}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _decode(obj: Dict) -> Any:
    if len(obj) == 2 and obj.get(_TYPE_KEY) == "datetime" and isinstance(obj.get("value"), str):
        return datetime.fromisoformat(obj["value"])
    return obj


def _get_field(data: Dict, field_path: str) -> Any:
    value: Any = data
    for part in field_path.split("."):
        if not isinstance(value, dict) or part not in value:
            return None
        value = value[part]
    return value


def _matches(value: Any, op: str, expected: Any) -> bool:
    if op == "==":
        return value == expected
    if op == "!=":
        return value != expected
    if op == "in":
        return value in expected
    if op == "not-in":
        return value not in expected
    if op == "array_contains":
        return isinstance(value, list) and expected in value
    if value is None:
        return False
    if op == "<":
        return value < expected
    if op == "<=":
        return value <= expected
    if op == ">":
        return value > expected
    if op == ">=":
        return value >= expected
    raise ValueError(f"Unsupported query operator: {op}")


class MockDocumentSnapshot:
    def __init__(self, reference: "MockDocumentReference", data: Optional[Dict]):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict]:
        return copy.deepcopy(self._data)


class MockDocumentReference:
    def __init__(self, db: "MockFirestore", collection: str, doc_id: str):
        self._db = db
        self._collection = collection
        self.id = doc_id

    def get(self) -> MockDocumentSnapshot:
        return MockDocumentSnapshot(self, self._db._read(self._collection, self.id))

    def set(self, data: Dict, merge: bool = False) -> None:
        if merge:
            current = self._db._read(self._collection, self.id) or {}
            current.update(data)
            data = current
        self._db._write(self._collection, self.id, data)

    def update(self, data: Dict) -> None:
        current = self._db._read(self._collection, self.id)
        if current is None:
            raise KeyError(f"No document to update: {self._collection}/{self.id}")
        current.update(data)
        self._db._write(self._collection, self.id, current)

    def delete(self) -> None:
        self._db._delete(self._collection, self.id)


class MockQuery:
    def __init__(
        self,
        db: "MockFirestore",
        collection: str,
        filters: Tuple = (),
        orders: Tuple = (),
        limit_to: Optional[int] = None,
    ):
        self._db = db
        self._collection = collection
        self._filters = filters
        self._orders = orders
        self._limit = limit_to

    def where(self, field_path: str, op_string: str, value: Any) -> "MockQuery":
        return MockQuery(
            self._db,
            self._collection,
            self._filters + ((field_path, op_string, value),),
            self._orders,
            self._limit,
        )

    def order_by(self, field_path: str, direction: str = ASCENDING) -> "MockQuery":
        return MockQuery(
            self._db,
            self._collection,
            self._filters,
            self._orders + ((field_path, direction),),
            self._limit,
        )

    def limit(self, count: int) -> "MockQuery":
        return MockQuery(self._db, self._collection, self._filters, self._orders, count)

    def stream(self) -> Iterator[MockDocumentSnapshot]:
        rows = []
        for doc_id, data in self._db._scan(self._collection):
            if all(_matches(_get_field(data, f), op, v) for f, op, v in self._filters):
                rows.append((doc_id, data))

        # Apply sort keys last-to-first so the first order_by wins.
        for field_path, direction in reversed(self._orders):
            present = [r for r in rows if _get_field(r[1], field_path) is not None]
            missing = [r for r in rows if _get_field(r[1], field_path) is None]
            present.sort(
                key=lambda r: _get_field(r[1], field_path),
                reverse=direction == DESCENDING,
            )
            rows = present + missing

        if self._limit is not None:
            rows = rows[: self._limit]

        for doc_id, data in rows:
            ref = MockDocumentReference(self._db, self._collection, doc_id)
            yield MockDocumentSnapshot(ref, data)

    def get(self) -> List[MockDocumentSnapshot]:
        return list(self.stream())


class MockCollectionReference(MockQuery):
    def __init__(self, db: "MockFirestore", name: str):
        super().__init__(db, name)
        self.id = name

    def document(self, doc_id: Optional[str] = None) -> MockDocumentReference:
        return MockDocumentReference(self._db, self._collection, doc_id or uuid.uuid4().hex)

    def add(self, data: Dict) -> Tuple[None, MockDocumentReference]:
        ref = self.document()
        ref.set(data)
        return None, ref


class MockFirestore:
    """Thread-safe dictionary-backed database: {collection: {doc_id: data}}."""

    def __init__(self, path: Optional[str] = None):
        self._path = path
        self._lock = threading.RLock()
        self._data: Dict[str, Dict[str, Dict]] = {}
        if path and os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                self._data = json.load(f, object_hook=_decode)
            logger.info(f"Loaded mock database from {path}")

    def collection(self, name: str) -> MockCollectionReference:
        return MockCollectionReference(self, name)

    def collections(self) -> List[MockCollectionReference]:
        with self._lock:
            return [MockCollectionReference(self, name) for name in self._data]

    def _read(self, collection: str, doc_id: str) -> Optional[Dict]:
        with self._lock:
            data = self._data.get(collection, {}).get(doc_id)
            return copy.deepcopy(data)

    def _scan(self, collection: str) -> List[Tuple[str, Dict]]:
        with self._lock:
            return copy.deepcopy(list(self._data.get(collection, {}).items()))

    def _write(self, collection: str, doc_id: str, data: Dict) -> None:
        with self._lock:
            self._data.setdefault(collection, {})[doc_id] = copy.deepcopy(data)
            self._flush()

    def _delete(self, collection: str, doc_id: str) -> None:
        with self._lock:
            self._data.get(collection, {}).pop(doc_id, None)
            self._flush()

    def _flush(self) -> None:
        if not self._path:
            return
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, default=_encode, indent=2)


def get_mock_db(path: Optional[str] = None) -> MockFirestore:
    return MockFirestore(path)
