"""
Shared fixtures: in-memory stand-ins for MongoDB, the object store and the
social backend. Nothing here touches the network.
"""

import threading
from datetime import date
from types import SimpleNamespace

import pytest

from app.repositories.record_repo import RecordRepository
from app.services.storage.uploads import UploadBlob


# ---------------------------------------------------------------------------
# MongoDB
# ---------------------------------------------------------------------------

def _matches(doc, query):
    return all(doc.get(key) == value for key, value in (query or {}).items())


class FakeCollection:
    """Subset of pymongo.collection.Collection used by the app."""

    def __init__(self):
        self.docs = []
        self.update_calls = []

    def insert_one(self, doc):
        self.docs.append(dict(doc))
        return SimpleNamespace(inserted_id=doc.get("_id"))

    def find_one(self, query=None):
        for doc in self.docs:
            if _matches(doc, query):
                return dict(doc)
        return None

    def find(self, query=None):
        return [dict(doc) for doc in self.docs if _matches(doc, query)]

    def update_one(self, query, update, upsert=False):
        self.update_calls.append((query, update, upsert))
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(update.get("$set", {}))
                return SimpleNamespace(matched_count=1, upserted_id=None)
        if upsert:
            doc = dict(query)
            doc.update(update.get("$set", {}))
            doc.update(update.get("$setOnInsert", {}))
            self.docs.append(doc)
            return SimpleNamespace(matched_count=0, upserted_id=doc.get("_id"))
        return SimpleNamespace(matched_count=0, upserted_id=None)

    def replace_one(self, query, replacement, upsert=False):
        for i, doc in enumerate(self.docs):
            if _matches(doc, query):
                self.docs[i] = {**query, **replacement}
                return SimpleNamespace(matched_count=1)
        if upsert:
            self.docs.append({**query, **replacement})
        return SimpleNamespace(matched_count=0)


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection()
        return self.collections[name]


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def repo(fake_db):
    return RecordRepository(fake_db)


# ---------------------------------------------------------------------------
# Object store
# ---------------------------------------------------------------------------

class FakeStorage:
    """
    Records every object written. Paths containing one of `fail_on` raise the
    given error. `put_resumable` reports 25/50/75/100.
    """

    def __init__(self, fail_on=(), error=None, gate=None):
        self.objects = {}
        self.fail_on = tuple(fail_on)
        self.error = error
        self.gate = gate  # threading.Event, blocks uploads until set
        self.calls = 0
        self._lock = threading.Lock()

    def _write(self, path, content, cancel_token):
        with self._lock:
            self.calls += 1
        if self.gate is not None:
            self.gate.wait(5)
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        if any(marker in path for marker in self.fail_on):
            raise self.error
        with self._lock:
            self.objects[path] = content
        return f"https://storage.test/{path}"

    def put(self, path, content, content_type="application/octet-stream", cancel_token=None):
        return self._write(path, content, cancel_token)

    def put_resumable(self, path, content, on_progress, content_type="application/octet-stream", cancel_token=None):
        for pct in (25, 50, 75):
            on_progress(pct)
        url = self._write(path, content, cancel_token)
        on_progress(100.0)
        return url


@pytest.fixture
def storage():
    return FakeStorage()


# ---------------------------------------------------------------------------
# Social backend
# ---------------------------------------------------------------------------

class FakeNotifier:
    def __init__(self, enabled=True, error=None):
        self.enabled = enabled
        self.error = error
        self.calls = []

    def post_to_social(self, record_id, name, description, video_url, size_mb, cancel_token=None):
        self.calls.append({
            "id": record_id, "name": name, "description": description,
            "url": video_url, "size": size_mb,
        })
        if self.error is not None:
            raise self.error
        return {"success": True}


@pytest.fixture
def notifier():
    return FakeNotifier()


# ---------------------------------------------------------------------------
# Pipeline helpers
# ---------------------------------------------------------------------------

class RecordingScheduler:
    """Collects (delay, callback) pairs instead of starting timers."""

    def __init__(self):
        self.scheduled = []

    def __call__(self, delay, callback):
        self.scheduled.append((delay, callback))

    def run_all(self):
        for _, callback in self.scheduled:
            callback()


@pytest.fixture
def scheduler():
    return RecordingScheduler()


TODAY = date(2024, 1, 1)


def blob(name="photo.jpg", content=b"x" * 10, content_type="image/jpeg"):
    return UploadBlob(filename=name, content=content, content_type=content_type)
