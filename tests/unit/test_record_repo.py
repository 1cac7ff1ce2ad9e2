"""
Unit tests for the record repository (app/repositories/record_repo.py) and
the crud helpers built on it.
"""

from unittest.mock import MagicMock, patch

import pytest
from pymongo.errors import PyMongoError

from app.crud import contact_forms, subscriptions
from app.errors import RepositoryError
from app.repositories.record_repo import RecordRepository


def test_create_or_update_is_a_single_upsert(repo, fake_db):
    repo.create_or_update("reels", "reel-1", {"id": "ignored", "reelName": "Teaser"})

    calls = fake_db["reels"].update_calls
    assert len(calls) == 1
    query, update, upsert = calls[0]
    assert query == {"_id": "reel-1"}
    assert upsert is True
    assert update["$set"]["reelName"] == "Teaser"
    assert "updatedAt" in update["$set"]
    assert "id" not in update["$set"]
    assert "createdAt" in update["$setOnInsert"]


def test_create_or_update_keeps_created_at_on_update(repo, fake_db):
    repo.create_or_update("reels", "reel-1", {"reelName": "v1"})
    created = fake_db["reels"].docs[0]["createdAt"]
    repo.create_or_update("reels", "reel-1", {"reelName": "v2"})

    doc = fake_db["reels"].docs[0]
    assert len(fake_db["reels"].docs) == 1
    assert doc["reelName"] == "v2"
    assert doc["createdAt"] == created


def test_list_artists_sorts_by_start_date_with_missing_last(repo, fake_db):
    artists = fake_db["artists"]
    artists.insert_one({"_id": "c", "artistName": "No date"})
    artists.insert_one({"_id": "b", "exhibitionStartDate": "2024-03-01"})
    artists.insert_one({"_id": "a", "exhibitionStartDate": "2024-01-01"})

    result = repo.list_artists()

    assert [a["id"] for a in result] == ["a", "b", "c"]
    assert [a.get("exhibitionStartDate") for a in result] == ["2024-01-01", "2024-03-01", None]


def test_get_by_id_maps_object_id_to_id(repo, fake_db):
    fake_db["videos"].insert_one({"_id": "v-1", "videoName": "Tour"})
    assert repo.get_by_id("videos", "v-1") == {"id": "v-1", "videoName": "Tour"}
    assert repo.get_by_id("videos", "missing") is None


def test_update_by_id_reports_match(repo, fake_db):
    fake_db["videos"].insert_one({"_id": "v-1", "videoName": "Tour"})
    assert repo.update_by_id("videos", "v-1", {"videoName": "Tour 2"}) is True
    assert repo.update_by_id("videos", "nope", {"videoName": "x"}) is False


def test_set_by_id_replaces_document(repo, fake_db):
    fake_db["videos"].insert_one({"_id": "v-1", "videoName": "Tour", "videoSize": 3.0})
    repo.set_by_id("videos", "v-1", {"videoName": "Only name"})
    assert fake_db["videos"].docs == [{"_id": "v-1", "videoName": "Only name"}]


def test_pymongo_errors_become_repository_errors():
    collection = MagicMock()
    collection.update_one.side_effect = PyMongoError("connection reset")
    database = MagicMock()
    database.__getitem__.return_value = collection

    with pytest.raises(RepositoryError, match="connection reset"):
        RecordRepository(database).create_or_update("reels", "r", {"reelName": "x"})


def test_missing_connection_raises_repository_error():
    with patch("app.database.config.MONGO_URI", None), patch("app.database._db", None):
        with pytest.raises(RepositoryError, match="MONGO_URI"):
            RecordRepository().list_all("reels")


# ---------------------------------------------------------------------------
# crud
# ---------------------------------------------------------------------------

def test_subscription_is_saved_with_type_and_lowercase_email(repo, fake_db):
    with patch("app.crud.subscriptions.record_repo", repo):
        subscription_id = subscriptions.save_subscription({
            "firstName": "Jane", "lastName": "Doe", "email": " Jane@Example.com ",
        })

    doc = fake_db["subscriptions"].docs[0]
    assert doc["_id"] == subscription_id
    assert doc["email"] == "jane@example.com"
    assert doc["type"] == "full_subscription"
    assert "createdAt" in doc


def test_newsletter_subscription(repo, fake_db):
    with patch("app.crud.subscriptions.record_repo", repo):
        subscriptions.save_newsletter_subscription("fan@example.com")
        stored = subscriptions.get_all_subscriptions()
    assert stored[0]["type"] == "newsletter_only"
    assert stored[0]["email"] == "fan@example.com"


def test_contact_form_is_created_unread(repo, fake_db):
    with patch("app.crud.contact_forms.record_repo", repo):
        contact_forms.save_contact_form({
            "name": "Sam", "email": "sam@example.com", "subject": "Hi", "message": "Hello there",
        })
        stored = contact_forms.get_all_contact_forms()
    assert stored[0]["status"] == "unread"
    assert stored[0]["message"] == "Hello there"
