"""
Unit tests for the storage adapter (app/services/storage/storage_client.py)
and the multi-file aggregator (app/services/storage/uploads.py).

Mocking strategy:
- app.services.storage.storage_client.requests.request → Supabase REST calls
- tests.conftest.FakeStorage                           → object store for the aggregator
"""

import threading
import time
from unittest.mock import MagicMock, patch

import pytest
import requests

from app.errors import UploadCancelled, UploadError
from app.services.storage.storage_client import StorageClient
from app.services.storage.uploads import UploadBlob, upload_all, upload_file
from app.utils.cancellation import CancellationToken
from conftest import FakeStorage, blob


def make_client(**kwargs):
    defaults = dict(base_url="https://proj.supabase.co/", api_key="service-key", bucket="ms", timeout=5, chunk_size=4)
    defaults.update(kwargs)
    return StorageClient(**defaults)


def consuming_request(status_code=201):
    """Fake requests.request that drains a streamed body like a real transport."""
    received = []

    def _request(method, url, data=None, headers=None, timeout=None):
        if isinstance(data, (bytes, bytearray)):
            received.append(bytes(data))
        else:
            received.append(b"".join(data))
        response = MagicMock()
        response.status_code = status_code
        response.text = "error body"
        return response

    return _request, received


# ---------------------------------------------------------------------------
# StorageClient
# ---------------------------------------------------------------------------

def test_public_url_uses_bucket_and_path():
    client = make_client()
    assert client.public_url("artists/1/photo/a b.jpg") == \
        "https://proj.supabase.co/storage/v1/object/public/ms/artists/1/photo/a%20b.jpg"


def test_put_posts_to_object_endpoint_with_auth_headers():
    client = make_client()
    fake, received = consuming_request()
    with patch("app.services.storage.storage_client.requests.request", side_effect=fake) as mock_request:
        url = client.put("reels/1/video/clip.mp4", b"data", content_type="video/mp4")

    method, endpoint = mock_request.call_args[0]
    headers = mock_request.call_args[1]["headers"]
    assert method == "POST"
    assert endpoint == "https://proj.supabase.co/storage/v1/object/ms/reels/1/video/clip.mp4"
    assert headers["Authorization"] == "Bearer service-key"
    assert headers["Content-Type"] == "video/mp4"
    assert received == [b"data"]
    assert url.endswith("/object/public/ms/reels/1/video/clip.mp4")


def test_put_resumable_reports_increasing_progress_ending_at_100():
    client = make_client(chunk_size=4)
    fake, received = consuming_request()
    ticks = []
    with patch("app.services.storage.storage_client.requests.request", side_effect=fake):
        client.put_resumable("a/b.bin", b"0123456789", ticks.append)

    assert received == [b"0123456789"]
    assert ticks == sorted(ticks)
    assert ticks[-1] == 100.0
    assert ticks[0] == pytest.approx(40.0)


def test_non_2xx_response_raises_upload_error():
    client = make_client()
    fake, _ = consuming_request(status_code=400)
    with patch("app.services.storage.storage_client.requests.request", side_effect=fake):
        with pytest.raises(UploadError, match="HTTP 400"):
            client.put("a/b.jpg", b"x")


def test_transport_error_is_wrapped():
    client = make_client()
    with patch("app.services.storage.storage_client.requests.request",
               side_effect=requests.ConnectionError("boom")):
        with pytest.raises(UploadError, match="boom"):
            client.put("a/b.jpg", b"x")


def test_missing_configuration_raises_without_request():
    client = make_client(base_url="", api_key="")
    with patch("app.services.storage.storage_client.requests.request") as mock_request:
        with pytest.raises(UploadError, match="not configured"):
            client.put("a/b.jpg", b"x")
    mock_request.assert_not_called()


def test_cancelled_token_stops_before_request():
    client = make_client()
    token = CancellationToken()
    token.cancel()
    with patch("app.services.storage.storage_client.requests.request") as mock_request:
        with pytest.raises(UploadCancelled):
            client.put_resumable("a/b.bin", b"12345678", lambda pct: None, cancel_token=token)
    mock_request.assert_not_called()


# ---------------------------------------------------------------------------
# upload_file
# ---------------------------------------------------------------------------

def test_upload_file_uses_resumable_when_progress_requested(storage):
    ticks = []
    url = upload_file(storage, blob(), "artists/1/photo/photo.jpg", on_progress=ticks.append)
    assert url == "https://storage.test/artists/1/photo/photo.jpg"
    assert ticks[-1] == 100.0


def test_upload_file_propagates_upload_error():
    failing = FakeStorage(fail_on=("photo",), error=UploadError("denied"))
    with pytest.raises(UploadError, match="denied"):
        upload_file(failing, blob(), "artists/1/photo/photo.jpg")


def test_upload_blob_size_in_megabytes():
    big = UploadBlob(filename="clip.MP4", content=b"x" * (3 * 1024 * 1024 + 5000))
    assert big.size_mb == 3.0
    assert big.extension == ".mp4"


# ---------------------------------------------------------------------------
# upload_all
# ---------------------------------------------------------------------------

class JitteryStorage(FakeStorage):
    """Reports uneven, interleaved progress from several threads."""

    def put_resumable(self, path, content, on_progress, content_type="application/octet-stream", cancel_token=None):
        for pct in (10, 5, 60, 40, 90, 100):
            on_progress(pct)
            time.sleep(0.001)
        return self._write(path, content, cancel_token)


def test_overall_progress_never_decreases_and_stays_within_100():
    values = []
    lock = threading.Lock()

    def record(pct):
        with lock:
            values.append(pct)

    files = [blob(f"w{i}.jpg") for i in range(4)]
    upload_all(JitteryStorage(), files, "artists/1/works/", on_overall_progress=record)

    assert values == sorted(values)
    assert all(0 <= v <= 100 for v in values)
    assert values[-1] == pytest.approx(100.0)


class ReverseOrderStorage(FakeStorage):
    """The first file finishes last."""

    def put_resumable(self, path, content, on_progress, content_type="application/octet-stream", cancel_token=None):
        index = int(path.rsplit("/", 1)[1].split("_")[1])
        time.sleep(0.03 * (3 - index))
        return super().put_resumable(path, content, on_progress, content_type, cancel_token)


def test_results_keep_input_order_regardless_of_completion_order():
    files = [blob(f"w{i}.jpg") for i in range(3)]
    urls = upload_all(ReverseOrderStorage(), files, "artists/1/works/", on_overall_progress=lambda p: None)

    assert len(urls) == 3
    for i, url in enumerate(urls):
        assert f"_{i}_w{i}.jpg" in url


def test_single_failure_rejects_the_whole_call():
    failing = FakeStorage(fail_on=("_1_",), error=UploadError("network down"))
    files = [blob(f"w{i}.jpg") for i in range(3)]

    result = None
    with pytest.raises(UploadError, match="network down"):
        result = upload_all(failing, files, "artists/1/works/")
    assert result is None


def test_unexpected_error_is_wrapped_in_upload_error():
    failing = FakeStorage(fail_on=("_0_",), error=RuntimeError("bad"))
    with pytest.raises(UploadError, match="bad"):
        upload_all(failing, [blob("a.jpg")], "artists/1/works/")


def test_empty_file_list_makes_no_calls(storage):
    assert upload_all(storage, [], "artists/1/works/") == []
    assert storage.calls == 0


def test_object_paths_are_unique_and_sanitized(storage):
    files = [blob("Œuvre n°1.jpg"), blob("Œuvre n°1.jpg")]
    upload_all(storage, files, "artists/1/works/")
    paths = sorted(storage.objects)
    assert len(paths) == 2
    assert paths[0].endswith("_0_OEuvre_n_1.jpg")
    assert paths[1].endswith("_1_OEuvre_n_1.jpg")
