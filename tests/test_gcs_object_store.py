from unittest.mock import MagicMock

import pytest

from src.modules.ingestion.domain.errors import PublishFailure
from src.modules.ingestion.infrastructure.storage.gcs_object_store import GCSObjectStore


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def blob(client):
    return client.bucket.return_value.blob.return_value


def test_binds_bucket(client):
    store = GCSObjectStore("media-bucket", project_id="proj", client=client)
    client.bucket.assert_called_once_with("media-bucket", user_project="proj")
    assert store.bucket_name == "media-bucket"


def test_upload_file_is_a_single_attempt_with_declared_type(client, blob):
    store = GCSObjectStore("media-bucket", client=client)
    store.upload_file("landscape/abc.mp4", "/tmp/out.mp4", "video/mp4")

    client.bucket.return_value.blob.assert_called_once_with("landscape/abc.mp4")
    blob.upload_from_filename.assert_called_once_with(
        "/tmp/out.mp4",
        content_type="video/mp4",
        timeout=None,
        retry=None,
    )


def test_configured_timeout_is_passed_through(client, blob):
    GCSObjectStore("media-bucket", timeout=120.0, client=client).upload_file("k", "/tmp/out.mp4", "video/mp4")
    assert blob.upload_from_filename.call_args.kwargs["timeout"] == 120.0


def test_upload_error_is_publish_failure(client, blob):
    error = RuntimeError("403 Forbidden")
    blob.upload_from_filename.side_effect = error

    with pytest.raises(PublishFailure) as excinfo:
        GCSObjectStore("media-bucket", client=client).upload_file("k", "/tmp/out.mp4", "video/mp4")

    assert excinfo.value.__cause__ is error
    assert blob.upload_from_filename.call_count == 1


def test_upload_bytes(client, blob):
    GCSObjectStore("media-bucket", client=client).upload_bytes("thumbnails/x.png", b"\x89PNG", "image/png")
    blob.upload_from_string.assert_called_once_with(
        b"\x89PNG",
        content_type="image/png",
        timeout=None,
        retry=None,
    )


def test_upload_bytes_error_is_publish_failure(client, blob):
    blob.upload_from_string.side_effect = ConnectionError("reset by peer")
    with pytest.raises(PublishFailure):
        GCSObjectStore("media-bucket", client=client).upload_bytes("k", b"", "image/png")
