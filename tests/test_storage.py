"""Tests for feed file persistence and the Cloud Storage upload."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as gcloud_exceptions

from yle_feed.storage import StorageError, upload_feed, write_feed_file
from yle_feed.utils import object_name_for_query


def test_write_feed_file_creates_parent_directories(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "dir" / "feed.xml"

    assert write_feed_file(target, b"<rss/>") == target
    assert target.read_bytes() == b"<rss/>"


def test_write_feed_file_reports_os_errors(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory")

    with pytest.raises(StorageError):
        write_feed_file(blocker / "feed.xml", b"<rss/>")


def test_upload_feed_sets_content_type_and_metadata(tmp_path: Path) -> None:
    local = tmp_path / "feed.xml"
    local.write_bytes(b"<rss/>")
    client = MagicMock()
    blob = client.bucket.return_value.blob.return_value

    uri = upload_feed(local, "feeds", "SannaMarin.xml", client=client)

    assert uri == "gs://feeds/SannaMarin.xml"
    client.bucket.assert_called_once_with("feeds")
    client.bucket.return_value.blob.assert_called_once_with("SannaMarin.xml")
    blob.upload_from_filename.assert_called_once_with(
        str(local), content_type="application/xml", timeout=60.0
    )
    assert blob.metadata["created-by"] == "yle-feed"
    assert "date-run" in blob.metadata


def test_upload_feed_wraps_api_errors(tmp_path: Path) -> None:
    local = tmp_path / "feed.xml"
    local.write_bytes(b"<rss/>")
    client = MagicMock()
    blob = client.bucket.return_value.blob.return_value
    blob.upload_from_filename.side_effect = gcloud_exceptions.NotFound("no such bucket")

    with pytest.raises(StorageError, match="gs://feeds/x.xml"):
        upload_feed(local, "feeds", "x.xml", client=client)


def test_object_name_strips_spaces() -> None:
    assert object_name_for_query("Sanna Marin") == "SannaMarin.xml"
    assert object_name_for_query("kissa") == "kissa.xml"
