"""Local persistence and Cloud Storage upload of finished feeds."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from google.api_core import exceptions as gcloud_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import storage

logger = logging.getLogger("yle_feed")

FEED_CONTENT_TYPE = "application/xml"
UPLOAD_TIMEOUT = 60.0
CREATED_BY = "yle-feed"


class StorageError(Exception):
    """Raised when a feed cannot be written locally or uploaded."""


def write_feed_file(path: Path, data: bytes) -> Path:
    """Write ``data`` to ``path``, creating parent directories as needed."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError(f"mkdir failed: {exc}") from exc
    try:
        path.write_bytes(data)
    except OSError as exc:
        raise StorageError(f"write failed: {exc}") from exc
    logger.info("RSS feed saved to: %s", path)
    return path


def upload_feed(
    local_path: Path,
    bucket_name: str,
    object_name: str,
    client: Optional[storage.Client] = None,
    timeout: float = UPLOAD_TIMEOUT,
) -> str:
    """Upload a written feed file to ``gs://bucket_name/object_name``."""
    try:
        client = client or storage.Client()
        blob = client.bucket(bucket_name).blob(object_name)
        blob.metadata = {
            "created-by": CREATED_BY,
            "date-run": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        }
        blob.upload_from_filename(
            str(local_path),
            content_type=FEED_CONTENT_TYPE,
            timeout=timeout,
        )
    except (
        OSError,
        gcloud_exceptions.GoogleAPIError,
        auth_exceptions.GoogleAuthError,
    ) as exc:
        raise StorageError(
            f"upload of {local_path} to gs://{bucket_name}/{object_name} failed: {exc}"
        ) from exc
    uri = f"gs://{bucket_name}/{object_name}"
    logger.info("File %s successfully uploaded to %s", local_path, uri)
    return uri
