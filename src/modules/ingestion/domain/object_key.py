"""
Object keys and public URLs for stored media.

Every key and URL handed to the object store or written to a record is built
here, so the public retrieval scheme lives in exactly one place.
"""

import base64
import secrets
from typing import Optional

from src.modules.ingestion.domain.orientation import OrientationLabel

OBJECT_ID_BYTES = 32
VIDEO_EXTENSION = "mp4"
THUMBNAIL_PREFIX = "thumbnails"


def generate_object_id() -> str:
    """Random 32-byte value, URL-safe base64 without padding."""
    raw = secrets.token_bytes(OBJECT_ID_BYTES)
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def build_video_key(label: OrientationLabel, object_id: Optional[str] = None) -> str:
    """<label>/<id>.mp4"""
    object_id = object_id or generate_object_id()
    return f"{OrientationLabel(label).value}/{object_id}.{VIDEO_EXTENSION}"


def build_thumbnail_key(extension: str, object_id: Optional[str] = None) -> str:
    object_id = object_id or generate_object_id()
    return f"{THUMBNAIL_PREFIX}/{object_id}.{extension}"


def build_public_url(bucket: str, host: str, key: str) -> str:
    """
    Virtual-hosted style URL: https://<bucket>.<host>/<key>
    """
    if not bucket or not host:
        raise ValueError("bucket and host are required to build a public URL")
    return f"https://{bucket}.{host.strip('/')}/{key.lstrip('/')}"
