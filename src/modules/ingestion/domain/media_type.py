from email.message import Message
from typing import Optional

VIDEO_MP4 = "video/mp4"
IMAGE_JPEG = "image/jpeg"
IMAGE_PNG = "image/png"

THUMBNAIL_EXTENSIONS = {
    IMAGE_JPEG: "jpg",
    IMAGE_PNG: "png",
}


def parse_media_type(content_type: Optional[str]) -> Optional[str]:
    """
    Returns the bare, lower-cased `type/subtype` of a Content-Type value,
    or None when the value is missing or malformed. Parameters are dropped.
    """
    if not content_type or not content_type.strip():
        return None

    message = Message()
    message["Content-Type"] = content_type
    media_type = message.get_content_type()
    # email falls back to text/plain for values it cannot parse
    if media_type == "text/plain" and not content_type.strip().lower().startswith("text/plain"):
        return None
    return media_type
