from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional


@dataclass
class VideoRecord:
    """
    A video owned by a user. This service only ever mutates the URL fields.
    """
    id: str
    user_id: str
    title: str = ""
    description: Optional[str] = None
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id

    def model_dump(self) -> Dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "video_url": self.video_url,
            "thumbnail_url": self.thumbnail_url,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
