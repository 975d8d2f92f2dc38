from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.modules.ingestion.domain.video_record import VideoRecord


class VideoResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    user_id: str
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, video: VideoRecord) -> "VideoResponse":
        return cls(**video.model_dump())
