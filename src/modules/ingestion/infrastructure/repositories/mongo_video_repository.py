import logging
from typing import Optional
from datetime import datetime, timezone
from pymongo.errors import PyMongoError
from motor.motor_asyncio import AsyncIOMotorDatabase

from src.modules.ingestion.domain.video_record import VideoRecord
from src.modules.ingestion.domain.errors import RecordLookupFailure, RecordUpdateFailure
from src.modules.ingestion.application.ports.video_repository_port import VideoRepositoryPort

logger = logging.getLogger(__name__)

class MongoVideoRepository(VideoRepositoryPort):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.videos

    async def get(self, video_id: str) -> Optional[VideoRecord]:
        try:
            doc = await self.collection.find_one({"_id": video_id})
        except PyMongoError as e:
            logger.error(f"Lookup of video {video_id} failed: {e}")
            raise RecordLookupFailure(f"Couldn't get video: {e}") from e

        if doc:
            return self.doc_to_video_record(doc)
        return None

    async def update(self, video: VideoRecord) -> VideoRecord:
        """
        Writes only the fields this service owns; title and ownership stay untouched.
        """
        video.updated_at = datetime.now(timezone.utc)
        update_data = {
            "video_url": video.video_url,
            "thumbnail_url": video.thumbnail_url,
            "updated_at": video.updated_at,
        }

        try:
            result = await self.collection.update_one(
                {"_id": video.id},
                {"$set": update_data}
            )
        except PyMongoError as e:
            logger.error(f"Update of video {video.id} failed: {e}")
            raise RecordUpdateFailure(f"Couldn't update video: {e}") from e

        if result.matched_count == 0:
            raise RecordUpdateFailure(f"Couldn't update video: {video.id} no longer exists")
        return video

    def doc_to_video_record(self, doc: dict) -> VideoRecord:
        doc = dict(doc)
        _id = doc.pop("_id", None)
        doc["id"] = str(_id)
        if doc.get("user_id") is not None:
            doc["user_id"] = str(doc["user_id"])
        known = VideoRecord.__dataclass_fields__.keys()
        return VideoRecord(**{k: v for k, v in doc.items() if k in known})
