import asyncio
from dataclasses import replace
import logging
from typing import Optional

from src.modules.ingestion.application.authorization import RecordAuthorizer
from src.modules.ingestion.application.orchestrator import UploadSource, check_declared_size
from src.modules.ingestion.application.ports.object_store_port import ObjectStorePort
from src.modules.ingestion.application.ports.video_repository_port import VideoRepositoryPort
from src.modules.ingestion.domain.errors import RecordUpdateFailure, UnsupportedMediaType, UploadTooLarge
from src.modules.ingestion.domain.media_type import THUMBNAIL_EXTENSIONS, parse_media_type
from src.modules.ingestion.domain.object_key import build_public_url, build_thumbnail_key
from src.modules.ingestion.domain.video_record import VideoRecord

logger = logging.getLogger(__name__)

class ThumbnailService:
    """
    Stores a thumbnail image as-is. The bytes stay in this call until they
    are handed to the object store; nothing is staged on disk.
    """

    def __init__(self,
                 authorizer: RecordAuthorizer,
                 video_repository: VideoRepositoryPort,
                 object_store: ObjectStorePort,
                 public_host: str,
                 max_upload_bytes: int = 10 << 20):
        self.authorizer = authorizer
        self.video_repository = video_repository
        self.object_store = object_store
        self.public_host = public_host
        self.max_upload_bytes = max_upload_bytes

    async def authorize(self, raw_video_id: str, authorization: Optional[str]) -> VideoRecord:
        return await self.authorizer.authorize(raw_video_id, authorization)

    def check_declared_size(self, content_length: Optional[str]) -> None:
        check_declared_size(content_length, self.max_upload_bytes)

    async def attach(self, video: VideoRecord, upload: UploadSource) -> VideoRecord:
        media_type = parse_media_type(upload.content_type)
        extension = THUMBNAIL_EXTENSIONS.get(media_type)
        if extension is None:
            raise UnsupportedMediaType(
                f"Invalid media type {upload.content_type!r}, expected one of {', '.join(THUMBNAIL_EXTENSIONS)}"
            )

        data = await asyncio.to_thread(upload.stream.read, self.max_upload_bytes + 1)
        if len(data) > self.max_upload_bytes:
            raise UploadTooLarge(f"Thumbnail exceeds maximum size of {self.max_upload_bytes} bytes.")

        key = build_thumbnail_key(extension)
        await asyncio.to_thread(self.object_store.upload_bytes, key, data, media_type)

        url = build_public_url(self.object_store.bucket_name, self.public_host, key)
        published = replace(video, thumbnail_url=url)
        try:
            updated = await self.video_repository.update(published)
        except RecordUpdateFailure:
            logger.error(
                f"[{video.id}] Dangling object: gs://{self.object_store.bucket_name}/{key} "
                f"was uploaded but the record was not updated (url={url})"
            )
            raise

        logger.info(f"[{video.id}] Thumbnail stored at {url}")
        return updated
