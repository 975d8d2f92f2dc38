import asyncio
import logging
from dataclasses import dataclass, replace
from typing import BinaryIO, Optional

from src.modules.ingestion.application.authorization import RecordAuthorizer
from src.modules.ingestion.application.ports.container_normalizer_port import ContainerNormalizerPort
from src.modules.ingestion.application.ports.geometry_prober_port import GeometryProberPort
from src.modules.ingestion.application.ports.object_store_port import ObjectStorePort
from src.modules.ingestion.application.ports.video_repository_port import VideoRepositoryPort
from src.modules.ingestion.domain.errors import (
    IngestionError,
    IngestionStage,
    RecordUpdateFailure,
    UnsupportedMediaType,
    UploadTooLarge,
)
from src.modules.ingestion.domain.media_type import VIDEO_MP4, parse_media_type
from src.modules.ingestion.domain.object_key import build_public_url, build_video_key
from src.modules.ingestion.domain.orientation import classify
from src.modules.ingestion.domain.video_record import VideoRecord
from src.modules.ingestion.infrastructure.staging import StagingArea

logger = logging.getLogger(__name__)


def check_declared_size(content_length: Optional[str], max_bytes: int) -> None:
    """Rejects a body whose declared length is over max_bytes before it is buffered."""
    if not content_length:
        return
    try:
        declared = int(content_length)
    except ValueError:
        return
    if declared > max_bytes:
        raise UploadTooLarge(f"Request body of {declared} bytes exceeds maximum of {max_bytes} bytes.")


@dataclass
class UploadSource:
    """The uploaded part of a multipart request: a readable stream and its declared type."""
    stream: BinaryIO
    content_type: Optional[str]
    filename: Optional[str] = None


class IngestionOrchestrator:
    """
    Runs one video upload through stage -> probe -> classify -> remux -> upload -> publish.

    Every staged file lives inside a StagingArea scoped to the call, so no
    scratch file outlives the request regardless of where it fails.
    Blocking steps run one at a time in a worker thread.
    """

    def __init__(self,
                 authorizer: RecordAuthorizer,
                 video_repository: VideoRepositoryPort,
                 prober: GeometryProberPort,
                 normalizer: ContainerNormalizerPort,
                 object_store: ObjectStorePort,
                 public_host: str,
                 max_upload_bytes: int = 1 << 30,
                 staging_dir: Optional[str] = None):
        self.authorizer = authorizer
        self.video_repository = video_repository
        self.prober = prober
        self.normalizer = normalizer
        self.object_store = object_store
        self.public_host = public_host
        self.max_upload_bytes = max_upload_bytes
        self.staging_dir = staging_dir

    async def authorize(self, raw_video_id: str, authorization: Optional[str]) -> VideoRecord:
        """Received -> Authorized. Must run before the request body is read."""
        return await self.authorizer.authorize(raw_video_id, authorization)

    def check_declared_size(self, content_length: Optional[str]) -> None:
        check_declared_size(content_length, self.max_upload_bytes)

    def validate_media_type(self, content_type: Optional[str]) -> str:
        media_type = parse_media_type(content_type)
        if media_type != VIDEO_MP4:
            raise UnsupportedMediaType(f"Invalid media type {content_type!r}, expected {VIDEO_MP4}")
        return media_type

    async def ingest(self, video: VideoRecord, upload: UploadSource) -> VideoRecord:
        """
        Authorized -> Done for an already authorized record.
        Returns the record with its playback URL set.
        """
        stage = IngestionStage.AUTHORIZED
        media_type = self.validate_media_type(upload.content_type)

        try:
            with StagingArea(directory=self.staging_dir) as staging:
                original_path = await asyncio.to_thread(
                    staging.write_stream, upload.stream, self.max_upload_bytes
                )
                stage = self._advance(video, IngestionStage.STAGED)

                geometry = await asyncio.to_thread(self.prober.probe, original_path)
                stage = self._advance(video, IngestionStage.PROBED)

                label = classify(geometry.width, geometry.height)
                stage = self._advance(video, IngestionStage.CLASSIFIED)
                logger.info(f"[{video.id}] Geometry {geometry.width}x{geometry.height} classified as {label.value}")

                staging.track(self.normalizer.output_path_for(original_path))
                normalized_path = await asyncio.to_thread(self.normalizer.normalize, original_path)
                staging.track(normalized_path)
                staging.release(original_path)
                stage = self._advance(video, IngestionStage.NORMALIZED)

                key = build_video_key(label)
                await asyncio.to_thread(
                    self.object_store.upload_file, key, normalized_path, media_type
                )
                stage = self._advance(video, IngestionStage.PUBLISHED)
        except IngestionError as e:
            logger.error(f"[{video.id}] Ingestion failed after stage '{stage.value}': {e.message}")
            raise

        url = build_public_url(self.object_store.bucket_name, self.public_host, key)
        published = replace(video, video_url=url)
        try:
            updated = await self.video_repository.update(published)
        except RecordUpdateFailure:
            logger.error(
                f"[{video.id}] Dangling object: gs://{self.object_store.bucket_name}/{key} "
                f"was uploaded but the record was not updated (url={url})"
            )
            raise
        self._advance(video, IngestionStage.RECORD_UPDATED)

        logger.info(f"[{video.id}] Ingestion {IngestionStage.DONE.value}: {url}")
        return updated

    @staticmethod
    def _advance(video: VideoRecord, stage: IngestionStage) -> IngestionStage:
        logger.info(f"[{video.id}] -> {stage.value}")
        return stage
