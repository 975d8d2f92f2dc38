from functools import lru_cache

from src.config.settings import get_settings
from src.shared.infrastructure.db.mongo import get_db
from src.modules.ingestion.application.authorization import RecordAuthorizer
from src.modules.ingestion.application.orchestrator import IngestionOrchestrator
from src.modules.ingestion.application.thumbnail_service import ThumbnailService

# Ports
from src.modules.ingestion.application.ports.container_normalizer_port import ContainerNormalizerPort
from src.modules.ingestion.application.ports.geometry_prober_port import GeometryProberPort
from src.modules.ingestion.application.ports.identity_verifier_port import IdentityVerifierPort
from src.modules.ingestion.application.ports.object_store_port import ObjectStorePort
from src.modules.ingestion.application.ports.video_repository_port import VideoRepositoryPort

# Adapters
from src.modules.ingestion.infrastructure.adapters.ffmpeg_container_normalizer import FFmpegContainerNormalizer
from src.modules.ingestion.infrastructure.adapters.ffprobe_geometry_prober import FFprobeGeometryProber
from src.modules.ingestion.infrastructure.adapters.jwt_identity_verifier import JWTIdentityVerifier
from src.modules.ingestion.infrastructure.repositories.mongo_video_repository import MongoVideoRepository
from src.modules.ingestion.infrastructure.storage.gcs_object_store import GCSObjectStore


@lru_cache
def get_identity_verifier() -> IdentityVerifierPort:
    settings = get_settings()
    return JWTIdentityVerifier(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        issuer=settings.JWT_ISSUER,
    )


@lru_cache
def get_video_repository() -> VideoRepositoryPort:
    return MongoVideoRepository(get_db())


@lru_cache
def get_geometry_prober() -> GeometryProberPort:
    # Assuming ffprobe is installed in the environment
    settings = get_settings()
    return FFprobeGeometryProber(binary=settings.FFPROBE_BINARY, timeout=settings.PROBE_TIMEOUT)


@lru_cache
def get_container_normalizer() -> ContainerNormalizerPort:
    settings = get_settings()
    return FFmpegContainerNormalizer(binary=settings.FFMPEG_BINARY, timeout=settings.NORMALIZE_TIMEOUT)


@lru_cache
def get_object_store() -> ObjectStorePort:
    settings = get_settings()
    return GCSObjectStore(
        bucket_name=settings.BUCKET_NAME,
        project_id=settings.GCP_PROJECT_ID,
        credentials_path=settings.GOOGLE_APPLICATION_CREDENTIALS,
        timeout=settings.UPLOAD_TIMEOUT,
    )


@lru_cache
def get_record_authorizer() -> RecordAuthorizer:
    return RecordAuthorizer(get_identity_verifier(), get_video_repository())


@lru_cache
def get_ingestion_orchestrator() -> IngestionOrchestrator:
    settings = get_settings()
    return IngestionOrchestrator(
        authorizer=get_record_authorizer(),
        video_repository=get_video_repository(),
        prober=get_geometry_prober(),
        normalizer=get_container_normalizer(),
        object_store=get_object_store(),
        public_host=settings.PUBLIC_HOST,
        max_upload_bytes=settings.MAX_VIDEO_UPLOAD_BYTES,
        staging_dir=settings.STAGING_DIR,
    )


@lru_cache
def get_thumbnail_service() -> ThumbnailService:
    settings = get_settings()
    return ThumbnailService(
        authorizer=get_record_authorizer(),
        video_repository=get_video_repository(),
        object_store=get_object_store(),
        public_host=settings.PUBLIC_HOST,
        max_upload_bytes=settings.MAX_THUMBNAIL_UPLOAD_BYTES,
    )
