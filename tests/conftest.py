import os
import shutil
import uuid
from typing import Dict, List, Optional

import pytest

from src.modules.ingestion.application.authorization import RecordAuthorizer
from src.modules.ingestion.application.orchestrator import IngestionOrchestrator
from src.modules.ingestion.application.thumbnail_service import ThumbnailService
from src.modules.ingestion.application.ports.container_normalizer_port import ContainerNormalizerPort
from src.modules.ingestion.application.ports.geometry_prober_port import GeometryProberPort
from src.modules.ingestion.application.ports.identity_verifier_port import IdentityVerifierPort
from src.modules.ingestion.application.ports.object_store_port import ObjectStorePort
from src.modules.ingestion.application.ports.video_repository_port import VideoRepositoryPort
from src.modules.ingestion.domain.errors import (
    InvalidCredentials,
    MissingCredentials,
    NormalizeFailure,
    PublishFailure,
    RecordUpdateFailure,
)
from src.modules.ingestion.domain.geometry import StreamGeometry
from src.modules.ingestion.domain.video_record import VideoRecord

OWNER_ID = str(uuid.UUID("11111111-1111-1111-1111-111111111111"))
STRANGER_ID = str(uuid.UUID("22222222-2222-2222-2222-222222222222"))
VIDEO_ID = str(uuid.UUID("33333333-3333-3333-3333-333333333333"))
BUCKET = "media-bucket"
PUBLIC_HOST = "storage.googleapis.com"


class FakeIdentityVerifier(IdentityVerifierPort):
    """Accepts `Bearer <user-id>` for the user ids it knows."""

    def __init__(self, known_users: List[str]):
        self.known_users = known_users

    def verify(self, authorization: Optional[str]) -> str:
        if not authorization:
            raise MissingCredentials()
        token = authorization.removeprefix("Bearer ").strip()
        if token not in self.known_users:
            raise InvalidCredentials()
        return token


class InMemoryVideoRepository(VideoRepositoryPort):
    def __init__(self):
        self.videos: Dict[str, VideoRecord] = {}
        self.fail_update = False
        self.update_calls = 0

    async def get(self, video_id: str) -> Optional[VideoRecord]:
        return self.videos.get(video_id)

    async def update(self, video: VideoRecord) -> VideoRecord:
        self.update_calls += 1
        if self.fail_update:
            raise RecordUpdateFailure("database unavailable")
        self.videos[video.id] = video
        return video


class FakeProber(GeometryProberPort):
    def __init__(self, geometry: StreamGeometry = StreamGeometry(1280, 720)):
        self.geometry = geometry
        self.error: Optional[Exception] = None
        self.calls: List[str] = []

    def probe(self, file_path: str) -> StreamGeometry:
        self.calls.append(file_path)
        assert os.path.exists(file_path)
        if self.error:
            raise self.error
        return self.geometry


class FakeNormalizer(ContainerNormalizerPort):
    """Copies the input. When failing, leaves a partial output behind like a crashed remux."""

    def __init__(self):
        self.fail = False
        self.calls: List[str] = []

    def normalize(self, input_path: str) -> str:
        self.calls.append(input_path)
        output_path = self.output_path_for(input_path)
        if self.fail:
            with open(output_path, "wb") as f:
                f.write(b"partial")
            raise NormalizeFailure("ffmpeg exited with status 1")
        shutil.copyfile(input_path, output_path)
        return output_path


class FakeObjectStore(ObjectStorePort):
    def __init__(self, bucket_name: str = BUCKET):
        self.bucket_name = bucket_name
        self.fail = False
        self.objects: Dict[str, dict] = {}

    def upload_file(self, object_name: str, file_path: str, content_type: str) -> None:
        if self.fail:
            raise PublishFailure("403 Forbidden")
        with open(file_path, "rb") as f:
            self.objects[object_name] = {"data": f.read(), "content_type": content_type}

    def upload_bytes(self, object_name: str, data: bytes, content_type: str) -> None:
        if self.fail:
            raise PublishFailure("403 Forbidden")
        self.objects[object_name] = {"data": data, "content_type": content_type}


@pytest.fixture
def repository():
    repo = InMemoryVideoRepository()
    repo.videos[VIDEO_ID] = VideoRecord(id=VIDEO_ID, user_id=OWNER_ID, title="Boots")
    return repo


@pytest.fixture
def prober():
    return FakeProber()


@pytest.fixture
def normalizer():
    return FakeNormalizer()


@pytest.fixture
def object_store():
    return FakeObjectStore()


@pytest.fixture
def staging_dir(tmp_path):
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def authorizer(repository):
    return RecordAuthorizer(FakeIdentityVerifier([OWNER_ID, STRANGER_ID]), repository)


@pytest.fixture
def orchestrator(authorizer, repository, prober, normalizer, object_store, staging_dir):
    return IngestionOrchestrator(
        authorizer=authorizer,
        video_repository=repository,
        prober=prober,
        normalizer=normalizer,
        object_store=object_store,
        public_host=PUBLIC_HOST,
        max_upload_bytes=1024,
        staging_dir=str(staging_dir),
    )


@pytest.fixture
def thumbnail_service(authorizer, repository, object_store):
    return ThumbnailService(
        authorizer=authorizer,
        video_repository=repository,
        object_store=object_store,
        public_host=PUBLIC_HOST,
        max_upload_bytes=64,
    )
