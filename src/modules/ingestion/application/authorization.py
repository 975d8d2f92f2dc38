import logging
import uuid
from typing import Optional

from src.modules.ingestion.application.ports.identity_verifier_port import IdentityVerifierPort
from src.modules.ingestion.application.ports.video_repository_port import VideoRepositoryPort
from src.modules.ingestion.domain.errors import InvalidVideoId, NotVideoOwner, VideoNotFound
from src.modules.ingestion.domain.video_record import VideoRecord

logger = logging.getLogger(__name__)


def parse_video_id(raw: str) -> str:
    try:
        return str(uuid.UUID(raw))
    except (TypeError, ValueError, AttributeError) as e:
        raise InvalidVideoId(f"Invalid ID: {raw!r}") from e


class RecordAuthorizer:
    """
    Resolves the caller and the target record, and requires that the caller
    owns it. Performs no file or network I/O besides the record lookup.
    """

    def __init__(self, identity_verifier: IdentityVerifierPort, video_repository: VideoRepositoryPort):
        self.identity_verifier = identity_verifier
        self.video_repository = video_repository

    async def authorize(self, raw_video_id: str, authorization: Optional[str]) -> VideoRecord:
        video_id = parse_video_id(raw_video_id)
        user_id = self.identity_verifier.verify(authorization)

        video = await self.video_repository.get(video_id)
        if video is None:
            raise VideoNotFound(f"Video {video_id} not found")

        if not video.is_owned_by(user_id):
            logger.warning(f"User {user_id} tried to modify video {video_id} owned by {video.user_id}")
            raise NotVideoOwner()

        logger.info(f"Authorized user {user_id} for video {video_id}")
        return video
