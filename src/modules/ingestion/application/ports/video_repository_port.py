from abc import ABC, abstractmethod
from typing import Optional

from src.modules.ingestion.domain.video_record import VideoRecord


class VideoRepositoryPort(ABC):
    @abstractmethod
    async def get(self, video_id: str) -> Optional[VideoRecord]:
        """Returns None when no record has this id. Raises RecordLookupFailure."""
        pass

    @abstractmethod
    async def update(self, video: VideoRecord) -> VideoRecord:
        """Persists the URL fields of an existing record. Raises RecordUpdateFailure."""
        pass
