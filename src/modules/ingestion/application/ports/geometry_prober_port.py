from abc import ABC, abstractmethod

from src.modules.ingestion.domain.geometry import StreamGeometry


class GeometryProberPort(ABC):
    @abstractmethod
    def probe(self, file_path: str) -> StreamGeometry:
        """
        Reads the frame geometry of the first stream in a staged media file.

        Args:
            file_path: Path to a fully written, seekable media file.

        Raises:
            ProbeFailure: If the probe cannot run or its report is unreadable.
            NoStreamsFound: If the container reports no streams.
        """
        pass
