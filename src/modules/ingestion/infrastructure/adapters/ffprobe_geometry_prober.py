import json
import logging
import subprocess
from typing import List, Optional

from src.modules.ingestion.application.ports.geometry_prober_port import GeometryProberPort
from src.modules.ingestion.domain.errors import NoStreamsFound, ProbeFailure
from src.modules.ingestion.domain.geometry import StreamGeometry

logger = logging.getLogger(__name__)

class FFprobeGeometryProber(GeometryProberPort):
    """
    Reads stream geometry with `ffprobe -show_streams` JSON output.

    Only the first reported stream is inspected. Containers that list an
    audio or data stream first yield that stream's (usually empty) geometry,
    which surfaces as a ProbeFailure rather than a silent misclassification.
    """

    def __init__(self, binary: str = "ffprobe", timeout: Optional[float] = None):
        self.binary = binary
        self.timeout = timeout

    def build_command(self, file_path: str) -> List[str]:
        # ffprobe -v error -print_format json -show_streams video.mp4
        return [
            self.binary,
            "-v", "error",
            "-print_format", "json",
            "-show_streams",
            file_path,
        ]

    def probe(self, file_path: str) -> StreamGeometry:
        command = self.build_command(file_path)
        logger.info(f"Probing stream geometry of {file_path}")

        try:
            result = subprocess.run(
                command,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as e:
            error_msg = e.stderr.strip() if e.stderr else "Unknown error"
            logger.error(f"ffprobe failed with exit code {e.returncode}: {error_msg}")
            raise ProbeFailure(f"Failed to run ffprobe: {error_msg}") from e
        except subprocess.TimeoutExpired as e:
            logger.error(f"ffprobe timed out after {self.timeout}s on {file_path}")
            raise ProbeFailure(f"ffprobe timed out after {self.timeout}s") from e
        except OSError as e:
            logger.error(f"Could not start ffprobe ({self.binary}): {e}")
            raise ProbeFailure(f"Could not start ffprobe: {e}") from e

        return self.parse_report(result.stdout)

    @staticmethod
    def parse_report(report: str) -> StreamGeometry:
        try:
            payload = json.loads(report)
        except json.JSONDecodeError as e:
            raise ProbeFailure(f"Failed to parse ffprobe output: {e}") from e

        if not isinstance(payload, dict):
            raise ProbeFailure("Failed to parse ffprobe output: expected a JSON object")

        streams = payload.get("streams") or []
        if not isinstance(streams, list):
            raise ProbeFailure("Failed to parse ffprobe output: 'streams' is not a list")
        if not streams:
            raise NoStreamsFound()

        first = streams[0]
        width = first.get("width") if isinstance(first, dict) else None
        height = first.get("height") if isinstance(first, dict) else None
        if not _is_dimension(width) or not _is_dimension(height):
            raise ProbeFailure(
                f"First stream has no usable geometry (width={width!r}, height={height!r})"
            )

        return StreamGeometry(width=width, height=height)


def _is_dimension(value) -> bool:
    # bool is an int subclass; JSON true/false is not a size
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
