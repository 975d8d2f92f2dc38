import os
import subprocess
import logging
from typing import List, Optional

from src.modules.ingestion.application.ports.container_normalizer_port import ContainerNormalizerPort
from src.modules.ingestion.domain.errors import NormalizeFailure

logger = logging.getLogger(__name__)

class FFmpegContainerNormalizer(ContainerNormalizerPort):
    def __init__(self, binary: str = "ffmpeg", timeout: Optional[float] = None):
        self.binary = binary
        self.timeout = timeout

    def build_command(self, input_path: str, output_path: str) -> List[str]:
        # ffmpeg -i video.mp4 -c copy -movflags faststart -f mp4 video.mp4.processing.mp4
        return [
            self.binary,
            "-i", input_path,
            "-c", "copy",
            "-movflags", "faststart",
            "-f", "mp4",
            "-y",
            "-loglevel", "error",
            output_path,
        ]

    def normalize(self, input_path: str) -> str:
        if not os.path.exists(input_path):
            raise NormalizeFailure(f"Staged file not found: {input_path}")

        output_path = self.output_path_for(input_path)
        logger.info(f"Relocating index of {input_path} to {output_path}")

        try:
            subprocess.run(
                self.build_command(input_path, output_path),
                check=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as e:
            error_msg = e.stderr.decode(errors="replace").strip() if e.stderr else "Unknown error"
            logger.error(f"FFmpeg failed: {error_msg}")
            self._discard(output_path)
            raise NormalizeFailure(f"Failed to process video: {error_msg}") from e
        except subprocess.TimeoutExpired as e:
            logger.error(f"FFmpeg timed out after {self.timeout}s on {input_path}")
            self._discard(output_path)
            raise NormalizeFailure(f"FFmpeg timed out after {self.timeout}s") from e
        except OSError as e:
            logger.error(f"Could not start ffmpeg ({self.binary}): {e}")
            self._discard(output_path)
            raise NormalizeFailure(f"Could not start ffmpeg: {e}") from e

        logger.info("Fast start processing completed successfully.")
        return output_path

    @staticmethod
    def _discard(path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove partial output {path}: {e}")
