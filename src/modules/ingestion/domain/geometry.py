from dataclasses import dataclass


@dataclass(frozen=True)
class StreamGeometry:
    """
    Pixel dimensions of the primary video stream of a staged file.
    """
    width: int
    height: int
