from enum import Enum


class OrientationLabel(str, Enum):
    SQUARE = "square"
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"
    OTHER = "other"


def classify(width: int, height: int) -> OrientationLabel:
    """
    Map frame dimensions to an orientation label.

    Ratios are compared by cross-multiplication so that only exact 16:9 and
    9:16 frames are labelled landscape/portrait. Never compare width // height,
    it collapses almost every ratio to 0 or 1.
    """
    if width == height:
        return OrientationLabel.SQUARE

    if width > height:
        if width * 9 == height * 16:
            return OrientationLabel.LANDSCAPE
        return OrientationLabel.OTHER

    if height * 9 == width * 16:
        return OrientationLabel.PORTRAIT
    return OrientationLabel.OTHER
