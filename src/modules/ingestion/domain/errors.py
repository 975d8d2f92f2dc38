from enum import Enum
from typing import Optional


class IngestionStage(str, Enum):
    RECEIVED = "received"
    AUTHORIZED = "authorized"
    STAGED = "staged"
    PROBED = "probed"
    CLASSIFIED = "classified"
    NORMALIZED = "normalized"
    PUBLISHED = "published"
    RECORD_UPDATED = "record_updated"
    DONE = "done"


class IngestionError(Exception):
    """
    Base class for every failure the ingestion pipeline reports.

    status_code says who is at fault: 4xx for the caller, 5xx for us or
    one of our dependencies. stage is the pipeline state the failure aborted.
    """
    status_code: int = 500
    error_code: str = "INGESTION_FAILED"
    stage: IngestionStage = IngestionStage.RECEIVED
    default_message: str = "Video ingestion failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "error_code": self.error_code,
            "stage": self.stage.value,
        }


# Caller errors

class InvalidVideoId(IngestionError):
    status_code = 400
    error_code = "INVALID_ID"
    default_message = "Invalid ID"


class MissingCredentials(IngestionError):
    status_code = 401
    error_code = "MISSING_CREDENTIALS"
    default_message = "Couldn't find bearer token"


class InvalidCredentials(IngestionError):
    status_code = 401
    error_code = "INVALID_CREDENTIALS"
    default_message = "Couldn't validate bearer token"


class VideoNotFound(IngestionError):
    status_code = 404
    error_code = "VIDEO_NOT_FOUND"
    default_message = "Video not found"


class NotVideoOwner(IngestionError):
    status_code = 403
    error_code = "NOT_OWNER"
    default_message = "Not authorized to modify this video"


class MissingUploadField(IngestionError):
    status_code = 400
    error_code = "MISSING_UPLOAD"
    stage = IngestionStage.AUTHORIZED
    default_message = "Upload field is missing"


class UnsupportedMediaType(IngestionError):
    status_code = 400
    error_code = "INVALID_MEDIA_TYPE"
    stage = IngestionStage.AUTHORIZED
    default_message = "Invalid media type"


class UploadTooLarge(IngestionError):
    status_code = 413
    error_code = "FILE_TOO_LARGE"
    stage = IngestionStage.AUTHORIZED
    default_message = "Upload exceeds the maximum allowed size"


# Dependency and resource errors

class RecordLookupFailure(IngestionError):
    error_code = "RECORD_LOOKUP_FAILED"
    default_message = "Couldn't get video"


class StagingFailure(IngestionError):
    error_code = "STAGING_FAILED"
    stage = IngestionStage.AUTHORIZED
    default_message = "Couldn't save file"


class ProbeFailure(IngestionError):
    error_code = "PROBE_FAILED"
    stage = IngestionStage.STAGED
    default_message = "Couldn't read video geometry"


class NoStreamsFound(ProbeFailure):
    error_code = "NO_STREAMS"
    default_message = "No streams found in video file"


class NormalizeFailure(IngestionError):
    error_code = "NORMALIZE_FAILED"
    stage = IngestionStage.CLASSIFIED
    default_message = "Couldn't process video for fast start"


class PublishFailure(IngestionError):
    error_code = "PUBLISH_FAILED"
    stage = IngestionStage.NORMALIZED
    default_message = "Couldn't upload video"


class RecordUpdateFailure(IngestionError):
    error_code = "RECORD_UPDATE_FAILED"
    stage = IngestionStage.PUBLISHED
    default_message = "Couldn't update video"
