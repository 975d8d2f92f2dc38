import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from starlette.datastructures import UploadFile
from starlette.types import Message, Receive

from src.modules.ingestion.api.dto.error_response import ErrorResponse
from src.modules.ingestion.api.dto.video_response import VideoResponse
from src.modules.ingestion.application.orchestrator import IngestionOrchestrator, UploadSource
from src.modules.ingestion.application.thumbnail_service import ThumbnailService
from src.modules.ingestion.dependencies import get_ingestion_orchestrator, get_thumbnail_service
from src.modules.ingestion.domain.errors import MissingUploadField, UploadTooLarge

router = APIRouter()
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _bounded_receive(receive: Receive, max_bytes: int) -> Receive:
    """Counts body bytes as they arrive and stops the read once they pass max_bytes."""
    received = 0

    async def receive_within_limit() -> Message:
        nonlocal received
        message = await receive()
        if message["type"] == "http.request":
            received += len(message.get("body", b""))
            if received > max_bytes:
                raise UploadTooLarge(f"Request body exceeds maximum of {max_bytes} bytes.")
        return message

    return receive_within_limit


def _limit_body(request: Request, max_bytes: int) -> Request:
    """
    Rejects an oversized body while it is read, before the form parser spools it.
    Covers chunked bodies, which carry no Content-Length to check up front.
    """
    return Request(request.scope, receive=_bounded_receive(request.receive, max_bytes))


def _upload_source(form, field: str) -> UploadSource:
    upload = form.get(field)
    if not isinstance(upload, UploadFile):
        raise MissingUploadField(f"Couldn't get {field}")
    return UploadSource(stream=upload.file, content_type=upload.content_type, filename=upload.filename)


@router.post("/video_upload/{video_id}", response_model=VideoResponse, responses=ERROR_RESPONSES)
async def upload_video(
    video_id: str,
    request: Request,
    authorization: Optional[str] = Header(default=None),
    orchestrator: IngestionOrchestrator = Depends(get_ingestion_orchestrator)
):
    """
    Upload the video file for an existing record.
    Ownership is checked before the multipart body is read.
    """
    video = await orchestrator.authorize(video_id, authorization)
    orchestrator.check_declared_size(request.headers.get("content-length"))

    logger.info(f"Uploading video for {video.id} by user {video.user_id}")
    body = _limit_body(request, orchestrator.max_upload_bytes)
    async with body.form(max_files=1) as form:
        upload = _upload_source(form, "video")
        updated = await orchestrator.ingest(video, upload)

    return VideoResponse.from_record(updated)


@router.post("/thumbnail_upload/{video_id}", response_model=VideoResponse, responses=ERROR_RESPONSES)
async def upload_thumbnail(
    video_id: str,
    request: Request,
    authorization: Optional[str] = Header(default=None),
    thumbnails: ThumbnailService = Depends(get_thumbnail_service)
):
    video = await thumbnails.authorize(video_id, authorization)
    thumbnails.check_declared_size(request.headers.get("content-length"))

    body = _limit_body(request, thumbnails.max_upload_bytes)
    async with body.form(max_files=1) as form:
        upload = _upload_source(form, "thumbnail")
        updated = await thumbnails.attach(video, upload)

    return VideoResponse.from_record(updated)
