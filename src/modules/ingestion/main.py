import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.modules.ingestion.api.router import router as ingestion_router
from src.modules.ingestion.domain.errors import IngestionError
from src.shared.infrastructure.db.mongo import close_mongo_client

# Setup Logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Video ingest API starting")
    yield
    close_mongo_client()

app = FastAPI(title="Video Ingest API", version="1.0.0", lifespan=lifespan)

@app.exception_handler(IngestionError)
async def ingestion_error_handler(request: Request, exc: IngestionError):
    if exc.is_client_error:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    else:
        logger.error(
            f"{request.method} {request.url.path} failed ({exc.status_code}) at stage '{exc.stage.value}': {exc.message}",
            exc_info=exc,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

app.include_router(ingestion_router, prefix="/api/v1", tags=["ingestion"])

@app.get("/health")
async def health_check():
    return {"status": "ok"}
