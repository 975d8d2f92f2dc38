import logging
from typing import Optional

from google.cloud import storage

from src.modules.ingestion.application.ports.object_store_port import ObjectStorePort
from src.modules.ingestion.domain.errors import PublishFailure

logger = logging.getLogger(__name__)

class GCSObjectStore(ObjectStorePort):
    """
    Google Cloud Storage publisher.

    Uploads are a single attempt (retry=None); a failed upload leaves no
    object behind, so there is nothing to clean up remotely.
    """

    def __init__(self,
                 bucket_name: str,
                 project_id: Optional[str] = None,
                 credentials_path: Optional[str] = None,
                 timeout: Optional[float] = None,
                 client: Optional[storage.Client] = None):
        if client is None:
            if credentials_path:
                client = storage.Client.from_service_account_json(credentials_path, project=project_id)
            else:
                client = storage.Client(project=project_id)

        self.storage_client = client
        self.bucket_name = bucket_name
        self.timeout = timeout
        self.bucket = self.storage_client.bucket(bucket_name, user_project=project_id)

    def upload_file(self, object_name: str, file_path: str, content_type: str) -> None:
        blob = self.bucket.blob(object_name)
        try:
            blob.upload_from_filename(
                file_path,
                content_type=content_type,
                timeout=self.timeout,
                retry=None,
            )
        except Exception as e:
            logger.error(f"Upload of {file_path} to gs://{self.bucket_name}/{object_name} failed: {e}")
            raise PublishFailure(f"Couldn't upload video: {e}") from e
        logger.info(f"Uploaded {file_path} to gs://{self.bucket_name}/{object_name}")

    def upload_bytes(self, object_name: str, data: bytes, content_type: str) -> None:
        blob = self.bucket.blob(object_name)
        try:
            blob.upload_from_string(
                data,
                content_type=content_type,
                timeout=self.timeout,
                retry=None,
            )
        except Exception as e:
            logger.error(f"Upload of {len(data)} bytes to gs://{self.bucket_name}/{object_name} failed: {e}")
            raise PublishFailure(f"Couldn't upload object: {e}") from e
        logger.info(f"Uploaded {len(data)} bytes to gs://{self.bucket_name}/{object_name}")
