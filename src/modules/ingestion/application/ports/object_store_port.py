from abc import ABC, abstractmethod


class ObjectStorePort(ABC):
    bucket_name: str

    @abstractmethod
    def upload_file(self, object_name: str, file_path: str, content_type: str) -> None:
        """Upload a local file in a single attempt. Raises PublishFailure."""
        pass

    @abstractmethod
    def upload_bytes(self, object_name: str, data: bytes, content_type: str) -> None:
        """Upload an in-memory blob in a single attempt. Raises PublishFailure."""
        pass
