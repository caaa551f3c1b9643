from __future__ import annotations
from functools import lru_cache
from minio import Minio
from minio.deleteobjects import DeleteObject
from minio.error import S3Error
import structlog
from app.config import settings

log = structlog.get_logger()

# Codes meaning the object is already gone; removal is idempotent
_GONE = {"NoSuchKey", "NoSuchObject"}

def _parse_endpoint(ep: str) -> tuple[str, bool]:
    # Return (host:port, secure)
    secure = ep.startswith("https://")
    host = ep.replace("http://", "").replace("https://", "")
    return host, secure


class PhotoObjectStore:
    """Blocking MinIO/S3 client for the photo bucket; call from a worker thread."""

    def __init__(self, client: Minio, bucket: str):
        self.client = client
        self.bucket = bucket

    def remove(self, key: str) -> None:
        try:
            self.client.remove_object(self.bucket, key)
        except S3Error as e:
            if e.code in _GONE:
                return
            raise

    def remove_many(self, keys: list[str]) -> list[str]:
        """
        Batch delete. Returns the keys that could not be removed;
        one failing key never stops the others.
        """
        if not keys:
            return []
        failed: list[str] = []
        errors = self.client.remove_objects(self.bucket, [DeleteObject(k) for k in keys])
        # remove_objects is lazy: nothing is sent until the errors are consumed
        for err in errors:
            if err.code in _GONE:
                continue
            log.warning("storage_object_remove_failed", bucket=self.bucket, key=err.name, code=err.code, error=err.message)
            failed.append(err.name)
        return failed


@lru_cache()
def get_object_store() -> PhotoObjectStore:
    host, secure = _parse_endpoint(settings.s3_endpoint)
    client = Minio(host, access_key=settings.s3_access_key, secret_key=settings.s3_secret_key, secure=secure)
    return PhotoObjectStore(client, settings.photo_bucket)
