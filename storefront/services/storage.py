import io, re, time
from typing import List, Optional
from minio import Minio
from minio.error import S3Error
import structlog
from storefront.core.config import settings
from storefront.core.errors import StorageError, ValidationError

logger = structlog.get_logger(__name__)

ACCEPTED_IMAGE_TYPES = ('image/jpeg', 'image/png', 'image/webp')

def _host(endpoint: str) -> str:
    return endpoint.replace('http://', '').replace('https://', '')

def blob_path(folder: str, filename: str, now_ms: Optional[int] = None) -> str:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    name = re.sub(r'\s+', '-', filename)
    return f"{folder}/{stamp}-{name}"

class BlobStorage:
    """Public object storage for product and profile images, keyed by path."""

    def __init__(self, client: Minio, bucket: str, public_base: str):
        self.client = client
        self.bucket = bucket
        self.public_base = public_base.rstrip('/')

    @classmethod
    def from_settings(cls) -> "BlobStorage":
        client = Minio(_host(settings.S3_ENDPOINT), access_key=settings.S3_ACCESS_KEY, secret_key=settings.S3_SECRET_KEY, secure=settings.S3_SECURE)
        scheme = 'https' if settings.S3_SECURE else 'http'
        return cls(client, settings.S3_BUCKET, f"{scheme}://{_host(settings.S3_ENDPOINT)}/{settings.S3_BUCKET}")

    def ensure_bucket(self):
        if not self.client.bucket_exists(self.bucket):
            self.client.make_bucket(self.bucket)

    def url_for(self, path: str) -> str:
        return f"{self.public_base}/{path}"

    def path_for(self, url_or_path: str) -> str:
        prefix = self.public_base + '/'
        return url_or_path[len(prefix):] if url_or_path.startswith(prefix) else url_or_path.lstrip('/')

    def upload(self, data: bytes, content_type: str, filename: str, folder: str = 'uploads') -> dict:
        path = blob_path(folder, filename)
        try:
            self.ensure_bucket()
            self.client.put_object(self.bucket, path, io.BytesIO(data), length=len(data), content_type=content_type)
        except S3Error as e:
            logger.error("blob_upload_failed", path=path, error=str(e))
            raise StorageError("Failed to upload file")
        return {'url': self.url_for(path), 'pathname': path, 'contentType': content_type}

    def delete(self, url_or_path: str) -> None:
        path = self.path_for(url_or_path)
        try:
            self.client.remove_object(self.bucket, path)
        except S3Error as e:
            logger.error("blob_delete_failed", path=path, error=str(e))
            raise StorageError("Failed to delete file")

    def list(self, prefix: str = 'uploads') -> List[dict]:
        try:
            objects = self.client.list_objects(self.bucket, prefix=prefix, recursive=True)
            return [{'pathname': o.object_name, 'url': self.url_for(o.object_name), 'size': o.size} for o in objects]
        except S3Error as e:
            logger.error("blob_list_failed", prefix=prefix, error=str(e))
            raise StorageError("Failed to list files")

def check_image(data: bytes, content_type: Optional[str]):
    if content_type not in ACCEPTED_IMAGE_TYPES:
        raise ValidationError(f"Accepted file types: {', '.join(t.split('/')[1] for t in ACCEPTED_IMAGE_TYPES)}")
    if len(data) > settings.MAX_UPLOAD_MB * 1024 * 1024:
        raise ValidationError(f"Maximum file size is {settings.MAX_UPLOAD_MB}MB")
