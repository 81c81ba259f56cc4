"""
File storage abstraction layer supporting both local filesystem and AWS S3.

Generated report files are written through this interface so the worker and
the API can switch between local storage (development) and S3 (production).
"""

import logging
import os
import uuid
from io import BytesIO
import boto3
from botocore.exceptions import ClientError
from app.core.config import settings

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    'csv': 'text/csv',
    'json': 'application/json',
    'pdf': 'application/pdf',
    'xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'txt': 'text/plain',
}


def get_content_type(filename: str) -> str:
    """Determine content type based on file extension"""
    extension = filename.lower().rsplit('.', 1)[-1]
    return CONTENT_TYPES.get(extension, 'application/octet-stream')


class StorageError(Exception):
    """Raised when a storage backend cannot complete an operation"""
    pass


class StorageBackend:
    """Abstract base class for storage backends"""

    def save_file(self, content: bytes, filename: str) -> str:
        """Store content and return storage path/URI"""
        raise NotImplementedError

    def download_file(self, file_path: str) -> BytesIO:
        raise NotImplementedError

    def delete_file(self, file_path: str) -> bool:
        raise NotImplementedError

    def file_exists(self, file_path: str) -> bool:
        raise NotImplementedError


class LocalStorage(StorageBackend):
    """Local filesystem storage backend"""

    def __init__(self, base_dir: str = "generated_reports"):
        self.base_dir = base_dir
        os.makedirs(self.base_dir, exist_ok=True)

    def save_file(self, content: bytes, filename: str) -> str:
        unique_filename = f"{uuid.uuid4()}_{filename}"
        file_path = os.path.join(self.base_dir, unique_filename)

        with open(file_path, "wb") as buffer:
            buffer.write(content)

        return file_path

    def download_file(self, file_path: str) -> BytesIO:
        try:
            with open(file_path, "rb") as f:
                return BytesIO(f.read())
        except OSError as e:
            raise StorageError(f"Failed to read {file_path}: {e}")

    def delete_file(self, file_path: str) -> bool:
        try:
            if os.path.exists(file_path):
                os.remove(file_path)
                return True
            return False
        except OSError as e:
            logger.error(f"Error deleting file {file_path}: {e}")
            return False

    def file_exists(self, file_path: str) -> bool:
        return os.path.exists(file_path)


class S3Storage(StorageBackend):
    """AWS S3 storage backend"""

    def __init__(self):
        self.bucket_name = settings.S3_BUCKET_NAME

        # Without explicit keys boto3 falls back to IAM roles
        if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            self.s3_client = boto3.client(
                's3',
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=settings.AWS_REGION
            )
        else:
            self.s3_client = boto3.client('s3', region_name=settings.AWS_REGION)

    def save_file(self, content: bytes, filename: str) -> str:
        s3_key = f"reports/{uuid.uuid4()}_{filename}"

        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=s3_key,
                Body=content,
                ContentType=get_content_type(filename),
                ServerSideEncryption='AES256'
            )
            return f"s3://{self.bucket_name}/{s3_key}"

        except ClientError as e:
            logger.error(f"Error uploading to S3: {e}")
            raise StorageError(f"Failed to upload file to S3: {e}")

    def download_file(self, file_path: str) -> BytesIO:
        s3_key = self._parse_s3_uri(file_path)

        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=s3_key)
            return BytesIO(response['Body'].read())

        except ClientError as e:
            logger.error(f"Error downloading from S3: {e}")
            raise StorageError(f"Failed to download file from S3: {e}")

    def delete_file(self, file_path: str) -> bool:
        s3_key = self._parse_s3_uri(file_path)

        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=s3_key)
            return True
        except ClientError as e:
            logger.error(f"Error deleting from S3: {e}")
            return False

    def file_exists(self, file_path: str) -> bool:
        s3_key = self._parse_s3_uri(file_path)

        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=s3_key)
            return True
        except ClientError:
            return False

    def _parse_s3_uri(self, s3_uri: str) -> str:
        """Extract the object key from s3://bucket/key or a bare key"""
        if s3_uri.startswith("s3://"):
            parts = s3_uri.replace("s3://", "").split("/", 1)
            if len(parts) == 2:
                return parts[1]
            raise ValueError(f"Invalid S3 URI format: {s3_uri}")
        return s3_uri


def get_storage() -> StorageBackend:
    """Get storage backend based on USE_S3 setting"""
    if settings.USE_S3:
        if not settings.S3_BUCKET_NAME:
            raise ValueError("S3_BUCKET_NAME must be set when USE_S3=True")
        return S3Storage()
    return LocalStorage(settings.REPORTS_DIR)


# Singleton instance
storage = get_storage()
