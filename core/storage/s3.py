"""S3 resume storage using aioboto3."""

import logging
from typing import Optional

import aioboto3

logger = logging.getLogger(__name__)


class S3Storage:
    """S3 storage handler for async operations."""

    def __init__(
        self,
        bucket_name: str,
        region: str = "us-east-1",
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
    ):
        """
        Initialize S3 storage.

        Args:
            bucket_name: S3 bucket name
            region: AWS region of the bucket
            access_key_id: Explicit credentials, falls back to the default chain
            secret_access_key: Explicit credentials, falls back to the default chain
        """
        if not bucket_name:
            raise ValueError("S3 bucket name not provided (AWS_S3_BUCKET)")

        self.bucket_name = bucket_name
        self.region = region
        self.credentials = {"region_name": region}
        if access_key_id and secret_access_key:
            self.credentials["aws_access_key_id"] = access_key_id
            self.credentials["aws_secret_access_key"] = secret_access_key

    async def upload(
        self,
        file_data: bytes,
        key: str,
        content_type: Optional[str] = None,
    ) -> str:
        """
        Upload file to S3.

        Args:
            file_data: File contents
            key: S3 object key (path)
            content_type: MIME type of the file

        Returns:
            Public URL of the object
        """
        session = aioboto3.Session(**self.credentials)
        async with session.client("s3") as client:
            upload_args = {
                "Bucket": self.bucket_name,
                "Key": key,
                "Body": file_data,
            }
            if content_type:
                upload_args["ContentType"] = content_type

            await client.put_object(**upload_args)

        logger.info(f"Uploaded file to S3: {self.bucket_name}/{key}")
        return self.get_url(key)

    async def delete(self, key: str) -> bool:
        session = aioboto3.Session(**self.credentials)
        async with session.client("s3") as client:
            await client.delete_object(Bucket=self.bucket_name, Key=key)

        logger.info(f"Deleted file from S3: {self.bucket_name}/{key}")
        return True

    def get_url(self, key: str) -> str:
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"
