"""Pick the resume storage back-end from settings."""

from typing import Protocol

from core.config import Settings
from core.storage.local import LocalStorage
from core.storage.s3 import S3Storage


class ResumeStore(Protocol):
    async def upload(self, file_data: bytes, key: str, content_type: str | None = None) -> str: ...

    async def delete(self, key: str) -> bool: ...


def create_resume_store(settings: Settings) -> ResumeStore:
    if settings.resume_storage_backend == "s3":
        return S3Storage(
            bucket_name=settings.aws_s3_bucket,
            region=settings.aws_region,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
        )
    return LocalStorage(
        base_path=settings.resume_storage_path,
        public_base_url=settings.resume_public_base_url,
    )
