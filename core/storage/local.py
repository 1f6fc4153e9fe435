"""Local filesystem resume storage."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class LocalStorage:
    """
    Stores objects as files under ``base_path``.

    Keys are relative paths such as ``{user_id}/{millis}-{name}.pdf``; the
    public URL is ``public_base_url`` joined with the key.
    """

    def __init__(self, base_path: str = "./uploads/resumes", public_base_url: str = "/files/resumes"):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")

    def _path_for(self, key: str) -> Path:
        path = (self.base_path / key).resolve()
        if self.base_path.resolve() not in path.parents:
            raise ValueError(f"Key escapes storage root: {key}")
        return path

    async def upload(
        self,
        file_data: bytes,
        key: str,
        content_type: Optional[str] = None,
    ) -> str:
        """
        Write ``file_data`` under ``key``.

        Returns:
            Public URL of the stored object
        """
        path = self._path_for(key)
        await asyncio.to_thread(_write_bytes, path, file_data)
        logger.info(f"Saved file to {path}")
        return self.get_url(key)

    async def delete(self, key: str) -> bool:
        path = self._path_for(key)
        if not path.exists():
            return False
        await asyncio.to_thread(path.unlink)
        logger.info(f"Deleted file: {path}")
        return True

    def get_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"


def _write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
