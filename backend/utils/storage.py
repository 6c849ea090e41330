# backend/utils/storage.py
import logging
from pathlib import Path
from typing import List, Optional
from urllib.parse import quote

from config import settings
from utils.errors import StorageFailure, NotFound

logger = logging.getLogger(__name__)

# Blob containers used by the application
PRODUCT_IMAGES = "productimages"
CUSTOMER_IMAGES = "customerimages"
ORDER_FILES = "orderfiles"

# File shares (share, directory)
CUSTOMER_FILES_SHARE = "customerfiles"
CUSTOMER_LOGS_SHARE = "customerlogs"


def _safe_name(name: str) -> str:
    # Every name maps to exactly one file inside its container/directory
    cleaned = name.replace("/", "_").replace("\\", "_")
    if cleaned in ("", ".", "..") or "\x00" in cleaned:
        logger.error(f"Invalid storage name: {name!r}")
        raise StorageFailure(f"Invalid storage name: {name!r}")
    return cleaned


class BlobContainer:
    """Blob container kept as a directory under BLOB_STORAGE_ROOT.

    The web app serves BLOB_STORAGE_ROOT under /blobs, so a blob's URL is
    BLOB_PUBLIC_URL/<container>/<blob name>.
    """

    def __init__(self, name: str, root: Optional[str] = None):
        self.name = _safe_name(name)
        self.path = Path(root or settings.BLOB_STORAGE_ROOT) / self.name

    def create_if_not_exists(self) -> None:
        self.path.mkdir(parents=True, exist_ok=True)

    def url_for(self, blob_name: str) -> str:
        base = settings.BLOB_PUBLIC_URL.rstrip("/")
        return f"{base}/{self.name}/{quote(_safe_name(blob_name))}"

    def upload(self, blob_name: str, data: bytes) -> str:
        """Write (or overwrite) a blob and return its URL."""
        target = self.path / _safe_name(blob_name)
        try:
            self.create_if_not_exists()
            target.write_bytes(data)
        except OSError as e:
            logger.error(f"Error uploading blob {self.name}/{blob_name}: {e}")
            raise StorageFailure(f"Could not upload blob {blob_name}") from e
        return self.url_for(blob_name)

    def download(self, blob_name: str) -> bytes:
        target = self.path / _safe_name(blob_name)
        if not target.is_file():
            raise NotFound(f"Blob {self.name}/{blob_name} not found")
        try:
            return target.read_bytes()
        except OSError as e:
            logger.error(f"Error downloading blob {self.name}/{blob_name}: {e}")
            raise StorageFailure(f"Could not download blob {blob_name}") from e

    def list_blobs(self, prefix: str = "") -> List[str]:
        if not self.path.is_dir():
            return []
        return sorted(p.name for p in self.path.iterdir() if p.is_file() and p.name.startswith(prefix))


class ShareDirectory:
    """A directory of text files inside a file share (FILE_SHARE_ROOT/<share>/<directory>)."""

    def __init__(self, share: str, directory: str, root: Optional[str] = None):
        self.share = _safe_name(share)
        self.directory = _safe_name(directory)
        self.path = Path(root or settings.FILE_SHARE_ROOT) / self.share / self.directory

    def create_if_not_exists(self) -> None:
        try:
            self.path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Error creating directory {self.share}/{self.directory}: {e}")
            raise StorageFailure(f"Could not create directory {self.directory}") from e

    def exists(self, file_name: str) -> bool:
        return (self.path / _safe_name(file_name)).is_file()

    def read_text(self, file_name: str) -> str:
        target = self.path / _safe_name(file_name)
        if not target.is_file():
            raise NotFound(f"File {self.share}/{self.directory}/{file_name} not found")
        try:
            return target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading file {self.share}/{self.directory}/{file_name}: {e}")
            raise StorageFailure(f"Could not read file {file_name}") from e

    def write_text(self, file_name: str, content: str) -> None:
        # Replaces the whole file, like create + upload range
        target = self.path / _safe_name(file_name)
        try:
            self.path.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.error(f"Error writing file {self.share}/{self.directory}/{file_name}: {e}")
            raise StorageFailure(f"Could not write file {file_name}") from e
