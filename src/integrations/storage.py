"""Storage integration using fsspec for filesystem abstraction.

Client logos are written through fsspec so the same code path serves the
local filesystem in development and S3 (via s3fs) in production.
"""

import asyncio
import os
import uuid
from urllib.parse import urlparse

import fsspec

from src.core.logging import get_logger

logger = get_logger(__name__)


def get_filesystem(url: str) -> fsspec.AbstractFileSystem:
    """Get filesystem for URL, auto-detecting protocol.

    Args:
        url: Storage URL (file://, s3://, gs://, or local path)

    Returns:
        Filesystem instance for the protocol

    Examples:
        get_filesystem("s3://bucket/path") -> S3FileSystem
        get_filesystem("/local/path") -> LocalFileSystem
        get_filesystem("file:///local/path") -> LocalFileSystem
    """
    parsed = urlparse(url)

    if not parsed.scheme or parsed.scheme == "file":
        return fsspec.filesystem("file")

    return fsspec.filesystem(parsed.scheme)


def is_local_url(url: str) -> bool:
    """Return True for plain paths and file:// URLs."""
    scheme = urlparse(url).scheme
    return not scheme or scheme == "file"


def build_full_path(url: str, path: str) -> str:
    """Build full path from base URL and relative path.

    Args:
        url: Base storage URL
        path: Relative path within storage

    Returns:
        Full path for filesystem operations
    """
    parsed = urlparse(url)

    if is_local_url(url):
        base = parsed.path if parsed.path else url
        if path:
            return os.path.join(base, path)
        return base

    # Cloud storage - combine netloc and path
    base = f"{parsed.netloc}{parsed.path}" if parsed.netloc else parsed.path
    if path:
        return f"{base.rstrip('/')}/{path.lstrip('/')}"
    return base


async def write_file(url: str, path: str, content: bytes) -> str:
    """Write file bytes to storage.

    Args:
        url: Base storage URL
        path: File path within storage
        content: File contents as bytes

    Returns:
        Full storage path written to.
    """
    fs = get_filesystem(url)
    full_path = build_full_path(url, path)
    if is_local_url(url):
        directory = os.path.dirname(full_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
    await asyncio.to_thread(_write_file_sync, fs, full_path, content)
    return full_path


def _write_file_sync(
    fs: fsspec.AbstractFileSystem, path: str, content: bytes
) -> None:
    """Write file contents synchronously."""
    with fs.open(path, "wb") as f:
        f.write(content)


def generate_logo_key(filename: str) -> str:
    """Build a collision-free object key that keeps the original filename.

    Directory components are dropped so a crafted filename cannot escape
    the logo prefix.
    """
    name = os.path.basename(filename.replace("\\", "/")).strip() or "logo"
    return f"{uuid.uuid4()}-{name}"


class LogoStorage:
    """Blob store for client logos.

    ``upload`` writes the bytes under a key and returns the URL clients
    should use to fetch the logo.
    """

    def __init__(self, base_url: str, public_base_url: str | None = None) -> None:
        self.base_url = base_url
        self.public_base_url = public_base_url

    def public_url(self, key: str) -> str:
        """Public URL for an uploaded key.

        Uses the configured public base when present, the virtual-hosted
        S3 URL for s3:// storage, and a file:// URL for local storage.
        """
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key.lstrip('/')}"

        parsed = urlparse(self.base_url)
        if parsed.scheme == "s3":
            prefix = parsed.path.strip("/")
            object_key = f"{prefix}/{key}" if prefix else key
            return f"https://{parsed.netloc}.s3.amazonaws.com/{object_key}"
        if is_local_url(self.base_url):
            return f"file://{os.path.abspath(build_full_path(self.base_url, key))}"
        return f"{self.base_url.rstrip('/')}/{key}"

    async def upload(self, key: str, content: bytes) -> str:
        """Upload logo bytes and return their public URL.

        Raises:
            Whatever the underlying filesystem raises; callers map it to an
            upload failure.
        """
        full_path = await write_file(self.base_url, key, content)
        logger.info("logo_uploaded", key=key, path=full_path, size=len(content))
        return self.public_url(key)
