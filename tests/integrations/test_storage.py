"""Tests for storage integration module.

Tests cover:
- Filesystem detection for local paths and URLs
- Path building for local and cloud storage
- Logo key generation and public URLs
- Writing logos to local storage
"""

import os
import tempfile
import uuid

import pytest

from src.integrations.storage import (
    LogoStorage,
    build_full_path,
    generate_logo_key,
    get_filesystem,
    write_file,
)


def _has_s3fs() -> bool:
    """Check if s3fs package is available."""
    try:
        import s3fs  # noqa: F401

        return True
    except ImportError:
        return False


class TestGetFilesystem:
    """Tests for get_filesystem function."""

    def test_local_path_returns_local_filesystem(self) -> None:
        """Local path returns LocalFileSystem."""
        with tempfile.TemporaryDirectory() as tmpdir:
            fs = get_filesystem(tmpdir)
            assert "LocalFileSystem" in type(fs).__name__

    def test_file_url_returns_local_filesystem(self) -> None:
        """file:// URL returns LocalFileSystem."""
        fs = get_filesystem("file:///tmp/logos")
        assert "LocalFileSystem" in type(fs).__name__

    @pytest.mark.skipif(not _has_s3fs(), reason="s3fs not installed")
    def test_s3_url_returns_s3_filesystem(self) -> None:
        """s3:// URL returns S3FileSystem (lazy initialization)."""
        fs = get_filesystem("s3://bucket/path")
        assert "S3FileSystem" in type(fs).__name__


class TestBuildFullPath:
    """Tests for build_full_path function."""

    def test_local_base_joins_path(self) -> None:
        assert build_full_path("/srv/logos", "a.png") == os.path.join("/srv/logos", "a.png")

    def test_file_url_strips_scheme(self) -> None:
        assert build_full_path("file:///srv/logos", "a.png") == os.path.join("/srv/logos", "a.png")

    def test_s3_combines_bucket_and_prefix(self) -> None:
        assert build_full_path("s3://bucket/logos/", "/a.png") == "bucket/logos/a.png"

    def test_s3_bucket_only(self) -> None:
        assert build_full_path("s3://bucket", "a.png") == "bucket/a.png"


class TestGenerateLogoKey:
    """Tests for generate_logo_key function."""

    def test_key_is_uuid_then_filename(self) -> None:
        key = generate_logo_key("acme.png")
        prefix, _, name = key.partition("-acme.png")
        assert uuid.UUID(key[:36])
        assert key.endswith("-acme.png")
        assert prefix and not name

    def test_keys_are_unique(self) -> None:
        assert generate_logo_key("a.png") != generate_logo_key("a.png")

    def test_directory_components_are_dropped(self) -> None:
        assert generate_logo_key("../../etc/passwd").endswith("-passwd")
        assert generate_logo_key("C:\\Users\\me\\logo.jpg").endswith("-logo.jpg")


class TestLogoStorage:
    """Tests for LogoStorage URLs and uploads."""

    def test_s3_public_url(self) -> None:
        storage = LogoStorage("s3://client-assets")
        assert storage.public_url("k-a.png") == "https://client-assets.s3.amazonaws.com/k-a.png"

    def test_s3_public_url_keeps_prefix(self) -> None:
        storage = LogoStorage("s3://client-assets/logos")
        assert (
            storage.public_url("k-a.png")
            == "https://client-assets.s3.amazonaws.com/logos/k-a.png"
        )

    def test_public_base_url_wins(self) -> None:
        storage = LogoStorage("s3://client-assets", "https://cdn.example.com/logos/")
        assert storage.public_url("k-a.png") == "https://cdn.example.com/logos/k-a.png"

    @pytest.mark.asyncio
    async def test_upload_writes_local_file(self, tmp_path) -> None:
        storage = LogoStorage(str(tmp_path / "logos"))

        url = await storage.upload("k-acme.png", b"logo-bytes")

        written = tmp_path / "logos" / "k-acme.png"
        assert written.read_bytes() == b"logo-bytes"
        assert url == f"file://{written}"

    @pytest.mark.asyncio
    async def test_write_file_creates_directories(self, tmp_path) -> None:
        full_path = await write_file(str(tmp_path / "nested" / "dir"), "x.bin", b"1")

        assert os.path.exists(full_path)
