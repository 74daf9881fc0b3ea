"""Integrations module for external services and storage.

Provides logo storage on top of the fsspec filesystem abstraction.
"""

from src.integrations.storage import (
    LogoStorage,
    build_full_path,
    generate_logo_key,
    get_filesystem,
    write_file,
)

__all__ = [
    "LogoStorage",
    "build_full_path",
    "generate_logo_key",
    "get_filesystem",
    "write_file",
]
