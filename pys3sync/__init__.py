"""pys3sync - push a local directory to an S3 bucket prefix."""

from .api import S3Client
from .config import S3Config, load_config
from .exceptions import (
    S3SyncAuthenticationError,
    S3SyncConfigError,
    S3SyncError,
    S3SyncIOError,
    S3SyncNetworkError,
    S3SyncNotFoundError,
    S3SyncPermissionError,
    S3SyncStoreError,
)
from .utils import calculate_file_md5, detect_content_type

__all__ = [
    "S3Client",
    "S3Config",
    "load_config",
    "S3SyncError",
    "S3SyncAuthenticationError",
    "S3SyncConfigError",
    "S3SyncIOError",
    "S3SyncNetworkError",
    "S3SyncNotFoundError",
    "S3SyncPermissionError",
    "S3SyncStoreError",
    "calculate_file_md5",
    "detect_content_type",
]
