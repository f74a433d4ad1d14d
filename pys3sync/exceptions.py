"""Exceptions raised by pys3sync."""

from typing import Optional


class S3SyncError(Exception):
    """Base exception for all pys3sync errors."""


class S3SyncConfigError(S3SyncError):
    """Required configuration (bucket, location, local directory) is missing
    or malformed."""


class S3SyncIOError(S3SyncError):
    """A local directory could not be listed or a local file could not be read."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class S3SyncStoreError(S3SyncError):
    """A list, put or delete request against the object store failed."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        key: Optional[str] = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.key = key


class S3SyncAuthenticationError(S3SyncStoreError):
    """Credentials are missing, invalid or expired."""


class S3SyncPermissionError(S3SyncStoreError):
    """Credentials are valid but access to the resource was denied."""


class S3SyncNotFoundError(S3SyncStoreError):
    """Bucket or object not found."""


class S3SyncNetworkError(S3SyncStoreError):
    """The store endpoint could not be reached."""
