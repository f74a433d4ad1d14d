"""File comparison logic for sync operations."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol


class Fingerprinted(Protocol):
    """Anything carrying a content fingerprint (LocalFile, RemoteFile)."""

    @property
    def fingerprint(self) -> str: ...


class SyncAction(str, Enum):
    """Actions that can be taken during sync."""

    UPLOAD = "upload"
    """Upload local file to remote"""

    DELETE = "delete"
    """Delete remote file"""


@dataclass(frozen=True)
class SyncOperation:
    """A single queued change against the bucket.

    Equality and hashing ignore ``reason``, so queues can be compared as
    sets of operations.
    """

    action: SyncAction
    """Action to take"""

    remote_key: str
    """Key relative to the sync prefix"""

    local_path: Optional[str] = None
    """Path relative to the local root (uploads only)"""

    reason: str = field(default="", compare=False)
    """Human-readable reason for this operation"""

    @classmethod
    def upload(cls, path: str, reason: str = "New local file") -> "SyncOperation":
        """Create an upload of ``path`` to the key of the same name."""
        return cls(
            action=SyncAction.UPLOAD, remote_key=path, local_path=path, reason=reason
        )

    @classmethod
    def delete(cls, key: str, reason: str = "File deleted locally") -> "SyncOperation":
        """Create a delete of ``key``."""
        return cls(action=SyncAction.DELETE, remote_key=key, reason=reason)

    def describe(self) -> str:
        """Short description for progress output."""
        if self.action == SyncAction.UPLOAD:
            return f"upload {self.local_path}"
        return f"delete {self.remote_key}"


def normalize_etag(etag: str) -> str:
    """Remove one pair of surrounding double quotes from an ETag.

    Examples:
        >>> normalize_etag('"5d41402abc4b2a76b9719d911017c592"')
        '5d41402abc4b2a76b9719d911017c592'
        >>> normalize_etag("5d41402abc4b2a76b9719d911017c592")
        '5d41402abc4b2a76b9719d911017c592'
    """
    if len(etag) >= 2 and etag.startswith('"') and etag.endswith('"'):
        return etag[1:-1]
    return etag


def fingerprints_match(local_fingerprint: str, remote_fingerprint: str) -> bool:
    """Check whether a local digest and a remote ETag describe the same content.

    Multipart ETags (``<digest>-<parts>``) never match a plain digest, so
    such objects are always uploaded again.
    """
    return local_fingerprint == normalize_etag(remote_fingerprint)


class FileComparator:
    """Compares local and remote file maps to build the operation queue."""

    def compare_files(
        self,
        local_files: Mapping[str, Fingerprinted],
        remote_files: Mapping[str, Fingerprinted],
    ) -> tuple[SyncOperation, ...]:
        """Compare local and remote files and determine sync operations.

        Uploads come before deletes and each group is sorted by path, but
        callers must not rely on any ordering.

        Args:
            local_files: Dictionary mapping relative_path to LocalFile
            remote_files: Dictionary mapping relative_path to RemoteFile

        Returns:
            Immutable operation queue
        """
        uploads: list[SyncOperation] = []
        deletes: list[SyncOperation] = []

        for path in sorted(local_files):
            remote_file = remote_files.get(path)
            if remote_file is None:
                uploads.append(SyncOperation.upload(path, reason="New local file"))
            elif not fingerprints_match(
                local_files[path].fingerprint, remote_file.fingerprint
            ):
                uploads.append(SyncOperation.upload(path, reason="Content changed"))

        for path in sorted(remote_files):
            if path not in local_files:
                deletes.append(SyncOperation.delete(path))

        return tuple(uploads + deletes)


def summarize(operations: tuple[SyncOperation, ...]) -> dict[str, int]:
    """Count operations per action.

    Returns:
        Dictionary with ``uploads`` and ``deletes`` counts
    """
    stats = {"uploads": 0, "deletes": 0}
    for operation in operations:
        if operation.action == SyncAction.UPLOAD:
            stats["uploads"] += 1
        elif operation.action == SyncAction.DELETE:
            stats["deletes"] += 1
    return stats
