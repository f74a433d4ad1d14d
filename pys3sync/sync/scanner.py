"""Directory and bucket scanning utilities for sync operations."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..api import S3Client
from ..exceptions import S3SyncIOError, S3SyncStoreError
from ..utils import KEY_SEPARATOR, calculate_file_md5

logger = logging.getLogger(__name__)


@dataclass
class LocalFile:
    """Represents a local file with its content fingerprint."""

    path: Path
    """Absolute path to the file"""

    relative_path: str
    """Relative path (using forward slashes for cross-platform compatibility)"""

    fingerprint: str
    """Lowercase hex MD5 digest of the file content"""

    size: int = 0
    """File size in bytes"""

    @classmethod
    def from_path(cls, file_path: Path, base_path: Path) -> "LocalFile":
        """Create LocalFile from a path, hashing its content.

        Args:
            file_path: Absolute path to the file
            base_path: Base path for calculating relative paths

        Returns:
            LocalFile instance

        Raises:
            S3SyncIOError: If the file cannot be read
        """
        # Use as_posix() to ensure forward slashes on all platforms
        relative_path = file_path.relative_to(base_path).as_posix()
        try:
            size = file_path.stat().st_size
            fingerprint = calculate_file_md5(file_path)
        except OSError as e:
            raise S3SyncIOError(
                f"Cannot read file {file_path}: {e}", path=str(file_path)
            ) from e

        return cls(
            path=file_path,
            relative_path=relative_path,
            fingerprint=fingerprint,
            size=size,
        )


@dataclass
class RemoteFile:
    """Represents an object in the bucket under the sync prefix."""

    key: str
    """Full object key"""

    relative_path: str
    """Key with the sync prefix removed"""

    etag: str
    """Entity tag exactly as reported by the store"""

    size: int = 0
    """Object size in bytes"""

    @property
    def fingerprint(self) -> str:
        """Store-reported fingerprint (the verbatim ETag)."""
        return self.etag


def relative_key(key: str, prefix: str) -> str:
    """Strip the sync prefix and a single leading separator from a key.

    Examples:
        >>> relative_key("reports/2024/a.csv", "reports/2024/")
        'a.csv'
        >>> relative_key("reports/2024/a.csv", "reports/2024")
        'a.csv'
        >>> relative_key("other/a.csv", "reports/")
        'other/a.csv'
    """
    if prefix and key.startswith(prefix):
        key = key[len(prefix) :]
    if key.startswith(KEY_SEPARATOR):
        key = key[len(KEY_SEPARATOR) :]
    return key


class DirectoryScanner:
    """Builds fingerprinted file maps for a local directory and a bucket prefix.

    Both scans run to completion before returning; any failure aborts the
    scan and no partial map is returned.

    Examples:
        >>> scanner = DirectoryScanner()
        >>> local = scanner.scan_local(Path("/srv/site"))
        >>> remote = scanner.scan_remote(client, "my-bucket", "site/")
    """

    def scan_local(self, directory: Union[str, Path]) -> dict[str, LocalFile]:
        """Scan a local directory tree.

        Directories are walked with an explicit stack of pending
        directories, so tree depth is not limited by the call stack.
        Directories themselves are not recorded. Entries that are neither
        regular files nor directories (sockets, FIFOs, dangling links) are
        skipped. Symlinked directories are followed unless they lead back
        to one of their own ancestors.

        Args:
            directory: Root directory to scan

        Returns:
            Dictionary mapping relative path to LocalFile

        Raises:
            S3SyncIOError: If a directory cannot be listed or a file cannot
                be read
        """
        base_path = Path(directory)
        files: dict[str, LocalFile] = {}
        # Each entry carries the resolved paths of its ancestors
        pending: list[tuple[Path, frozenset[Path]]] = [(base_path, frozenset())]

        while pending:
            current, ancestors = pending.pop()

            try:
                resolved = current.resolve()
                # A directory resolving to one of its ancestors is a loop
                if resolved in ancestors:
                    logger.debug("Skipping directory loop: %s", current)
                    continue
                ancestors = ancestors | {resolved}
                items = list(current.iterdir())
            except OSError as e:
                raise S3SyncIOError(
                    f"Cannot list directory {current}: {e}", path=str(current)
                ) from e

            for item in items:
                try:
                    is_dir = item.is_dir()
                    is_file = not is_dir and item.is_file()
                except OSError as e:
                    raise S3SyncIOError(
                        f"Cannot stat {item}: {e}", path=str(item)
                    ) from e

                if is_dir:
                    pending.append((item, ancestors))
                elif is_file:
                    local_file = LocalFile.from_path(item, base_path)
                    files[local_file.relative_path] = local_file
                else:
                    logger.debug("Skipping non-regular file: %s", item)

        logger.debug("Local scan of %s found %d file(s)", base_path, len(files))
        return files

    def scan_remote(
        self, client: S3Client, bucket: str, prefix: str
    ) -> dict[str, RemoteFile]:
        """Scan all objects under a prefix, following continuation tokens.

        Entries missing a key, ETag or size are skipped.

        Args:
            client: Store client
            bucket: Bucket name
            prefix: Key prefix of the sync target

        Returns:
            Dictionary mapping relative path to RemoteFile

        Raises:
            S3SyncStoreError: If any listing request fails
        """
        files: dict[str, RemoteFile] = {}
        continuation_token: Optional[str] = None
        pages = 0

        while True:
            page = client.list_objects(
                bucket, prefix, continuation_token=continuation_token
            )
            pages += 1

            for entry in page.entries:
                if not entry.is_complete:
                    logger.debug("Skipping incomplete listing entry: %s", entry)
                    continue
                rel_path = relative_key(entry.key, prefix)
                files[rel_path] = RemoteFile(
                    key=entry.key,
                    relative_path=rel_path,
                    etag=entry.etag,
                    size=entry.size or 0,
                )

            if not page.has_more:
                break
            if not page.next_continuation_token:
                raise S3SyncStoreError(
                    "Listing is truncated but no continuation token was returned",
                    operation="list",
                    key=prefix,
                )
            continuation_token = page.next_continuation_token

        logger.debug(
            "Remote scan of %s/%s found %d object(s) in %d page(s)",
            bucket,
            prefix,
            len(files),
            pages,
        )
        return files
