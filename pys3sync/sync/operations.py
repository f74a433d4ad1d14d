"""Store operations used when executing the sync queue."""

from pathlib import Path
from typing import Any

from ..api import S3Client
from ..exceptions import S3SyncIOError


class SyncOperations:
    """Put/delete primitives with a common interface for the engine."""

    def __init__(self, client: S3Client):
        """Initialize sync operations.

        Args:
            client: Store client
        """
        self.client = client

    def upload_file(
        self,
        local_path: Path,
        bucket: str,
        key: str,
        content_type: str,
    ) -> Any:
        """Stream a local file to the bucket.

        Args:
            local_path: Absolute path of the file to upload
            bucket: Bucket name
            key: Full object key
            content_type: Content-Type stored with the object

        Returns:
            Put response from the store

        Raises:
            S3SyncIOError: If the local file cannot be opened
            S3SyncStoreError: If the upload fails
        """
        try:
            handle = open(local_path, "rb")
        except OSError as e:
            raise S3SyncIOError(
                f"Cannot open {local_path} for upload: {e}", path=str(local_path)
            ) from e

        with handle:
            return self.client.put_object(
                bucket=bucket, key=key, body=handle, content_type=content_type
            )

    def delete_remote(self, bucket: str, key: str) -> Any:
        """Delete an object from the bucket.

        Args:
            bucket: Bucket name
            key: Full object key

        Returns:
            Delete response from the store

        Raises:
            S3SyncStoreError: If the delete fails
        """
        return self.client.delete_object(bucket=bucket, key=key)
