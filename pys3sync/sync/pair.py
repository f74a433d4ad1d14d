"""Sync pair: a local directory and the bucket prefix it mirrors."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..exceptions import S3SyncConfigError
from ..utils import KEY_SEPARATOR, normalize_prefix

S3_SCHEME = "s3://"


@dataclass
class SyncPair:
    """Local directory mirrored to ``bucket/prefix``.

    Examples:
        >>> pair = SyncPair(local="./site", bucket="my-bucket", prefix="www")
        >>> pair.prefix
        'www/'
        >>> pair.full_key("index.html")
        'www/index.html'
    """

    local: Path
    """Local directory to push"""

    bucket: str
    """Target bucket"""

    prefix: str = ""
    """Key prefix; empty or ending with a separator"""

    def __post_init__(self) -> None:
        self.local = Path(self.local)
        if not self.bucket:
            raise S3SyncConfigError(
                "No bucket specified. Set AWS_BUCKET, pass --bucket, "
                "or use a 'bucket/prefix' location."
            )
        self.prefix = normalize_prefix(self.prefix or "")

    def full_key(self, relative_path: str) -> str:
        """Build the full object key for a relative path."""
        return f"{self.prefix}{relative_path}"

    @property
    def remote_display(self) -> str:
        """``s3://bucket/prefix`` form for messages."""
        return f"{S3_SCHEME}{self.bucket}/{self.prefix}"

    @classmethod
    def from_location(
        cls,
        local: Union[str, Path],
        remote: str,
        default_bucket: Optional[str] = None,
    ) -> "SyncPair":
        """Create a sync pair from a CLI remote location.

        Two conventions are accepted:

        - ``prefix`` when a bucket is configured (``default_bucket``)
        - ``bucket/prefix`` when no bucket is configured

        An ``s3://bucket/prefix`` location always names its bucket.

        Args:
            local: Local directory
            remote: Remote location string
            default_bucket: Bucket from configuration, if any

        Returns:
            SyncPair instance

        Raises:
            S3SyncConfigError: If no bucket can be determined
        """
        location = remote.strip()

        if location.startswith(S3_SCHEME):
            bucket, prefix = cls._split_bucket(location[len(S3_SCHEME) :])
        elif default_bucket:
            bucket, prefix = default_bucket, location
        else:
            bucket, prefix = cls._split_bucket(location)

        return cls(local=Path(local), bucket=bucket, prefix=prefix)

    @staticmethod
    def _split_bucket(location: str) -> tuple[str, str]:
        location = location.lstrip(KEY_SEPARATOR)
        bucket, _, prefix = location.partition(KEY_SEPARATOR)
        if not bucket:
            raise S3SyncConfigError(
                f"Invalid remote location '{location}': expected 'bucket/prefix'"
            )
        return bucket, prefix
