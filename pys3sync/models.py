"""Data models for object store API responses."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ObjectEntry:
    """A single object from a bucket listing.

    Every field is optional because the listing response does not
    guarantee them; callers decide what to do with incomplete entries.
    """

    key: Optional[str] = None
    etag: Optional[str] = None
    size: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        """True when key, ETag and size are all present."""
        return self.key is not None and self.etag is not None and self.size is not None

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "ObjectEntry":
        """Create an ObjectEntry from one ``Contents`` item."""
        return cls(
            key=data.get("Key"),
            etag=data.get("ETag"),
            size=data.get("Size"),
        )


@dataclass
class ListObjectsResult:
    """One page of a ``ListObjectsV2`` response."""

    entries: list[ObjectEntry] = field(default_factory=list)
    is_truncated: bool = False
    next_continuation_token: Optional[str] = None

    @property
    def has_more(self) -> bool:
        """True when another page can be requested."""
        return self.is_truncated

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "ListObjectsResult":
        """Create a ListObjectsResult from a raw boto3 response."""
        contents = data.get("Contents") or []
        return cls(
            entries=[ObjectEntry.from_api_response(item) for item in contents],
            is_truncated=bool(data.get("IsTruncated", False)),
            next_continuation_token=data.get("NextContinuationToken"),
        )
