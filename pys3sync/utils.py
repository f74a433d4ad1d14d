"""Utility functions for pys3sync."""

import hashlib
import mimetypes
from pathlib import Path
from typing import Union

# =============================================================================
# Constants
# =============================================================================

# Content type used when the file extension is unknown
DEFAULT_CONTENT_TYPE: str = "binary/octet-stream"

# Separator used in relative paths and object keys
KEY_SEPARATOR: str = "/"


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"


# =============================================================================
# Hash calculation utilities
# =============================================================================


def calculate_file_md5(file_path: Union[str, Path]) -> str:
    """Calculate the MD5 digest of a file's content.

    The whole file is read into memory. For objects uploaded in a single
    request, S3 reports the same digest as the object's ETag.

    Args:
        file_path: Path to the file

    Returns:
        Lowercase hexadecimal digest

    Raises:
        OSError: If the file cannot be read

    Examples:
        >>> import tempfile, os
        >>> with tempfile.NamedTemporaryFile(delete=False) as f:
        ...     _ = f.write(b"hello")
        >>> calculate_file_md5(f.name)
        '5d41402abc4b2a76b9719d911017c592'
        >>> os.unlink(f.name)
    """
    content = Path(file_path).read_bytes()
    return hashlib.md5(content).hexdigest()


# =============================================================================
# Content type utilities
# =============================================================================


def detect_content_type(file_path: Union[str, Path]) -> str:
    """Guess the content type of a file from its name.

    Args:
        file_path: File path or name

    Returns:
        MIME type string (DEFAULT_CONTENT_TYPE if the extension is unknown)

    Examples:
        >>> detect_content_type("index.html")
        'text/html'
        >>> detect_content_type("data.unknownext")
        'binary/octet-stream'
    """
    mime_type, _ = mimetypes.guess_type(str(file_path))
    return mime_type or DEFAULT_CONTENT_TYPE


# =============================================================================
# Key utilities
# =============================================================================


def normalize_prefix(prefix: str) -> str:
    """Normalize a key prefix to ``dir/sub/`` form.

    Leading separators are removed and a trailing separator is appended to
    any non-empty prefix, so keys can be built by plain concatenation.

    Examples:
        >>> normalize_prefix("reports/2024")
        'reports/2024/'
        >>> normalize_prefix("/site/")
        'site/'
        >>> normalize_prefix("")
        ''
    """
    prefix = prefix.replace("\\", KEY_SEPARATOR).lstrip(KEY_SEPARATOR)
    if prefix and not prefix.endswith(KEY_SEPARATOR):
        prefix += KEY_SEPARATOR
    return prefix
