"""Sync engine for pys3sync - push a local directory to a bucket prefix."""

from .comparator import (
    FileComparator,
    SyncAction,
    SyncOperation,
    fingerprints_match,
    normalize_etag,
)
from .engine import SyncEngine
from .operations import SyncOperations
from .pair import SyncPair
from .scanner import DirectoryScanner, LocalFile, RemoteFile
from .state import SyncPhase, SyncRun

__all__ = [
    "SyncEngine",
    "SyncPair",
    "SyncOperations",
    "DirectoryScanner",
    "FileComparator",
    "SyncAction",
    "SyncOperation",
    "LocalFile",
    "RemoteFile",
    "SyncPhase",
    "SyncRun",
    "fingerprints_match",
    "normalize_etag",
]
