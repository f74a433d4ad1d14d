"""Core sync engine for executing sync operations."""

import logging
import time
from typing import Callable, Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from ..api import S3Client
from ..exceptions import S3SyncConfigError
from ..output import OutputFormatter
from ..utils import detect_content_type
from .comparator import FileComparator, SyncAction, SyncOperation, summarize
from .operations import SyncOperations
from .pair import SyncPair
from .scanner import DirectoryScanner, LocalFile, RemoteFile
from .state import SyncPhase, SyncRun

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, SyncOperation], None]
"""Called before each operation with (index, total, operation); index is 1-based"""


class SyncEngine:
    """Core sync engine that pushes a local directory to a bucket prefix."""

    def __init__(
        self,
        client: S3Client,
        output: Optional[OutputFormatter] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """Initialize sync engine.

        Args:
            client: Store client
            output: Output formatter for displaying progress/status
            progress_callback: Optional per-operation progress hook; defaults
                to printing through ``output``
        """
        self.client = client
        self.output = output or OutputFormatter()
        self.operations = SyncOperations(client)
        self.scanner = DirectoryScanner()
        self.progress_callback = progress_callback
        self.run: Optional[SyncRun] = None

    def sync_pair(self, pair: SyncPair, dry_run: bool = False) -> dict:
        """Sync a single sync pair.

        Scans both sides, diffs them and executes the resulting queue.
        The first error fails the run and is re-raised; operations already
        applied stay applied.

        Args:
            pair: Sync pair to synchronize
            dry_run: If True, only show what would be done

        Returns:
            Dictionary with sync statistics

        Raises:
            S3SyncConfigError: If the local directory is missing
            S3SyncIOError: If the local scan or a file read fails
            S3SyncStoreError: If a listing, upload or delete fails

        Examples:
            >>> engine = SyncEngine(client)
            >>> pair = SyncPair(Path("/local"), "my-bucket", "backup")
            >>> stats = engine.sync_pair(pair, dry_run=True)
            >>> print(f"Would upload {stats['uploads']} files")
        """
        run = SyncRun()
        self.run = run

        try:
            self._validate_local(pair)

            self.output.info(f"Pushing {pair.local} -> {pair.remote_display}")
            if dry_run:
                self.output.info("Dry run: No changes will be made")
            self.output.print("")

            local_files, remote_files = self._scan(pair, run)

            run.advance(SyncPhase.DIFFING)
            operations = FileComparator().compare_files(local_files, remote_files)
            stats = self._build_stats(local_files, remote_files, operations)
            self._display_sync_plan(stats, operations)

            run.advance(SyncPhase.EXECUTING)
            if not dry_run:
                self.execute_operations(operations, pair)

            run.advance(SyncPhase.DONE)
        except BaseException as e:
            run.fail(e)
            raise

        self._display_summary(stats, dry_run)
        return stats

    def _validate_local(self, pair: SyncPair) -> None:
        if not pair.local.exists():
            raise S3SyncConfigError(f"Local directory does not exist: {pair.local}")
        if not pair.local.is_dir():
            raise S3SyncConfigError(f"Local path is not a directory: {pair.local}")

    def _scan(
        self, pair: SyncPair, run: SyncRun
    ) -> tuple[dict[str, LocalFile], dict[str, RemoteFile]]:
        """Scan the local directory, then the remote prefix.

        Returns:
            Tuple of (local file map, remote file map)
        """
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.output.console,
            transient=True,
            disable=self.output.silent,
        ) as progress:
            run.advance(SyncPhase.ENUMERATING_LOCAL)
            scan_start = time.time()
            task = progress.add_task("Scanning local directory...", total=None)
            local_files = self.scanner.scan_local(pair.local)
            progress.update(
                task, description=f"Found {len(local_files)} local file(s)"
            )
            logger.debug(
                f"Local scan took {time.time() - scan_start:.2f}s "
                f"for {len(local_files)} files"
            )

            run.advance(SyncPhase.ENUMERATING_REMOTE)
            scan_start = time.time()
            task = progress.add_task("Scanning remote prefix...", total=None)
            remote_files = self.scanner.scan_remote(
                self.client, pair.bucket, pair.prefix
            )
            progress.update(
                task, description=f"Found {len(remote_files)} remote file(s)"
            )
            logger.debug(
                f"Remote scan took {time.time() - scan_start:.2f}s "
                f"for {len(remote_files)} objects"
            )

        self.output.info(f"Found {len(local_files)} local file(s)")
        self.output.info(f"Found {len(remote_files)} remote file(s)")
        return local_files, remote_files

    def execute_operations(
        self, operations: tuple[SyncOperation, ...], pair: SyncPair
    ) -> None:
        """Execute the operation queue one operation at a time, in order.

        There is no retry and no rollback: the first failure propagates
        and the remaining operations are not attempted.

        Args:
            operations: Operation queue from the comparator
            pair: Sync pair the queue was built for
        """
        total = len(operations)
        for index, operation in enumerate(operations, start=1):
            self._report_progress(index, total, operation)
            action_start = time.time()

            if operation.action == SyncAction.UPLOAD:
                relative_path = operation.local_path or operation.remote_key
                local_path = pair.local / relative_path
                key = pair.full_key(operation.remote_key)
                content_type = detect_content_type(relative_path)
                logger.debug(f"Uploading {local_path} to {key} as {content_type}")
                self.operations.upload_file(
                    local_path=local_path,
                    bucket=pair.bucket,
                    key=key,
                    content_type=content_type,
                )
            elif operation.action == SyncAction.DELETE:
                key = pair.full_key(operation.remote_key)
                logger.debug(f"Deleting {key}")
                self.operations.delete_remote(bucket=pair.bucket, key=key)

            logger.debug(
                f"{operation.describe()} took {time.time() - action_start:.2f}s"
            )

    def _report_progress(
        self, index: int, total: int, operation: SyncOperation
    ) -> None:
        if self.progress_callback is not None:
            self.progress_callback(index, total, operation)
            return
        logger.info(
            "Executing operation %d/%d: %s", index, total, operation.describe()
        )
        if operation.action == SyncAction.UPLOAD:
            self.output.info(f"[{index}/{total}] ↑ {operation.local_path}")
        else:
            self.output.info(f"[{index}/{total}] ✗ {operation.remote_key}")

    def _build_stats(
        self,
        local_files: dict[str, LocalFile],
        remote_files: dict[str, RemoteFile],
        operations: tuple[SyncOperation, ...],
    ) -> dict:
        """Build the statistics dictionary for a run.

        Returns:
            Dictionary with file counts, operation counts and the total
            size of the files to upload
        """
        counts = summarize(operations)
        upload_bytes = sum(
            local_files[op.local_path].size
            for op in operations
            if op.action == SyncAction.UPLOAD and op.local_path in local_files
        )
        return {
            "local_files": len(local_files),
            "remote_files": len(remote_files),
            "uploads": counts["uploads"],
            "deletes": counts["deletes"],
            "unchanged": len(local_files) - counts["uploads"],
            "upload_bytes": upload_bytes,
        }

    def _display_sync_plan(
        self, stats: dict, operations: tuple[SyncOperation, ...]
    ) -> None:
        """Display sync plan to user.

        Args:
            stats: Statistics dictionary
            operations: Operation queue
        """
        if self.output.silent:
            return

        self.output.info("Sync plan:")
        if stats["uploads"] > 0:
            upload_size = self.output.format_size(stats["upload_bytes"])
            self.output.info(
                f"  ↑ Upload: {stats['uploads']} file(s) ({upload_size})"
            )
        if stats["deletes"] > 0:
            self.output.info(f"  ✗ Delete remote: {stats['deletes']} file(s)")
        if stats["unchanged"] > 0:
            self.output.info(f"  = Unchanged: {stats['unchanged']} file(s)")

        for operation in operations:
            logger.debug(f"Planned: {operation.describe()} ({operation.reason})")

        self.output.print("")

    def _display_summary(self, stats: dict, dry_run: bool) -> None:
        """Display sync summary.

        Args:
            stats: Statistics dictionary
            dry_run: Whether this was a dry run
        """
        self.output.print("")
        if dry_run:
            self.output.success("Dry run complete!")
        else:
            self.output.success("Push complete!")

        total_actions = stats["uploads"] + stats["deletes"]
        if total_actions > 0:
            verb = "Planned" if dry_run else "Total"
            self.output.info(f"{verb} actions: {total_actions}")
            if stats["uploads"] > 0:
                self.output.info(f"  Uploaded: {stats['uploads']}")
            if stats["deletes"] > 0:
                self.output.info(f"  Deleted remotely: {stats['deletes']}")
        else:
            self.output.info("No changes needed - everything is in sync!")
