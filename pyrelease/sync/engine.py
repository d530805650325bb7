"""Core sync engine reconciling local assets with a release."""

import logging
import time
import traceback
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from ..models import Release, ReleaseAsset
from .comparator import AssetAction, AssetComparator, AssetDiff
from .descriptor import AssetDescriptor, LocalAsset
from .operations import AssetOperations
from .protocols import OutputHandlerProtocol, ReleaseAssetClientProtocol
from .results import BatchResult, OperationOutcome, SyncReport, aggregate
from .scanner import AssetScanner

logger = logging.getLogger(__name__)


class AssetSyncEngine:
    """Orchestrates release asset synchronization.

    Every operation runs to completion regardless of how its siblings fare:
    a failed upload or replace is recorded in its outcome and never cancels
    or aborts the others.
    """

    def __init__(
        self,
        client: ReleaseAssetClientProtocol,
        output: OutputHandlerProtocol,
        max_workers: Optional[int] = None,
        base_path: Optional[Path] = None,
    ):
        """Initialize sync engine.

        Args:
            client: Client performing uploads and deletes
            output: Output handler for messages and groups
            max_workers: Upper bound on concurrent operations (default: one
                worker per operation)
            base_path: Directory relative asset patterns are resolved against
        """
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")

        self.client = client
        self.output = output
        self.max_workers = max_workers
        self.scanner = AssetScanner(output, base_path=base_path)
        self.comparator = AssetComparator()

    def sync_release(
        self,
        release: Release,
        descriptors: Sequence[AssetDescriptor],
        dry_run: bool = False,
    ) -> SyncReport:
        """Sync the assets of a release.

        Args:
            release: Release whose assets are reconciled
            descriptors: Declared assets
            dry_run: If True, only show what would be done

        Returns:
            SyncReport
        """
        return self.sync_assets(
            existing=release.assets,
            descriptors=descriptors,
            upload_url=release.upload_url,
            dry_run=dry_run,
        )

    def sync_assets(
        self,
        existing: Sequence[ReleaseAsset],
        descriptors: Sequence[AssetDescriptor],
        upload_url: str,
        dry_run: bool = False,
    ) -> SyncReport:
        """Bring the release's assets in line with the descriptors.

        Local files are resolved before any remote call, so a missing
        mandatory asset leaves the release untouched.

        Args:
            existing: Assets currently attached to the release
            descriptors: Declared assets
            upload_url: The release's upload URL
            dry_run: If True, only show what would be done

        Returns:
            SyncReport with the sorted successful assets

        Raises:
            MandatoryAssetNotFoundError: If a mandatory pattern matches nothing
        """
        desired = self.scanner.find_assets(descriptors)

        if not existing and not desired:
            self.output.info("No release assets to modify")
            return SyncReport(is_success=True, assets=[])

        with self.output.group("Modifying release assets"):
            diff = self.comparator.diff(existing, desired)
            self.output.info(
                f"{len(diff.to_upload)} to upload, {len(diff.to_update)} to update"
            )

            if dry_run:
                self._display_plan(diff)
                return SyncReport(is_success=True, assets=[])

            operations = AssetOperations(self.client, upload_url, self.output)
            upload_outcomes, update_outcomes = self.execute(
                operations, diff.to_upload, diff.to_update
            )

            report = aggregate(upload_outcomes, update_outcomes)
            self._log_results(
                report.uploads,
                "{success_count} uploaded, {failure_count} failed to upload",
            )
            self._log_results(
                report.updates,
                "{success_count} updated, {failure_count} failed to update",
            )

        return report

    def execute(
        self,
        operations: AssetOperations,
        to_upload: Sequence[LocalAsset],
        to_update: Sequence[tuple[ReleaseAsset, LocalAsset]],
    ) -> tuple[list[OperationOutcome], list[OperationOutcome]]:
        """Run all uploads and replacements concurrently.

        Both batches share one thread pool. Each outcome is read back from
        the future at the same index as its input, after the pool has joined
        every task.

        Args:
            operations: Operations bound to the target release
            to_upload: Assets to upload
            to_update: (existing, desired) pairs to replace

        Returns:
            Tuple of (upload outcomes, update outcomes), index-aligned with
            the inputs
        """
        total = len(to_upload) + len(to_update)
        if total == 0:
            return [], []

        workers = min(self.max_workers or total, total)
        logger.debug("Executing %d operation(s) with %d worker(s)", total, workers)
        start = time.time()

        with ThreadPoolExecutor(max_workers=workers) as executor:
            upload_futures = [
                executor.submit(self._run_upload, operations, desired)
                for desired in to_upload
            ]
            update_futures = [
                executor.submit(self._run_update, operations, existing, desired)
                for existing, desired in to_update
            ]

        logger.debug("All operations settled in %.2fs", time.time() - start)
        return (
            [future.result() for future in upload_futures],
            [future.result() for future in update_futures],
        )

    def _run_upload(
        self, operations: AssetOperations, desired: LocalAsset
    ) -> OperationOutcome:
        """Upload one asset, capturing any failure in the outcome."""
        try:
            uploaded = operations.upload_asset(desired)
        except Exception as e:
            logger.debug("Upload of %s failed: %s", desired.name, e)
            return OperationOutcome.failure(AssetAction.UPLOAD, desired, e)
        return OperationOutcome.success(AssetAction.UPLOAD, desired, uploaded)

    def _run_update(
        self,
        operations: AssetOperations,
        existing: ReleaseAsset,
        desired: LocalAsset,
    ) -> OperationOutcome:
        """Replace one asset, capturing any failure in the outcome."""
        try:
            uploaded = operations.replace_asset(existing, desired)
        except Exception as e:
            logger.debug("Replacement of %s failed: %s", desired.name, e)
            return OperationOutcome.failure(AssetAction.REPLACE, desired, e)
        return OperationOutcome.success(AssetAction.REPLACE, desired, uploaded)

    def _display_plan(self, diff: AssetDiff) -> None:
        """Show what a real run would do."""
        self.output.info("Dry run: No changes will be made")
        for desired in diff.to_upload:
            self.output.info(f"  ↑ Upload: {desired.name} ({desired.path})")
        for existing, desired in diff.to_update:
            self.output.info(
                f"  ↻ Replace: {desired.name} ({desired.path}, "
                f"existing ID {existing.id})"
            )

    def _log_results(self, result: BatchResult, template: str) -> None:
        """Log the counts of a batch and every failure reason."""
        message = template.format(
            success_count=result.success_count,
            failure_count=result.failure_count,
        )

        if result.failure_count == 0:
            self.output.info(message)
            return

        self.output.info(f"{message}:")
        for failure in result.failures:
            reason = failure.error
            if reason is None:
                continue
            details = "".join(
                traceback.format_exception(type(reason), reason, reason.__traceback__)
            ).rstrip()
            self.output.error(f'Release asset "{failure.asset.name}": {details}')
        self.output.info("")
