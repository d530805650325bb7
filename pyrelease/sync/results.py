"""Outcomes of asset operations and their aggregation."""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

from ..models import ReleaseAsset
from .comparator import AssetAction
from .descriptor import LocalAsset


@dataclass
class OperationOutcome:
    """Result of a single upload or replace operation."""

    action: AssetAction
    """Operation that was attempted"""

    asset: LocalAsset
    """Desired asset the operation was for"""

    result: Optional[ReleaseAsset] = None
    """Resulting release asset on success"""

    error: Optional[BaseException] = None
    """Failure reason on failure"""

    @property
    def is_success(self) -> bool:
        return self.error is None

    @classmethod
    def success(
        cls, action: AssetAction, asset: LocalAsset, result: ReleaseAsset
    ) -> "OperationOutcome":
        return cls(action=action, asset=asset, result=result)

    @classmethod
    def failure(
        cls, action: AssetAction, asset: LocalAsset, error: BaseException
    ) -> "OperationOutcome":
        return cls(action=action, asset=asset, error=error)


@dataclass
class BatchResult:
    """Summary of one batch (uploads or updates) of outcomes."""

    is_success: bool = True
    success_count: int = 0
    failure_count: int = 0
    assets: list[ReleaseAsset] = field(default_factory=list)
    failures: list[OperationOutcome] = field(default_factory=list)

    @property
    def failure_reasons(self) -> list[BaseException]:
        return [f.error for f in self.failures if f.error is not None]


@dataclass
class SyncReport:
    """Final result of an asset synchronization.

    Unpacks as ``(is_success, assets)``.
    """

    is_success: bool
    """True only if every operation succeeded"""

    assets: list[ReleaseAsset]
    """Successfully uploaded or replaced assets, sorted by name"""

    uploads: BatchResult = field(default_factory=BatchResult)
    updates: BatchResult = field(default_factory=BatchResult)

    def __iter__(self) -> Iterator[Any]:
        yield self.is_success
        yield self.assets

    @property
    def failures(self) -> list[OperationOutcome]:
        return self.uploads.failures + self.updates.failures

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON output."""
        return {
            "isSuccess": self.is_success,
            "assets": [asset.to_dict() for asset in self.assets],
            "failures": [
                {
                    "name": failure.asset.name,
                    "path": str(failure.asset.path),
                    "action": failure.action.value,
                    "error": str(failure.error),
                }
                for failure in self.failures
            ],
        }


def asset_sort_key(asset: ReleaseAsset) -> tuple[str, str]:
    """Case-insensitive sort key for release assets.

    Names equal apart from case order lowercase first, like ICU's default
    collation.
    """
    return (asset.name.casefold(), asset.name.swapcase())


def analyze_outcomes(outcomes: Iterable[OperationOutcome]) -> BatchResult:
    """Summarize a batch of outcomes.

    Args:
        outcomes: Outcomes in operation order

    Returns:
        BatchResult with counts, successful assets and failures
    """
    result = BatchResult()

    for outcome in outcomes:
        if outcome.is_success and outcome.result is not None:
            result.success_count += 1
            result.assets.append(outcome.result)
        else:
            result.is_success = False
            result.failure_count += 1
            result.failures.append(outcome)

    return result


def aggregate(
    upload_outcomes: Sequence[OperationOutcome],
    update_outcomes: Sequence[OperationOutcome],
) -> SyncReport:
    """Merge both batches into a sorted report.

    Args:
        upload_outcomes: Outcomes of the upload batch
        update_outcomes: Outcomes of the replace batch

    Returns:
        SyncReport whose assets are sorted by name, independent of the order
        in which operations completed
    """
    uploads = analyze_outcomes(upload_outcomes)
    updates = analyze_outcomes(update_outcomes)

    assets = sorted(uploads.assets + updates.assets, key=asset_sort_key)

    return SyncReport(
        is_success=uploads.is_success and updates.is_success,
        assets=assets,
        uploads=uploads,
        updates=updates,
    )
