"""Comparison of desired local assets with existing release assets."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from ..models import ReleaseAsset
from .descriptor import LocalAsset


class AssetAction(str, Enum):
    """Actions that can be taken for a desired asset."""

    UPLOAD = "upload"
    """Upload a new asset"""

    REPLACE = "replace"
    """Delete the existing asset of the same name, then upload"""


@dataclass
class AssetDiff:
    """Partition of desired assets into uploads and replacements."""

    to_upload: list[LocalAsset] = field(default_factory=list)
    """Assets with no existing counterpart"""

    to_update: list[tuple[ReleaseAsset, LocalAsset]] = field(default_factory=list)
    """(existing, desired) pairs sharing the same name"""

    @property
    def is_empty(self) -> bool:
        """Whether there is nothing to do."""
        return not self.to_upload and not self.to_update


class AssetComparator:
    """Compares desired assets with the assets already on a release."""

    def diff(
        self,
        existing: Iterable[ReleaseAsset],
        desired: Iterable[LocalAsset],
    ) -> AssetDiff:
        """Split desired assets into uploads and replacements.

        Names are matched exactly (case-sensitive). Existing assets without
        a desired counterpart are left alone and not part of the result.

        Args:
            existing: Assets currently attached to the release
            desired: Deduplicated local assets

        Returns:
            AssetDiff
        """
        existing_by_name: dict[str, ReleaseAsset] = {}
        for asset in existing:
            existing_by_name.setdefault(asset.name, asset)

        result = AssetDiff()
        for asset in desired:
            match = existing_by_name.get(asset.name)
            if match is None:
                result.to_upload.append(asset)
            else:
                result.to_update.append((match, asset))

        return result
