"""Sync engine for PyRelease - reconciles local files with release assets."""

from .comparator import AssetAction, AssetComparator, AssetDiff
from .config import (
    DEFAULT_CONFIG_PATH,
    load_asset_descriptors,
    merge_asset_descriptors,
    parse_assets_input,
)
from .descriptor import AssetDescriptor, LocalAsset
from .engine import AssetSyncEngine
from .operations import AssetOperations, guess_content_type
from .protocols import OutputHandlerProtocol, ReleaseAssetClientProtocol
from .results import (
    BatchResult,
    OperationOutcome,
    SyncReport,
    aggregate,
    analyze_outcomes,
)
from .scanner import AssetScanner

__all__ = [
    "AssetSyncEngine",
    "AssetDescriptor",
    "LocalAsset",
    "AssetScanner",
    "AssetComparator",
    "AssetDiff",
    "AssetAction",
    "AssetOperations",
    "guess_content_type",
    "OperationOutcome",
    "BatchResult",
    "SyncReport",
    "aggregate",
    "analyze_outcomes",
    "OutputHandlerProtocol",
    "ReleaseAssetClientProtocol",
    "DEFAULT_CONFIG_PATH",
    "load_asset_descriptors",
    "merge_asset_descriptors",
    "parse_assets_input",
]
