"""PyRelease - keep GitHub release assets in sync with local build output."""

from .api import ReleaseClient
from .exceptions import (
    AssetReadError,
    MandatoryAssetNotFoundError,
    PyReleaseError,
    ReleaseAPIError,
    ReleaseAuthenticationError,
    ReleaseConfigError,
    ReleaseInvalidResponseError,
    ReleaseNetworkError,
    ReleaseNotFoundError,
    ReleasePermissionError,
    ReleaseRateLimitError,
    RemoteOperationError,
)
from .models import Release, ReleaseAsset
from .sync import AssetDescriptor, AssetSyncEngine, SyncReport

__all__ = [
    "ReleaseClient",
    "Release",
    "ReleaseAsset",
    "AssetDescriptor",
    "AssetSyncEngine",
    "SyncReport",
    "PyReleaseError",
    "ReleaseConfigError",
    "MandatoryAssetNotFoundError",
    "AssetReadError",
    "RemoteOperationError",
    "ReleaseAPIError",
    "ReleaseAuthenticationError",
    "ReleaseInvalidResponseError",
    "ReleaseNetworkError",
    "ReleaseNotFoundError",
    "ReleasePermissionError",
    "ReleaseRateLimitError",
]
