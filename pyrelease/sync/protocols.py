"""Capability interfaces the sync engine depends on.

The engine never talks to GitHub or the terminal directly; it receives
objects satisfying these protocols. ``ReleaseClient`` and ``OutputFormatter``
are the production implementations, tests pass mocks.
"""

from contextlib import AbstractContextManager
from typing import Any, Protocol


class ReleaseAssetClientProtocol(Protocol):
    """Remote operations on release assets."""

    def upload_release_asset(
        self,
        upload_url: str,
        name: str,
        label: str,
        data: bytes,
        content_type: str,
    ) -> Any:
        """Upload an asset and return the API asset object."""
        ...

    def delete_release_asset(self, asset_id: int) -> Any:
        """Delete an asset by ID."""
        ...


class OutputHandlerProtocol(Protocol):
    """User-facing logging."""

    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def group(self, title: str) -> AbstractContextManager[None]: ...
