"""Single-asset upload and replace operations."""

import json
import logging
import mimetypes
import time

from ..exceptions import (
    AssetReadError,
    ReleaseInvalidResponseError,
    RemoteOperationError,
)
from ..models import ReleaseAsset
from .descriptor import LocalAsset
from .protocols import OutputHandlerProtocol, ReleaseAssetClientProtocol

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def guess_content_type(asset: LocalAsset) -> str:
    """Determine the MIME type of an asset from its path extension.

    Args:
        asset: Local asset

    Returns:
        MIME type string (defaults to 'application/octet-stream')
    """
    content_type, _ = mimetypes.guess_type(asset.path.name)
    return content_type or DEFAULT_CONTENT_TYPE


class AssetOperations:
    """Uploads, deletes and replaces the assets of one release."""

    def __init__(
        self,
        client: ReleaseAssetClientProtocol,
        upload_url: str,
        output: OutputHandlerProtocol,
    ):
        """Initialize asset operations.

        Args:
            client: Client performing the remote calls
            upload_url: The release's upload URL
            output: Output handler for progress messages
        """
        self.client = client
        self.upload_url = upload_url
        self.output = output

    def upload_asset(self, desired: LocalAsset) -> ReleaseAsset:
        """Upload a local asset.

        Args:
            desired: Asset to upload

        Returns:
            The created release asset

        Raises:
            AssetReadError: If the file cannot be read
            RemoteOperationError: If the upload is rejected or answered
                without an asset
        """
        start = time.time()
        content_type = guess_content_type(desired)

        try:
            data = desired.path.read_bytes()
        except OSError as e:
            raise AssetReadError(str(desired.path), str(e)) from e

        self.output.info(
            f'Uploading release asset "{desired.name}" ({content_type})'
        )

        try:
            response = self.client.upload_release_asset(
                upload_url=self.upload_url,
                name=desired.name,
                label=desired.label,
                data=data,
                content_type=content_type,
            )
        except RemoteOperationError:
            raise
        except Exception as e:
            raise RemoteOperationError(
                f'Upload of release asset "{desired.name}" failed: {e}'
            ) from e

        if not isinstance(response, dict) or "id" not in response:
            raise ReleaseInvalidResponseError(
                f'Upload of release asset "{desired.name}" returned no asset: '
                f"{response!r}"
            )

        uploaded = ReleaseAsset.from_api_response(response)
        self.output.info(
            f'Uploaded release asset "{desired.name}": '
            f"{json.dumps(uploaded.to_dict(), indent=2)}"
        )
        logger.debug(
            "Upload of %s (%d bytes) took %.2fs",
            desired.name,
            len(data),
            time.time() - start,
        )
        return uploaded

    def delete_asset(self, existing: ReleaseAsset) -> None:
        """Delete an existing release asset.

        Raises:
            RemoteOperationError: If the delete is rejected
        """
        self.output.info(
            f'Deleting existing release asset "{existing.name}" ({existing.id})'
        )

        try:
            self.client.delete_release_asset(existing.id)
        except RemoteOperationError:
            raise
        except Exception as e:
            raise RemoteOperationError(
                f'Deletion of release asset "{existing.name}" failed: {e}'
            ) from e

    def replace_asset(self, existing: ReleaseAsset, desired: LocalAsset) -> ReleaseAsset:
        """Delete the existing asset, then upload the desired one.

        If the delete fails the upload is not attempted.

        Args:
            existing: Asset currently on the release
            desired: Local asset replacing it

        Returns:
            The newly created release asset
        """
        self.delete_asset(existing)
        return self.upload_asset(desired)
