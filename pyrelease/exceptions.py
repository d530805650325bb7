"""Custom exceptions for PyRelease."""


class PyReleaseError(Exception):
    """Base exception for all PyRelease errors."""

    pass


class ReleaseConfigError(PyReleaseError):
    """Configuration error (missing token, repository, invalid asset config)."""

    pass


class MandatoryAssetNotFoundError(PyReleaseError):
    """A mandatory asset glob pattern did not match any file."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(
            "No release assets found for mandatory asset with path glob "
            f'pattern "{pattern}"'
        )


class AssetReadError(PyReleaseError):
    """A local asset file could not be read before upload."""

    def __init__(self, path: str, message: str = ""):
        self.path = path
        detail = f": {message}" if message else ""
        super().__init__(f"Failed to read release asset {path}{detail}")


class RemoteOperationError(PyReleaseError):
    """An upload or delete was rejected by the remote release host."""

    pass


class ReleaseAPIError(RemoteOperationError):
    """Error returned by the GitHub Releases API."""

    pass


class ReleaseAuthenticationError(ReleaseAPIError):
    """Invalid or missing token."""

    pass


class ReleasePermissionError(ReleaseAPIError):
    """Token lacks permission for the requested operation."""

    pass


class ReleaseNotFoundError(ReleaseAPIError):
    """Release, asset or repository not found."""

    pass


class ReleaseRateLimitError(ReleaseAPIError):
    """API rate limit exceeded."""

    pass


class ReleaseNetworkError(ReleaseAPIError):
    """Network-level failure while talking to the API."""

    pass


class ReleaseInvalidResponseError(ReleaseAPIError):
    """The API returned a response that could not be interpreted."""

    pass
