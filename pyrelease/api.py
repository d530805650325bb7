"""API client for GitHub Releases."""

from __future__ import annotations

import random
import re
import time
from typing import Any

import httpx

from .config import config
from .exceptions import (
    ReleaseAPIError,
    ReleaseAuthenticationError,
    ReleaseConfigError,
    ReleaseInvalidResponseError,
    ReleaseNetworkError,
    ReleaseNotFoundError,
    ReleasePermissionError,
    ReleaseRateLimitError,
)

API_VERSION = "2022-11-28"

# Matches the RFC 6570 query template GitHub appends to upload_url
_URI_TEMPLATE_RE = re.compile(r"\{[^}]*\}$")


class ReleaseClient:
    """Client for interacting with the GitHub Releases API."""

    def __init__(
        self,
        token: str | None = None,
        api_url: str | None = None,
        repository: str | None = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 30.0,
    ):
        """Initialize GitHub Releases client.

        Args:
            token: Optional GitHub token (uses config if not provided)
            api_url: Optional API URL (uses config if not provided)
            repository: Repository as "owner/repo" (uses config if not provided)
            max_retries: Maximum number of retry attempts (default: 3)
            retry_delay: Initial delay between retries in seconds (default: 1.0)
            timeout: Request timeout in seconds (default: 30.0)
        """
        self.token = token or config.token
        self.api_url = (api_url or config.api_url).rstrip("/")
        self.repository = repository or config.repository
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout

        if not self.token:
            raise ReleaseConfigError(
                "GitHub token not configured. "
                "Please set GITHUB_TOKEN or PYRELEASE_TOKEN environment variable."
            )

        self._client: httpx.Client | None = None

    @property
    def repo_path(self) -> str:
        """Repository path segment ("repos/owner/repo")."""
        if not self.repository or self.repository.count("/") != 1:
            raise ReleaseConfigError(
                f"Repository must be given as owner/repo, got {self.repository!r}"
            )
        owner, repo = self.repository.split("/")
        if not owner or not repo:
            raise ReleaseConfigError(
                f"Repository must be given as owner/repo, got {self.repository!r}"
            )
        return f"repos/{owner}/{repo}"

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/vnd.github+json",
                    "X-GitHub-Api-Version": API_VERSION,
                },
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
            )
        return self._client

    def close(self) -> None:
        """Close the client and release connections."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self) -> ReleaseClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _should_retry(self, exception: Exception, attempt: int) -> bool:
        """Determine if a request should be retried.

        Args:
            exception: The exception that occurred
            attempt: Current attempt number (0-based)

        Returns:
            True if the request should be retried, False otherwise
        """
        if attempt >= self.max_retries:
            return False

        if isinstance(exception, (ReleaseNetworkError, ReleaseRateLimitError)):
            return True

        return False

    def _calculate_retry_delay(self, attempt: int) -> float:
        """Calculate delay before next retry using exponential backoff.

        Args:
            attempt: Current attempt number (0-based)

        Returns:
            Delay in seconds
        """
        base_delay = self.retry_delay * (2**attempt)
        # +/- 25% jitter
        jitter = base_delay * 0.25 * (2 * random.random() - 1)
        return base_delay + jitter

    def _handle_http_error(
        self, e: httpx.HTTPStatusError, attempt: int, retry: bool
    ) -> tuple[Exception, bool]:
        """Map an HTTP error to a PyRelease exception.

        Args:
            e: The HTTP error exception
            attempt: Current attempt number
            retry: Whether the request may be retried at all

        Returns:
            Tuple of (exception to raise, should_retry)
        """
        status_code = e.response.status_code
        message = self._extract_error_message(e.response)

        if status_code == 401:
            raise ReleaseAuthenticationError(
                "Invalid token or unauthorized access"
            ) from e
        elif status_code == 404:
            raise ReleaseNotFoundError(
                f"Resource not found: {e.request.url}"
            ) from e
        elif status_code == 429 or (
            status_code == 403 and e.response.headers.get("x-ratelimit-remaining") == "0"
        ):
            error: Exception = ReleaseRateLimitError(
                "Rate limit exceeded - please try again later"
            )
            return (error, retry and attempt < self.max_retries)
        elif status_code == 403:
            detail = f": {message}" if message else ""
            raise ReleasePermissionError(
                f"Access forbidden - check your token permissions{detail}"
            ) from e

        error_msg = f"API request failed with status {status_code}"
        if message:
            error_msg = f"{error_msg}: {message}"
        error = ReleaseAPIError(error_msg)
        should_retry = retry and 500 <= status_code < 600 and attempt < self.max_retries
        return (error, should_retry)

    @staticmethod
    def _extract_error_message(response: httpx.Response) -> str:
        """Extract the "message" field of a GitHub error body, if any."""
        try:
            if response.content:
                data = response.json()
                if isinstance(data, dict):
                    message = data.get("message") or ""
                    errors = data.get("errors")
                    if isinstance(errors, list) and errors:
                        codes = [
                            err.get("code", "") if isinstance(err, dict) else str(err)
                            for err in errors
                        ]
                        message = f"{message} ({', '.join(c for c in codes if c)})"
                    return message
        except ValueError:
            pass
        return ""

    def _request(
        self,
        method: str,
        endpoint: str,
        retry: bool = True,
        **kwargs: Any,
    ) -> Any:
        """Make an API request with retry logic.

        Args:
            method: HTTP method
            endpoint: API endpoint path or absolute URL
            retry: Whether transient failures may be retried
            **kwargs: Additional arguments passed to httpx

        Returns:
            Response JSON data

        Raises:
            ReleaseAPIError: If the request fails after all retries
        """
        if endpoint.startswith(("http://", "https://")):
            url = endpoint
        else:
            url = f"{self.api_url}/{endpoint.lstrip('/')}"
        last_exception: Exception | None = None
        client = self._get_client()
        attempts = self.max_retries + 1 if retry else 1

        for attempt in range(attempts):
            try:
                response = client.request(method, url, **kwargs)
                response.raise_for_status()

                if not response.content:
                    return {}

                content_type = response.headers.get("Content-Type", "")
                if "json" not in content_type:
                    raise ReleaseInvalidResponseError(
                        f"Unexpected response type: {content_type}"
                    )
                try:
                    return response.json()
                except ValueError as e:
                    raise ReleaseInvalidResponseError(
                        "Invalid JSON response from server"
                    ) from e

            except httpx.HTTPStatusError as e:
                error, should_retry = self._handle_http_error(e, attempt, retry)
                last_exception = error

                if should_retry:
                    retry_after = e.response.headers.get("Retry-After")
                    if retry_after and retry_after.isdigit():
                        delay = float(retry_after)
                    else:
                        delay = self._calculate_retry_delay(attempt)
                    time.sleep(delay)
                    continue
                raise error from e
            except ReleaseAPIError:
                raise
            except httpx.RequestError as e:
                error = ReleaseNetworkError(f"Network error: {e}")
                last_exception = error
                if retry and self._should_retry(error, attempt):
                    time.sleep(self._calculate_retry_delay(attempt))
                    continue
                raise error from e

        if last_exception:
            raise last_exception
        raise ReleaseAPIError("Request failed after all retry attempts")

    # =========================
    # Release Operations
    # =========================

    def get_release(self, release_id: int) -> Any:
        """Get a release by ID.

        Args:
            release_id: Numeric release ID

        Returns:
            Release object
        """
        return self._request("GET", f"/{self.repo_path}/releases/{release_id}")

    def get_release_by_tag(self, tag: str) -> Any:
        """Get a published release by its tag name.

        Args:
            tag: Tag name (e.g. "v1.2.3")

        Returns:
            Release object
        """
        return self._request("GET", f"/{self.repo_path}/releases/tags/{tag}")

    def list_releases(self, per_page: int = 30, page: int = 1) -> Any:
        """List releases of the repository, newest first.

        Draft releases are only returned to users with push access, which
        makes this the only way to look up a draft by tag.
        """
        return self._request(
            "GET",
            f"/{self.repo_path}/releases",
            params={"per_page": per_page, "page": page},
        )

    def find_release_by_tag(self, tag: str, include_drafts: bool = True) -> Any:
        """Find a release by tag, including drafts.

        Args:
            tag: Tag name
            include_drafts: Whether to scan the release list for drafts when
                the tag endpoint does not know the release

        Returns:
            Release object

        Raises:
            ReleaseNotFoundError: If no release exists for the tag
        """
        try:
            return self.get_release_by_tag(tag)
        except ReleaseNotFoundError:
            if not include_drafts:
                raise

        page = 1
        while True:
            releases = self.list_releases(per_page=100, page=page)
            for release in releases:
                if release.get("tag_name") == tag:
                    return release
            if len(releases) < 100:
                break
            page += 1

        raise ReleaseNotFoundError(f"No release found for tag {tag!r}")

    # =========================
    # Asset Operations
    # =========================

    def list_release_assets(self, release_id: int, per_page: int = 100) -> list[Any]:
        """List every asset of a release, following pagination.

        Args:
            release_id: Numeric release ID
            per_page: Page size (max 100)

        Returns:
            List of asset objects
        """
        assets: list[Any] = []
        page = 1
        while True:
            batch = self._request(
                "GET",
                f"/{self.repo_path}/releases/{release_id}/assets",
                params={"per_page": per_page, "page": page},
            )
            assets.extend(batch)
            if len(batch) < per_page:
                return assets
            page += 1

    def upload_release_asset(
        self,
        upload_url: str,
        name: str,
        label: str,
        data: bytes,
        content_type: str,
    ) -> Any:
        """Upload an asset to a release.

        The request is sent once; a failed upload is not retried here because
        GitHub may already have created a partial asset with the same name.

        Args:
            upload_url: The release's ``upload_url`` (URI template suffix allowed)
            name: Asset file name
            label: Asset display label (empty for none)
            data: File content
            content_type: MIME type sent as Content-Type

        Returns:
            Asset object
        """
        url = _URI_TEMPLATE_RE.sub("", upload_url)
        params = {"name": name}
        if label:
            params["label"] = label

        return self._request(
            "POST",
            url,
            retry=False,
            params=params,
            content=data,
            headers={"Content-Type": content_type},
        )

    def delete_release_asset(self, asset_id: int) -> None:
        """Delete a release asset.

        Args:
            asset_id: Numeric asset ID
        """
        self._request("DELETE", f"/{self.repo_path}/releases/assets/{asset_id}")

    # =========================
    # User Operations
    # =========================

    def get_authenticated_user(self) -> Any:
        """Get the user the token belongs to."""
        return self._request("GET", "/user")
