"""Data models for GitHub release API responses."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ReleaseAsset:
    """An asset attached to a remote release."""

    id: int
    name: str
    label: str = ""
    state: str = ""
    content_type: str = ""
    size: int = 0
    download_count: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    api_url: str = ""
    download_url: str = ""
    node_id: str = ""

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "ReleaseAsset":
        """Create a ReleaseAsset from a GitHub release asset object.

        Args:
            data: Asset dictionary as returned by the API

        Returns:
            Normalized ReleaseAsset
        """
        return cls(
            id=data.get("id", 0),
            name=data.get("name", ""),
            label=data.get("label") or "",
            state=data.get("state", ""),
            content_type=data.get("content_type", ""),
            size=data.get("size", 0),
            download_count=data.get("download_count", 0),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            api_url=data.get("url", ""),
            download_url=data.get("browser_download_url", ""),
            node_id=data.get("node_id", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON output."""
        return {
            "id": self.id,
            "nodeId": self.node_id,
            "name": self.name,
            "label": self.label,
            "state": self.state,
            "contentType": self.content_type,
            "size": self.size,
            "downloadCount": self.download_count,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "apiUrl": self.api_url,
            "downloadUrl": self.download_url,
        }


@dataclass
class Release:
    """A GitHub release."""

    id: int
    tag_name: str
    upload_url: str
    name: str = ""
    html_url: str = ""
    draft: bool = False
    prerelease: bool = False
    assets: list[ReleaseAsset] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "Release":
        """Create a Release from a GitHub release object."""
        return cls(
            id=data.get("id", 0),
            tag_name=data.get("tag_name", ""),
            upload_url=data.get("upload_url", ""),
            name=data.get("name") or "",
            html_url=data.get("html_url", ""),
            draft=bool(data.get("draft", False)),
            prerelease=bool(data.get("prerelease", False)),
            assets=[
                ReleaseAsset.from_api_response(asset)
                for asset in data.get("assets") or []
            ],
        )
