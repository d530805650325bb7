"""Asset descriptors declaring which local files to attach to a release."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from ..exceptions import ReleaseConfigError


@dataclass(frozen=True)
class AssetDescriptor:
    """Declared intent to attach one or more files matching a glob pattern.

    Examples:
        >>> AssetDescriptor("dist/*.whl")
        >>> AssetDescriptor("build/app", name="app-linux-x64", label="Linux")
        >>> AssetDescriptor("docs/*.pdf", optional=True)
    """

    pattern: str
    """Glob pattern selecting local files"""

    name: Optional[str] = None
    """Asset name override (only honored when the pattern matches one file)"""

    label: Optional[str] = None
    """Asset label override (only honored when the pattern matches one file)"""

    optional: bool = False
    """Whether the pattern may match no files"""

    @classmethod
    def from_dict(cls, data: Any) -> "AssetDescriptor":
        """Create a descriptor from a configuration entry.

        A plain string is shorthand for ``{"path": string}``.

        Args:
            data: Mapping with keys ``path``, ``name``, ``label``, ``optional``

        Returns:
            AssetDescriptor instance

        Raises:
            ReleaseConfigError: If the entry is malformed
        """
        if isinstance(data, str):
            data = {"path": data}
        if not isinstance(data, dict):
            raise ReleaseConfigError(
                f"Asset entry must be a mapping or a string, got {data!r}"
            )

        pattern = data.get("path")
        if not isinstance(pattern, str) or not pattern.strip():
            raise ReleaseConfigError(
                f"Asset entry requires a non-empty string 'path', got {data!r}"
            )

        unknown = set(data) - {"path", "name", "label", "optional"}
        if unknown:
            raise ReleaseConfigError(
                f"Unknown asset option(s) {sorted(unknown)} in {data!r}"
            )

        for key in ("name", "label"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ReleaseConfigError(
                    f"Asset option '{key}' must be a string, got {value!r}"
                )

        optional = data.get("optional", False)
        if not isinstance(optional, bool):
            raise ReleaseConfigError(
                f"Asset option 'optional' must be a boolean, got {optional!r}"
            )

        return cls(
            pattern=pattern,
            name=data.get("name") or None,
            label=data.get("label") or None,
            optional=optional,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a configuration entry."""
        result: dict[str, Any] = {"path": self.pattern}
        if self.name is not None:
            result["name"] = self.name
        if self.label is not None:
            result["label"] = self.label
        if self.optional:
            result["optional"] = True
        return result


@dataclass
class LocalAsset:
    """A local file resolved from a descriptor, ready to be uploaded."""

    path: Path
    """Path to the file"""

    name: str
    """Asset name on the release"""

    label: str = ""
    """Asset display label"""
