"""Glob scanning of local release assets."""

import glob
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from ..exceptions import MandatoryAssetNotFoundError
from .descriptor import AssetDescriptor, LocalAsset
from .protocols import OutputHandlerProtocol

logger = logging.getLogger(__name__)


class AssetScanner:
    """Resolves asset descriptors to local files.

    Examples:
        >>> scanner = AssetScanner(output)
        >>> assets = scanner.find_assets([AssetDescriptor("dist/*")])
        >>> for asset in assets:
        ...     print(asset.name)
    """

    def __init__(
        self,
        output: OutputHandlerProtocol,
        base_path: Optional[Path] = None,
    ):
        """Initialize asset scanner.

        Args:
            output: Output handler for info and warning messages
            base_path: Directory relative patterns are resolved against
                (defaults to the current directory)
        """
        self.output = output
        self.base_path = base_path

    def _glob(self, pattern: str) -> list[Path]:
        """Return the files matching a pattern, sorted.

        Dotfiles match wildcards. A matched directory contributes every file
        below it rather than itself.
        """
        root = self.base_path or Path.cwd()
        matches = glob.glob(
            pattern, root_dir=root, recursive=True, include_hidden=True
        )

        files: list[Path] = []
        seen: set[Path] = set()
        for match in sorted(matches):
            path = Path(match)
            if not path.is_absolute():
                path = root / path
            if path.is_dir():
                candidates = sorted(p for p in path.rglob("*") if p.is_file())
            else:
                candidates = [path]
            for candidate in candidates:
                if candidate not in seen:
                    seen.add(candidate)
                    files.append(candidate)

        logger.debug("Pattern %r matched %d file(s)", pattern, len(files))
        return files

    def expand(self, descriptor: AssetDescriptor) -> list[LocalAsset]:
        """Expand one descriptor into local assets.

        The descriptor's name and label only apply when the pattern matches
        a single file. Wildcard matches keep each file's own base name.

        Args:
            descriptor: Asset descriptor to expand

        Returns:
            List of LocalAsset objects (empty for unmatched optional patterns)

        Raises:
            MandatoryAssetNotFoundError: If a mandatory pattern matches nothing
        """
        paths = self._glob(descriptor.pattern)

        if not paths:
            if descriptor.optional:
                self.output.info(
                    "No release assets found for optional asset with path glob "
                    f'pattern "{descriptor.pattern}"'
                )
                return []
            raise MandatoryAssetNotFoundError(descriptor.pattern)

        if len(paths) > 1:
            return [LocalAsset(path=path, name=path.name) for path in paths]

        path = paths[0]
        return [
            LocalAsset(
                path=path,
                name=descriptor.name or path.name,
                label=descriptor.label or "",
            )
        ]

    def dedupe(self, assets: Iterable[LocalAsset]) -> list[LocalAsset]:
        """Drop assets whose name was already seen (case-insensitive).

        The first occurrence wins and the original order is preserved.

        Args:
            assets: Candidate assets

        Returns:
            Assets with unique names
        """
        seen: set[str] = set()
        unique: list[LocalAsset] = []

        for asset in assets:
            key = asset.name.lower()
            if key in seen:
                self.output.warning(
                    f'Release asset "{asset.name}" found multiple times. '
                    "Only the first instance will be used."
                )
                continue
            seen.add(key)
            unique.append(asset)

        return unique

    def find_assets(self, descriptors: Iterable[AssetDescriptor]) -> list[LocalAsset]:
        """Expand all descriptors in order and dedupe the result.

        Args:
            descriptors: Asset descriptors

        Returns:
            Desired assets with unique names

        Raises:
            MandatoryAssetNotFoundError: If a mandatory pattern matches nothing
        """
        found: list[LocalAsset] = []
        for descriptor in descriptors:
            found.extend(self.expand(descriptor))
        return self.dedupe(found)
