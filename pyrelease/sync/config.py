"""Loading of asset descriptors from configuration files and inputs."""

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Union

import yaml

from ..exceptions import ReleaseConfigError
from .descriptor import AssetDescriptor

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(".github") / "release-assets.yml"


def _descriptors_from_data(data: Any, source: str) -> list[AssetDescriptor]:
    """Validate parsed data and build descriptors.

    Args:
        data: Parsed YAML/JSON (a list, or a mapping with an ``assets`` list)
        source: Description of where the data came from, for error messages

    Returns:
        List of AssetDescriptor objects
    """
    if data is None:
        return []

    if isinstance(data, dict):
        unknown = set(data) - {"assets"}
        if unknown:
            logger.debug("Ignoring unknown keys %s in %s", sorted(unknown), source)
        data = data.get("assets") or []

    if not isinstance(data, list):
        raise ReleaseConfigError(
            f"Validation of {source} failed: assets must be a list, "
            f"got {type(data).__name__}"
        )

    descriptors: list[AssetDescriptor] = []
    for index, entry in enumerate(data):
        try:
            descriptors.append(AssetDescriptor.from_dict(entry))
        except ReleaseConfigError as e:
            raise ReleaseConfigError(
                f"Validation of {source} failed at asset {index}: {e}"
            ) from e
    return descriptors


def parse_assets_input(text: str) -> list[AssetDescriptor]:
    """Parse inline YAML describing assets.

    Args:
        text: YAML list of asset entries (empty text yields no assets)

    Returns:
        List of AssetDescriptor objects

    Raises:
        ReleaseConfigError: If the YAML is invalid or fails validation

    Examples:
        >>> parse_assets_input("- path: dist/*.whl\\n- path: README.md\\n  optional: true")
    """
    if not text or not text.strip():
        return []

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ReleaseConfigError(
            f"Parsing of assets input failed with {str(e)!r}. "
            f"Provided value: {text!r}"
        ) from e

    return _descriptors_from_data(data, "assets input")


def load_asset_descriptors(
    path: Union[str, Path] = DEFAULT_CONFIG_PATH,
) -> list[AssetDescriptor]:
    """Load asset descriptors from a YAML or JSON configuration file.

    A missing or empty file yields no descriptors.

    Args:
        path: Path to the configuration file

    Returns:
        List of AssetDescriptor objects

    Raises:
        ReleaseConfigError: If the file cannot be parsed or fails validation
    """
    path = Path(path)

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info("No configuration found at %s", path)
        return []
    except OSError as e:
        raise ReleaseConfigError(f"Cannot read configuration {path}: {e}") from e

    if not text.strip():
        return []

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ReleaseConfigError(
            f"Parsing of release configuration {path} failed with {str(e)!r}"
        ) from e

    descriptors = _descriptors_from_data(data, f"release configuration {path}")
    logger.debug("Loaded %d asset descriptor(s) from %s", len(descriptors), path)
    return descriptors


def merge_asset_descriptors(
    *sources: Iterable[AssetDescriptor],
) -> list[AssetDescriptor]:
    """Concatenate descriptor lists, keeping their order.

    Entries from later sources are appended after earlier ones; duplicates
    are resolved later by name during scanning.
    """
    merged: list[AssetDescriptor] = []
    for source in sources:
        merged.extend(source)
    return merged
