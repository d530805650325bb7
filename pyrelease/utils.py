"""Utility functions for PyRelease."""

from datetime import datetime
from typing import Optional

# =============================================================================
# Timestamp parsing utilities
# =============================================================================


def parse_iso_timestamp(timestamp_str: Optional[str]) -> Optional[datetime]:
    """Parse ISO format timestamp from the GitHub API.

    Args:
        timestamp_str: ISO format timestamp string (e.g., "2025-01-15T10:30:00Z")

    Returns:
        datetime object in local timezone or None if parsing fails
    """
    if not timestamp_str:
        return None

    try:
        # The 'Z' suffix indicates UTC time
        if timestamp_str.endswith("Z"):
            timestamp_str = timestamp_str[:-1] + "+00:00"

        dt = datetime.fromisoformat(timestamp_str)
        if dt.tzinfo is not None:
            # Convert to local naive datetime
            return datetime.fromtimestamp(dt.timestamp())
        return dt
    except (ValueError, AttributeError):
        return None


def format_timestamp(timestamp_str: Optional[str]) -> str:
    """Format an API timestamp for display ("-" when missing)."""
    dt = parse_iso_timestamp(timestamp_str)
    if dt is None:
        return "-"
    return dt.strftime("%Y-%m-%d %H:%M")


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"
