"""Configuration management for PyRelease."""

import os
from pathlib import Path
from typing import Optional

DEFAULT_API_URL = "https://api.github.com"

TOKEN_ENV_VARS = ("PYRELEASE_TOKEN", "GITHUB_TOKEN")


class Config:
    """Configuration manager for PyRelease.

    Values are resolved from environment variables first and fall back to
    ``~/.config/pyrelease/config`` (``KEY=value`` lines).
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_dir: Directory holding the config file. Defaults to
                ~/.config/pyrelease
        """
        if config_dir is None:
            config_dir = Path.home() / ".config" / "pyrelease"
        self.config_dir = config_dir
        self.config_file = config_dir / "config"

    def _read_file(self) -> dict[str, str]:
        """Read KEY=value pairs from the config file."""
        if not self.config_file.exists():
            return {}

        values: dict[str, str] = {}
        with open(self.config_file, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                values[key.strip()] = value.strip().strip('"').strip("'")
        return values

    @property
    def token(self) -> Optional[str]:
        """GitHub token from the environment or the config file."""
        for var in TOKEN_ENV_VARS:
            value = os.environ.get(var)
            if value:
                return value
        return self._read_file().get("PYRELEASE_TOKEN")

    @property
    def api_url(self) -> str:
        """GitHub REST API base URL."""
        return (
            os.environ.get("GITHUB_API_URL")
            or self._read_file().get("GITHUB_API_URL")
            or DEFAULT_API_URL
        ).rstrip("/")

    @property
    def repository(self) -> Optional[str]:
        """Default ``owner/repo`` (set by GitHub Actions)."""
        return os.environ.get("GITHUB_REPOSITORY") or self._read_file().get(
            "GITHUB_REPOSITORY"
        )

    def is_configured(self) -> bool:
        """Check whether a token is available."""
        return bool(self.token)

    def get_config_path(self) -> Path:
        """Return the path of the config file."""
        return self.config_file

    def save_token(self, token: str) -> None:
        """Store the token in the config file, keeping other entries.

        Args:
            token: GitHub token to save
        """
        self.config_dir.mkdir(parents=True, exist_ok=True)
        values = self._read_file()
        values["PYRELEASE_TOKEN"] = token

        with open(self.config_file, "w", encoding="utf-8") as f:
            for key, value in values.items():
                f.write(f"{key}={value}\n")
        self.config_file.chmod(0o600)


config = Config()
