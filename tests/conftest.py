"""Shared test fixtures."""

import pytest

ENV_VARS = (
    "PYRELEASE_TOKEN",
    "GITHUB_TOKEN",
    "GITHUB_API_URL",
    "GITHUB_REPOSITORY",
    "GITHUB_ACTIONS",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Isolate tests from the GitHub Actions environment and user config."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(
        "pyrelease.config.config.config_file", tmp_path / "no-such-config"
    )
