"""Tests for the AssetScanner class."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from pyrelease.exceptions import MandatoryAssetNotFoundError
from pyrelease.output import OutputFormatter
from pyrelease.sync.descriptor import AssetDescriptor, LocalAsset
from pyrelease.sync.scanner import AssetScanner


@pytest.fixture
def mock_output():
    """Create a mock output formatter."""
    return MagicMock(spec=OutputFormatter)


@pytest.fixture
def scanner(mock_output, tmp_path):
    """Create a scanner rooted at a temporary directory."""
    return AssetScanner(mock_output, base_path=tmp_path)


def _touch(directory: Path, *names: str) -> None:
    for name in names:
        path = directory / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"content of {name}")


class TestExpand:
    """Tests for expanding a single descriptor."""

    def test_single_match_uses_base_name(self, scanner, tmp_path):
        """A single match defaults to its base name and an empty label."""
        _touch(tmp_path, "dist/app.tar.gz")

        assets = scanner.expand(AssetDescriptor("dist/app.tar.gz"))

        assert assets == [
            LocalAsset(path=tmp_path / "dist/app.tar.gz", name="app.tar.gz", label="")
        ]

    def test_single_match_honors_overrides(self, scanner, tmp_path):
        """Name and label overrides apply when exactly one file matches."""
        _touch(tmp_path, "build/app")

        assets = scanner.expand(
            AssetDescriptor("build/*", name="app-linux", label="Linux binary")
        )

        assert len(assets) == 1
        assert assets[0].name == "app-linux"
        assert assets[0].label == "Linux binary"
        assert assets[0].path == tmp_path / "build/app"

    def test_multiple_matches_ignore_overrides(self, scanner, tmp_path):
        """Overrides are ignored when a pattern matches several files."""
        _touch(tmp_path, "out/a.bin", "out/b.bin", "out/c.bin")

        assets = scanner.expand(
            AssetDescriptor("out/*.bin", name="renamed", label="Label")
        )

        assert [a.name for a in assets] == ["a.bin", "b.bin", "c.bin"]
        assert all(a.label == "" for a in assets)

    def test_empty_directories_contribute_nothing(self, scanner, tmp_path):
        """Directory entries themselves are never assets."""
        _touch(tmp_path, "pkg/file.txt")
        (tmp_path / "pkg" / "subdir").mkdir()

        assets = scanner.expand(AssetDescriptor("pkg/*"))

        assert [a.name for a in assets] == ["file.txt"]

    def test_only_directories_count_as_no_match(self, scanner, tmp_path):
        """A pattern matching only directories is treated as unmatched."""
        (tmp_path / "only-dir").mkdir()

        with pytest.raises(MandatoryAssetNotFoundError):
            scanner.expand(AssetDescriptor("only-dir"))

    def test_mandatory_without_match_raises(self, scanner):
        """A mandatory pattern matching nothing raises."""
        with pytest.raises(MandatoryAssetNotFoundError) as exc_info:
            scanner.expand(AssetDescriptor("missing/*.zip"))

        assert exc_info.value.pattern == "missing/*.zip"
        assert "mandatory" in str(exc_info.value)
        assert '"missing/*.zip"' in str(exc_info.value)

    def test_optional_without_match_returns_empty(self, scanner, mock_output):
        """An optional pattern matching nothing yields no assets."""
        assets = scanner.expand(AssetDescriptor("missing/*.zip", optional=True))

        assert assets == []
        mock_output.info.assert_called_once()
        assert "optional" in mock_output.info.call_args[0][0]

    def test_recursive_pattern(self, scanner, tmp_path):
        """Double-star patterns descend into subdirectories."""
        _touch(tmp_path, "target/x/one.whl", "target/y/z/two.whl")

        assets = scanner.expand(AssetDescriptor("target/**/*.whl"))

        assert sorted(a.name for a in assets) == ["one.whl", "two.whl"]

    def test_absolute_pattern(self, mock_output, tmp_path):
        """Absolute patterns work regardless of the base path."""
        _touch(tmp_path, "abs.txt")
        scanner = AssetScanner(mock_output, base_path=Path("/"))

        assets = scanner.expand(AssetDescriptor(str(tmp_path / "abs.txt")))

        assert assets[0].path == tmp_path / "abs.txt"

    def test_defaults_to_current_directory(self, mock_output, tmp_path, monkeypatch):
        """Relative patterns resolve against the working directory by default."""
        _touch(tmp_path, "here.txt")
        monkeypatch.chdir(tmp_path)

        assets = AssetScanner(mock_output).expand(AssetDescriptor("here.txt"))


    def test_wildcard_matches_dotfiles(self, scanner, tmp_path):
        """Hidden files are matched by wildcards."""
        _touch(tmp_path, "dist/.sig", "dist/a.bin")

        assets = scanner.expand(AssetDescriptor("dist/*"))

        assert [a.name for a in assets] == [".sig", "a.bin"]

    def test_directory_pattern_includes_descendants(self, scanner, tmp_path):
        """A pattern naming a directory selects every file below it."""
        _touch(tmp_path, "dist/a.bin", "dist/sub/b.bin", "dist/.hidden")

        assets = scanner.expand(AssetDescriptor("dist"))

        assert sorted(a.path for a in assets) == [
            tmp_path / "dist/.hidden",
            tmp_path / "dist/a.bin",
            tmp_path / "dist/sub/b.bin",
        ]

    def test_directory_with_single_file_honors_overrides(self, scanner, tmp_path):
        _touch(tmp_path, "out/app")

        assets = scanner.expand(AssetDescriptor("out", name="app-linux"))

        assert assets == [LocalAsset(path=tmp_path / "out/app", name="app-linux")]

    def test_overlapping_matches_listed_once(self, scanner, tmp_path):
        """Files reached through a directory and directly are not repeated."""
        _touch(tmp_path, "pkg/a.txt", "pkg/sub/b.txt")

        assets = scanner.expand(AssetDescriptor("pkg/**"))

        assert sorted(a.path for a in assets) == [
            tmp_path / "pkg/a.txt",
            tmp_path / "pkg/sub/b.txt",
        ]
        assert assets[0].name == "here.txt"


class TestDedupe:
    """Tests for case-insensitive deduplication."""

    def _asset(self, name: str, path: str = "") -> LocalAsset:
        return LocalAsset(path=Path(path or f"/tmp/{name}"), name=name)

    def test_keeps_first_occurrence(self, scanner, mock_output):
        """The first asset of a name wins and a warning is emitted."""
        first = self._asset("app.zip", "/a/app.zip")
        second = self._asset("app.zip", "/b/app.zip")

        result = scanner.dedupe([first, second])

        assert result == [first]
        mock_output.warning.assert_called_once()
        assert '"app.zip"' in mock_output.warning.call_args[0][0]

    def test_lowercase_folding_only(self, scanner, mock_output):
        """Names that only match under full case folding are distinct."""
        assets = [self._asset("straße.txt"), self._asset("STRASSE.txt")]

        assert scanner.dedupe(assets) == assets
        mock_output.warning.assert_not_called()

    def test_case_insensitive(self, scanner, mock_output):
        """Names differing only in case collapse to the first one."""
        assets = [
            self._asset("README.md"),
            self._asset("other.txt"),
            self._asset("readme.MD"),
        ]

        result = scanner.dedupe(assets)

        assert [a.name for a in result] == ["README.md", "other.txt"]
        assert mock_output.warning.call_count == 1
        assert "readme.MD" in mock_output.warning.call_args[0][0]

    def test_preserves_order(self, scanner):
        """Order of first occurrences is preserved."""
        assets = [self._asset(n) for n in ["c", "a", "B", "b", "A", "d"]]

        result = scanner.dedupe(assets)

        assert [a.name for a in result] == ["c", "a", "B", "d"]

    def test_idempotent(self, scanner):
        """Deduplicating twice equals deduplicating once."""
        assets = [self._asset(n) for n in ["x", "X", "y", "x", "Y", "z"]]

        once = scanner.dedupe(assets)
        twice = scanner.dedupe(once)

        assert twice == once

    def test_empty(self, scanner, mock_output):
        """An empty list stays empty without warnings."""
        assert scanner.dedupe([]) == []
        mock_output.warning.assert_not_called()


class TestFindAssets:
    """Tests for expanding and deduplicating descriptor lists."""

    def test_expands_in_order_and_dedupes(self, scanner, tmp_path, mock_output):
        """Descriptors are expanded in order, later duplicates are dropped."""
        _touch(tmp_path, "a.txt", "dist/a.txt", "dist/b.txt")

        assets = scanner.find_assets(
            [AssetDescriptor("a.txt"), AssetDescriptor("dist/*.txt")]
        )

        assert [(a.name, a.path) for a in assets] == [
            ("a.txt", tmp_path / "a.txt"),
            ("b.txt", tmp_path / "dist/b.txt"),
        ]
        mock_output.warning.assert_called_once()

    def test_mandatory_failure_aborts(self, scanner, tmp_path):
        """A missing mandatory asset fails the whole scan."""
        _touch(tmp_path, "a.txt")

        with pytest.raises(MandatoryAssetNotFoundError):
            scanner.find_assets([AssetDescriptor("a.txt"), AssetDescriptor("nope")])

    def test_renamed_asset_participates_in_dedupe(self, scanner, tmp_path):
        """Overridden names are used for duplicate detection."""
        _touch(tmp_path, "one.txt", "two.txt")

        assets = scanner.find_assets(
            [
                AssetDescriptor("one.txt", name="Asset.txt"),
                AssetDescriptor("two.txt", name="asset.TXT"),
            ]
        )

        assert [a.path.name for a in assets] == ["one.txt"]
