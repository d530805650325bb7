"""CLI interface for PyRelease."""

import logging
from pathlib import Path
from typing import Any, Optional

import click

from .api import ReleaseClient
from .config import config
from .exceptions import (
    MandatoryAssetNotFoundError,
    ReleaseAPIError,
    ReleaseConfigError,
)
from .models import Release, ReleaseAsset
from .output import OutputFormatter
from .sync import (
    DEFAULT_CONFIG_PATH,
    AssetDescriptor,
    AssetSyncEngine,
    load_asset_descriptors,
    merge_asset_descriptors,
    parse_assets_input,
)
from .sync.results import asset_sort_key
from .utils import format_size, format_timestamp

logger = logging.getLogger(__name__)


def _asset_rows(assets: list[ReleaseAsset]) -> list[list[str]]:
    """Build table rows for release assets."""
    return [
        [
            asset.name,
            asset.label,
            format_size(asset.size),
            asset.content_type,
            str(asset.download_count),
            format_timestamp(asset.updated_at),
        ]
        for asset in assets
    ]


ASSET_COLUMNS = ["Name", "Label", "Size", "Content type", "Downloads", "Updated"]


def _create_client(ctx: Any) -> ReleaseClient:
    """Create a client from the global options."""
    return ReleaseClient(token=ctx.obj["token"], repository=ctx.obj["repo"])


@click.group()
@click.option(
    "--token",
    "-t",
    envvar="PYRELEASE_TOKEN",
    help="GitHub token (defaults to GITHUB_TOKEN)",
)
@click.option(
    "--repo",
    "-r",
    envvar="GITHUB_REPOSITORY",
    help="Repository as owner/repo",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="pyrelease")
@click.pass_context
def main(
    ctx: Any,
    token: Optional[str],
    repo: Optional[str],
    quiet: bool,
    json: bool,
    verbose: bool,
) -> None:
    """PyRelease - Keep GitHub release assets in sync with local files."""
    ctx.ensure_object(dict)
    ctx.obj["token"] = token
    ctx.obj["repo"] = repo
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("pyrelease").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.option(
    "--token",
    "-t",
    prompt="Enter your GitHub token",
    hide_input=True,
    help="GitHub token",
)
@click.pass_context
def init(ctx: Any, token: str) -> None:
    """Initialize PyRelease configuration.

    Stores your token in ~/.config/pyrelease/config for future use.
    """
    out: OutputFormatter = ctx.obj["out"]

    out.info("Validating token...")
    try:
        with ReleaseClient(token=token) as client:
            user = client.get_authenticated_user()
        out.success(f"Token is valid (authenticated as {user.get('login', '?')})")
    except ReleaseAPIError as e:
        out.error(f"Token validation failed: {e}")
        if not click.confirm("Save token anyway?", default=False):
            out.warning("Configuration cancelled.")
            ctx.exit(1)

    try:
        config.save_token(token)
    except OSError as e:
        out.error(f"Saving configuration failed: {e}")
        ctx.exit(1)

    out.success(f"Configuration saved successfully to {config.get_config_path()}")


@main.command()
@click.argument("tag")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Asset configuration file (default: {DEFAULT_CONFIG_PATH})",
)
@click.option(
    "--assets",
    "assets_yaml",
    default=None,
    help="Additional assets as a YAML list of {path, name, label, optional}",
)
@click.option(
    "--asset",
    "-a",
    "patterns",
    multiple=True,
    help="Additional asset glob pattern (repeatable)",
)
@click.option(
    "--max-workers",
    "-j",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of concurrent uploads (default: unlimited)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would be done without making changes",
)
@click.pass_context
def sync(
    ctx: Any,
    tag: str,
    config_path: Optional[Path],
    assets_yaml: Optional[str],
    patterns: tuple[str, ...],
    max_workers: Optional[int],
    dry_run: bool,
) -> None:
    """Upload local files as assets of the release for TAG.

    Assets already attached under the same name are replaced; other
    existing assets are left untouched.

    Examples:
        pyrelease sync v1.2.0 -a "dist/*"
        pyrelease sync v1.2.0 --config .github/release-assets.yml
        pyrelease sync v1.2.0 --assets "[{path: build/app, name: app-linux}]"
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        descriptors = merge_asset_descriptors(
            load_asset_descriptors(config_path or DEFAULT_CONFIG_PATH),
            parse_assets_input(assets_yaml or ""),
            [AssetDescriptor(pattern) for pattern in patterns],
        )

        with _create_client(ctx) as client:
            release = Release.from_api_response(client.find_release_by_tag(tag))
            if len(release.assets) >= 100:
                release.assets = [
                    ReleaseAsset.from_api_response(asset)
                    for asset in client.list_release_assets(release.id)
                ]
            out.info(
                f"Release {release.tag_name} ({release.id}) has "
                f"{len(release.assets)} existing asset(s)"
            )

            engine = AssetSyncEngine(client, out, max_workers=max_workers)
            report = engine.sync_release(release, descriptors, dry_run=dry_run)

    except MandatoryAssetNotFoundError as e:
        out.error(str(e))
        ctx.exit(1)
    except ReleaseConfigError as e:
        out.error(str(e))
        ctx.exit(1)
    except ReleaseAPIError as e:
        out.error(str(e))
        ctx.exit(1)

    if out.json_output:
        out.output_json(report.to_dict())
    elif report.assets:
        out.print_table("Release assets", ASSET_COLUMNS, _asset_rows(report.assets))

    if not report.is_success:
        out.error(f"{len(report.failures)} release asset operation(s) failed")
        ctx.exit(1)

    if not dry_run:
        out.success("Release assets are in sync")


@main.command()
@click.argument("tag")
@click.pass_context
def ls(ctx: Any, tag: str) -> None:
    """List the assets of the release for TAG."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        with _create_client(ctx) as client:
            release = Release.from_api_response(client.find_release_by_tag(tag))
            assets = [
                ReleaseAsset.from_api_response(asset)
                for asset in client.list_release_assets(release.id)
            ]
    except ReleaseConfigError as e:
        out.error(str(e))
        ctx.exit(1)
    except ReleaseAPIError as e:
        out.error(str(e))
        ctx.exit(1)

    assets.sort(key=asset_sort_key)

    if out.json_output:
        out.output_json([asset.to_dict() for asset in assets])
        return

    if not assets:
        out.info(f"Release {tag} has no assets")
        return

    out.print_table(f"Assets of {tag}", ASSET_COLUMNS, _asset_rows(assets))


if __name__ == "__main__":
    main()
