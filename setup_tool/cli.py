"""
Command-line interface for the player setup tool.

Configures the catalog bucket, inspects the resolved catalog and prepares
local demo content, using the Click framework.
"""

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from shared.config import config_path, load_player_config, save_player_config
from shared.constants import DEFAULT_BUCKET, DEFAULT_API_PORT
from shared.models import PlayerConfig, StorageProvider, format_time
from player.library import CatalogLoader
from .audio import AudioProcessor
from .manifest import build_manifest
from .provider_factory import StorageProviderFactory

console = Console()

PUBLIC_SONGS_DIR = Path(__file__).resolve().parent.parent / "public" / "songs"


@click.group()
@click.version_option(version="1.0.0")
@click.option('-v', '--verbose', is_flag=True, help='Show debug logging')
def cli(verbose):
    """
    🎵 TuneNoodle Setup Tool

    Point the player at a bucket of songs
    (Cloudflare R2 / Backblaze B2 / S3 / local directory)
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option('--provider', type=click.Choice([p.value for p in StorageProvider]), required=True,
              help='Storage provider (r2=Cloudflare, b2=Backblaze, s3=AWS, generic=S3-compatible, local=directory)')
@click.option('--bucket', default=DEFAULT_BUCKET, show_default=True, help='Bucket holding the songs')
@click.option('--endpoint', help='Endpoint URL (R2/generic) or base directory (local)')
@click.option('--region', help='Region (AWS S3)')
@click.option('--access-key-id', help='Access key ID / B2 application key ID')
@click.option('--secret-access-key', help='Secret access key / B2 application key')
def init(provider, bucket, endpoint, region, access_key_id, secret_access_key):
    """
    Write the player configuration.

    Missing credentials are prompted for.
    """
    provider_type = StorageProvider(provider)
    if provider_type != StorageProvider.LOCAL:
        access_key_id = access_key_id or Prompt.ask("Access Key ID").strip()
        secret_access_key = secret_access_key or Prompt.ask("Secret Access Key", password=True).strip()
    elif not endpoint:
        endpoint = Prompt.ask("Base directory").strip()

    config = PlayerConfig(
        provider=provider_type,
        bucket=bucket,
        endpoint=endpoint,
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
        region=region,
    )
    path = save_player_config(config)

    console.print(Panel.fit(
        f"[bold green]✅ Configuration saved[/bold green]\n\n"
        f"Provider: {StorageProviderFactory.get_provider_name(provider_type)}\n"
        f"Bucket: {bucket}\n"
        f"Config: {path}\n\n"
        "[cyan]Next steps:[/cyan]\n"
        "• Check the catalog: [yellow]python -m setup_tool catalog[/yellow]\n"
        "• Start the player: [yellow]python run.py[/yellow]",
        border_style="green"
    ))


@cli.command()
def status():
    """Show the configured provider and whether it can be reached."""
    config = load_player_config()
    if config is None:
        console.print(f"[yellow]Not configured ({config_path()} missing); "
                      f"the player will use the demo songs.[/yellow]")
        return

    name = StorageProviderFactory.get_provider_name(config.provider)
    with console.status(f"Connecting to {name}..."):
        provider = StorageProviderFactory.connect(config)

    if provider is None:
        console.print(f"[red]❌ Could not connect to {name} bucket '{config.bucket}'[/red]")
    else:
        console.print(f"[green]✓ Connected to {name} bucket '{config.bucket}'[/green]")


@cli.command()
def catalog():
    """Resolve the catalog once and list it."""
    loader = CatalogLoader(load_player_config())
    with console.status("Loading tracks..."):
        result = asyncio.run(loader.load_catalog())

    count = len(result)
    table = Table(title="All tracks", caption="1 song" if count == 1 else f"{count} songs",
                  show_header=True, header_style="bold magenta")
    table.add_column("#", style="cyan", width=4)
    table.add_column("Title", style="green")
    table.add_column("Artist")
    table.add_column("Duration", justify="right")

    for index, track in enumerate(result.tracks, start=1):
        table.add_row(
            f"{index:02d}",
            track.title,
            track.artist,
            format_time(track.duration) if track.duration else "--:--",
        )
    console.print(table)


@cli.command('build-manifest')
@click.argument('songs_dir', type=click.Path(exists=True, file_okay=False, path_type=Path),
                default=PUBLIC_SONGS_DIR)
@click.option('--output', type=click.Path(dir_okay=False, path_type=Path),
              help='Manifest path (default: SONGS_DIR/manifest.json)')
def build_manifest_command(songs_dir, output):
    """Write manifest.json describing the audio files in SONGS_DIR."""
    manifest = build_manifest(songs_dir, output)
    console.print(f"[green]Manifest written with {len(manifest['songs'])} songs[/green] → "
                  f"{output or songs_dir / 'manifest.json'}")


@cli.command('generate-songs')
@click.argument('target_dir', type=click.Path(file_okay=False, path_type=Path), default=PUBLIC_SONGS_DIR)
def generate_songs(target_dir):
    """Generate the synthetic demo songs used by the fallback catalog."""
    with console.status("Rendering sine waves..."):
        written = AudioProcessor.generate_demo_songs(target_dir)
    console.print(f"[green]Generated {len(written)} audio files in {target_dir}[/green]")


@cli.command()
@click.option('--port', default=DEFAULT_API_PORT, show_default=True, help='Port to run the player API on')
@click.option('--debug/--no-debug', default=False, help='Run in debug mode')
def serve(port, debug):
    """Start the player API."""
    from shared.api import start_api

    console.print(f"[bold green]Starting player on http://localhost:{port}[/bold green]")
    start_api(port=port, debug=debug)


if __name__ == '__main__':
    cli()
