"""CLI for btmeta.

Reads metainfo files, hands the bytes to the codec and prints the extracted
fields. All failures end with a red message on stderr and exit status 1.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from btmeta.config.config import ConfigManager, init_config
from btmeta.core.bencode import decode
from btmeta.core.torrent import TorrentParser
from btmeta.core.value import ByteString, Dictionary, Integer, List, Value
from btmeta.models import LogLevel
from btmeta.utils.exceptions import BTMetaError
from btmeta.utils.logging_config import log_exception, setup_logging

logger = logging.getLogger(__name__)

# Map -v count to log level
VERBOSITY_TO_LEVEL: dict[int, LogLevel] = {
    0: LogLevel.WARNING,
    1: LogLevel.INFO,
    2: LogLevel.DEBUG,
}


def _get_config_from_context(ctx: click.Context) -> ConfigManager:
    """Return the config manager stored on the click context."""
    return ctx.obj["config_manager"]


def _fail(message: str) -> None:
    """Print an error and exit with status 1."""
    Console(stderr=True).print(f"[red]Error: {message}[/red]", markup=True, highlight=False)
    raise SystemExit(1)


def _to_json(value: Value) -> Any:
    """Render a value tree as JSON-compatible data.

    Byte strings become text when they are valid UTF-8 and hex otherwise.
    """
    if isinstance(value, Integer):
        return value.value
    if isinstance(value, ByteString):
        try:
            return value.text()
        except UnicodeDecodeError:
            return value.value.hex()
    if isinstance(value, List):
        return [_to_json(item) for item in value]
    if isinstance(value, Dictionary):
        return {
            key.decode("utf-8", errors="replace"): _to_json(item)
            for key, item in value.items()
        }
    msg = f"Not a bencode value: {type(value).__name__}"
    raise TypeError(msg)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file path",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v: info, -vv: debug)",
)
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: int) -> None:
    """Btmeta - inspect bencoded BitTorrent metainfo files."""
    ctx.ensure_object(dict)
    try:
        config_manager = init_config(config)
    except BTMetaError as e:
        _fail(str(e))

    if verbose:
        observability = config_manager.config.observability
        observability.log_level = VERBOSITY_TO_LEVEL[min(verbose, 2)]
        setup_logging(observability)

    ctx.obj["config_manager"] = config_manager
    ctx.obj["verbosity"] = verbose


@cli.command()
@click.argument("torrent_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def info(ctx: click.Context, torrent_file: str) -> None:
    """Print tracker URL, length, info hash and piece hashes of TORRENT_FILE."""
    config_manager = _get_config_from_context(ctx)
    parser = TorrentParser(config_manager.config.codec)
    try:
        torrent = parser.parse(torrent_file)
    except BTMetaError as e:
        log_exception(logger, e, f"Failed to read {torrent_file}")
        _fail(str(e))

    click.echo(f"Tracker URL: {torrent.announce}")
    click.echo(f"Length: {torrent.length}")
    click.echo(f"Info Hash: {torrent.info_hash_hex}")
    click.echo(f"Piece Length: {torrent.piece_length}")
    click.echo("Piece Hashes:")
    for piece_hash in torrent.piece_hashes_hex:
        click.echo(piece_hash)


@cli.command()
@click.argument("torrent_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def pieces(ctx: click.Context, torrent_file: str) -> None:
    """Show a table of piece index and hash for TORRENT_FILE."""
    config_manager = _get_config_from_context(ctx)
    parser = TorrentParser(config_manager.config.codec)
    try:
        torrent = parser.parse(torrent_file)
    except BTMetaError as e:
        log_exception(logger, e, f"Failed to read {torrent_file}")
        _fail(str(e))

    table = Table(title=f"Pieces ({torrent.num_pieces} x {torrent.piece_length} bytes)")
    table.add_column("Index", justify="right", style="cyan")
    table.add_column("SHA-1", style="green")
    for index, piece_hash in enumerate(torrent.piece_hashes_hex):
        table.add_row(str(index), piece_hash)
    Console().print(table)


@cli.command("decode")
@click.argument("encoded")
@click.pass_context
def decode_command(ctx: click.Context, encoded: str) -> None:
    """Decode a bencoded literal and print it as JSON."""
    codec = _get_config_from_context(ctx).config.codec
    try:
        value = decode(
            encoded.encode("utf-8"),
            max_depth=codec.max_depth,
            strict=codec.strict,
        )
    except BTMetaError as e:
        _fail(str(e))

    click.echo(json.dumps(_to_json(value)))


def main() -> None:
    """Run the btmeta command group."""
    cli(obj={})


if __name__ == "__main__":
    main()
