"""CLI for bytestat."""

from __future__ import annotations

import json
import logging
import sys

import click

from bytestat import __version__

logger = logging.getLogger(__name__)


@click.group(context_settings={"auto_envvar_prefix": "BYTESTAT"})
@click.version_option(__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log engine activity to stderr.")
def main(verbose: bool) -> None:
    """bytestat: measure the randomness of a byte stream."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


# ────────────────────────────────────────────────────────────
# Score: read to exhaustion, print the report
# ────────────────────────────────────────────────────────────


@main.command()
@click.argument("source", type=click.File("rb"), default="-")
@click.option("--separator", default="\n", show_default=repr("\n"), help="Separator between raw scores.")
@click.option("--chunk-size", default=65536, type=click.IntRange(min=1), help="Read size in bytes.")
@click.option("--format", "fmt", type=click.Choice(["text", "json"]), default="text",
              help="Output format.")
def score(source, separator: str, chunk_size: int, fmt: str) -> None:
    """Score the randomness of SOURCE (default: stdin).

    Examples:

        head -c 200M /dev/urandom | bytestat score

        bytestat score --format json firmware.bin
    """
    from bytestat.engine import ByteStat
    from bytestat.report import as_dict, render_text

    stats = ByteStat()
    failed = False
    try:
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                break
            stats.analyze_bytes(chunk)
    except OSError as e:
        click.echo(f"Error reading input after {stats.samples:,} bytes: {e}", err=True)
        failed = True

    logger.info("processed %d bytes", stats.samples)
    if fmt == "json":
        click.echo(json.dumps(as_dict(stats), indent=2))
    else:
        click.echo(render_text(stats, separator))
    if failed:
        sys.exit(1)


# ────────────────────────────────────────────────────────────
# Monitor: live dashboard
# ────────────────────────────────────────────────────────────


@main.command()
@click.argument("source", type=click.File("rb"), default="-")
@click.option("--refresh", default=0.5, type=float, help="Refresh rate in seconds.")
@click.option("--chunk-size", default=4096, type=click.IntRange(min=1), help="Read size in bytes.")
@click.option("--limit", default=0, type=click.IntRange(min=0), help="Stop after N bytes (0 = until EOF).")
def monitor(source, refresh: float, chunk_size: int, limit: int) -> None:
    """Live score dashboard for SOURCE while it is being read.

    Examples:

        bytestat monitor /dev/hwrng --limit 104857600

        my-rng | bytestat monitor --refresh 1
    """
    from bytestat.monitor import StreamMonitor

    mon = StreamMonitor(source, refresh_rate=refresh, chunk_size=chunk_size, limit=limit)
    mon.run()
    if mon.error is not None:
        click.echo(f"Error reading input: {mon.error}", err=True)
        sys.exit(1)
