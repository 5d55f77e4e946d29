"""CLI entry point: mbedtls-src.

Subcommands:
    mbedtls-src build --target T --host H --out-dir P   # Build and print cargo metadata
    mbedtls-src source-dir                              # Path of the bundled sources
    mbedtls-src version                                 # Package version
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from mbedtls_src import source_dir, version
from mbedtls_src.build.builder import Build
from mbedtls_src.config import BuildConfig
from mbedtls_src.core.logging import setup_logging
from mbedtls_src.exceptions import MbedtlsSrcError


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """mbedtls-src: build the vendored mbed TLS for a dependent build."""
    setup_logging(verbose)


@main.command("build")
@click.option("--out-dir", type=click.Path(file_okay=False), default=None,
              help="Output root (default: $OUT_DIR/mbedtls-build)")
@click.option("--target", default=None, help="Target triple (default: $TARGET)")
@click.option("--host", default=None, help="Host triple (default: $HOST)")
@click.option("--source-dir", "src", type=click.Path(exists=True, file_okay=False),
              default=None, help="Source tree to build instead of the bundled one")
@click.option("--format", "fmt", type=click.Choice(["cargo", "json"]), default="cargo",
              help="How to report the installed artifacts")
def build(
    out_dir: str | None,
    target: str | None,
    host: str | None,
    src: str | None,
    fmt: str,
) -> None:
    """Compile and install mbed TLS, then report include/lib paths."""
    config = BuildConfig.from_env()
    if src:
        config.source_dir = Path(src)

    # JSON must be the only thing on stdout; make output and echoes go to stderr
    builder = Build(config, stdout_to_stderr=(fmt == "json"))
    if out_dir:
        builder.out_dir(out_dir)
    if target:
        builder.target(target)
    if host:
        builder.host(host)

    try:
        artifacts = builder.build()
    except MbedtlsSrcError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if fmt == "json":
        click.echo(json.dumps(artifacts.to_dict(), indent=2))
    else:
        for line in artifacts.cargo_metadata():
            click.echo(line)


@main.command("source-dir")
def show_source_dir() -> None:
    """Print the path of the bundled mbed TLS sources."""
    path = source_dir()
    click.echo(str(path))
    if not path.is_dir():
        click.echo(
            "Warning: directory is missing; run `git submodule update --init`", err=True
        )


@main.command("version")
def show_version() -> None:
    """Print the mbedtls-src version."""
    click.echo(version())
