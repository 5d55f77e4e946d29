"""Shared pytest fixtures for mbedtls-src tests."""

import os
import stat
from pathlib import Path

import pytest

from mbedtls_src.config import BuildConfig
from mbedtls_src.models.build import Compiler


@pytest.fixture
def fake_source(tmp_path: Path) -> Path:
    """A tiny stand-in for the mbed TLS tree: two files plus .git metadata."""
    src = tmp_path / "mbedtls"
    (src / "include" / "mbedtls").mkdir(parents=True)
    (src / "Makefile").write_text("all:\n\t@true\n")
    (src / "include" / "mbedtls" / "version.h").write_text("#define MBEDTLS_VERSION 1\n")
    (src / ".git").mkdir()
    (src / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    return src


@pytest.fixture
def config(tmp_path: Path, fake_source: Path) -> BuildConfig:
    return BuildConfig(
        out_dir=tmp_path / "out",
        target="x86_64-unknown-linux-gnu",
        host="x86_64-unknown-linux-gnu",
        source_dir=fake_source,
    )


class RecordingRunner:
    """Stands in for run_command; records each command instead of running it."""

    def __init__(self) -> None:
        self.calls = []

    def __call__(self, command, desc):
        self.calls.append((command, desc))


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def gcc_finder():
    def find(target: str, host: str) -> Compiler:
        return Compiler(path="cc", args=("-O3", "-fPIC"))

    return find


FAKE_MAKE = """#!/bin/sh
if [ "$1" = install ]; then
    dest="${2#DESTDIR=}"
    mkdir -p "$dest/include/mbedtls" "$dest/lib"
    cp include/mbedtls/version.h "$dest/include/mbedtls/"
    for lib in mbedtls mbedx509 mbedcrypto; do : > "$dest/lib/lib$lib.a"; done
    echo "installed to $dest"
else
    [ -n "$CC" ] || exit 4
    [ -f Makefile ] || exit 5
    echo "CC $CC"
    exit ${FAKE_MAKE_STATUS:-0}
fi
"""


@pytest.fixture
def fake_make(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Put a shell-script ``make`` that installs empty libraries first on PATH."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    make = bin_dir / "make"
    make.write_text(FAKE_MAKE)
    make.chmod(make.stat().st_mode | stat.S_IXUSR)
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    monkeypatch.delenv("FAKE_MAKE_STATUS", raising=False)
    return make
