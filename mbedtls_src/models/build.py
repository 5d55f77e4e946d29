"""Data models for compiler discovery and build results."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any

# Produced by the mbed TLS Makefile install target, in link order
MBEDTLS_LIBS: tuple[str, ...] = ("mbedtls", "mbedx509", "mbedcrypto")


@dataclass(frozen=True)
class Compiler:
    """C compiler chosen for a target, with the flags it would normally pass."""

    path: str  # e.g. "cc" or "/usr/bin/aarch64-linux-gnu-gcc"
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class Artifacts:
    """Where a finished build put its headers and static libraries."""

    include_dir: Path
    lib_dir: Path
    libs: tuple[str, ...] = MBEDTLS_LIBS

    def cargo_metadata(self) -> list[str]:
        """Link directives in the ``cargo:key=value`` line protocol."""
        lines = [f"cargo:rustc-link-search=native={self.lib_dir}"]
        lines.extend(f"cargo:rustc-link-lib=static={lib}" for lib in self.libs)
        lines.append(f"cargo:include={self.include_dir}")
        lines.append(f"cargo:lib={self.lib_dir}")
        return lines

    def print_cargo_metadata(self, file: IO[str] | None = None) -> None:
        out = file if file is not None else sys.stdout
        for line in self.cargo_metadata():
            print(line, file=out)

    def extension_kwargs(self) -> dict[str, list[str]]:
        """Keyword arguments for a ``setuptools.Extension`` linking these libraries."""
        return {
            "include_dirs": [str(self.include_dir)],
            "library_dirs": [str(self.lib_dir)],
            "libraries": list(self.libs),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "include_dir": str(self.include_dir),
            "lib_dir": str(self.lib_dir),
            "libs": list(self.libs),
        }
