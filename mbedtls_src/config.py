"""Build configuration and the adapter that fills it from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

# Subdirectory of $OUT_DIR that holds build/ and install/
OUT_SUBDIR = "mbedtls-build"


def _default_source_dir() -> Path:
    from mbedtls_src import source_dir

    return source_dir()


@dataclass
class BuildConfig:
    """Settings for one build.

    Mutable until handed to a running build. Only ``from_env`` reads the
    process environment; everything downstream works from these fields.
    """

    out_dir: Path | None = None
    target: str | None = None
    host: str | None = None
    makeflags: str | None = None  # forwarded as MAKEFLAGS
    source_dir: Path = field(default_factory=_default_source_dir)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BuildConfig:
        """Read OUT_DIR, TARGET, HOST and CARGO_MAKEFLAGS.

        Empty values are treated as unset.
        """
        env = os.environ if environ is None else environ

        out_dir = env.get("OUT_DIR") or None
        return cls(
            out_dir=Path(out_dir) / OUT_SUBDIR if out_dir else None,
            target=env.get("TARGET") or None,
            host=env.get("HOST") or None,
            makeflags=env.get("CARGO_MAKEFLAGS") or None,
        )
