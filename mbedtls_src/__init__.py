"""mbedtls-src: build the vendored mbed TLS sources for a dependent build."""

__version__ = "0.1.0"

from pathlib import Path


def source_dir() -> Path:
    """Location of the bundled mbed TLS source tree."""
    return Path(__file__).resolve().parent / "mbedtls"


def version() -> str:
    return __version__


from mbedtls_src.build.builder import Build
from mbedtls_src.config import BuildConfig
from mbedtls_src.exceptions import (
    ConfigurationError,
    FilesystemError,
    MbedtlsSrcError,
    SubprocessExitError,
    SubprocessLaunchError,
    ToolchainError,
)
from mbedtls_src.models.build import Artifacts, Compiler

__all__ = [
    "Artifacts",
    "Build",
    "BuildConfig",
    "Compiler",
    "ConfigurationError",
    "FilesystemError",
    "MbedtlsSrcError",
    "SubprocessExitError",
    "SubprocessLaunchError",
    "ToolchainError",
    "source_dir",
    "version",
]
