"""Custom exceptions for mbedtls-src."""

from __future__ import annotations

from typing import Any


class MbedtlsSrcError(Exception):
    """Base exception for all mbedtls-src errors."""


class ConfigurationError(MbedtlsSrcError):
    """Raised when a required build setting (target, host, out dir) is missing."""


class FilesystemError(MbedtlsSrcError):
    """Raised when staging, cleanup or directory creation fails."""


class ToolchainError(MbedtlsSrcError):
    """Raised when the C compiler or SDK for a target cannot be determined."""


class SubprocessLaunchError(MbedtlsSrcError):
    """Raised when the build or install program could not be started."""

    def __init__(self, desc: str, command: Any, cause: OSError):
        self.desc = desc
        self.command = command
        super().__init__(f"Error {desc}:\n    Command: {command}\n    Failed to launch: {cause}")


class SubprocessExitError(MbedtlsSrcError):
    """Raised when the build or install program exits with a non-zero status."""

    def __init__(self, desc: str, command: Any, returncode: int):
        self.desc = desc
        self.command = command
        self.returncode = returncode
        super().__init__(
            f"Error {desc}:\n    Command: {command}\n    Exit status: {returncode}"
        )
