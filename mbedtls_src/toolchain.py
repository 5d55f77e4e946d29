"""C compiler discovery for a target/host pair.

Resolves the compiler the same way cargo build scripts do: target-specific
environment variables first, then TARGET_/HOST_ variables, then the generic
ones, falling back to a per-target default. The flag list starts from the
defaults a static, position-independent library build wants and ends with any
user-supplied CFLAGS.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Mapping

from mbedtls_src.exceptions import ToolchainError
from mbedtls_src.models.build import Compiler

logger = logging.getLogger(__name__)

# Rust-style triple -> GNU cross toolchain prefix
_CROSS_PREFIXES: dict[str, str] = {
    "aarch64-unknown-linux-gnu": "aarch64-linux-gnu",
    "aarch64-unknown-linux-musl": "aarch64-linux-musl",
    "arm-unknown-linux-gnueabi": "arm-linux-gnueabi",
    "arm-unknown-linux-gnueabihf": "arm-linux-gnueabihf",
    "armv7-unknown-linux-gnueabihf": "arm-linux-gnueabihf",
    "i586-unknown-linux-gnu": "i686-linux-gnu",
    "i686-unknown-linux-gnu": "i686-linux-gnu",
    "mips-unknown-linux-gnu": "mips-linux-gnu",
    "mipsel-unknown-linux-gnu": "mipsel-linux-gnu",
    "powerpc-unknown-linux-gnu": "powerpc-linux-gnu",
    "powerpc64le-unknown-linux-gnu": "powerpc64le-linux-gnu",
    "riscv64gc-unknown-linux-gnu": "riscv64-linux-gnu",
    "s390x-unknown-linux-gnu": "s390x-linux-gnu",
    "x86_64-pc-windows-gnu": "x86_64-w64-mingw32",
    "x86_64-unknown-linux-gnu": "x86_64-linux-gnu",
    "x86_64-unknown-linux-musl": "x86_64-linux-musl",
}

_DEFAULT_ARGS: tuple[str, ...] = ("-O3", "-ffunction-sections", "-fdata-sections")


def _lookup(env: Mapping[str, str], var: str, target: str, host: str) -> list[str]:
    """Values of VAR_<target>, VAR_<target_underscored>, TARGET_/HOST_VAR, VAR."""
    kind = "HOST" if target == host else "TARGET"
    names = [
        f"{var}_{target}",
        f"{var}_{target.replace('-', '_')}",
        f"{kind}_{var}",
        var,
    ]
    return [env[name] for name in names if env.get(name)]


def _default_compiler(target: str, host: str) -> str:
    if "apple" in target:
        return "clang"
    if target == host:
        return "musl-gcc" if "musl" in target else "cc"
    prefix = _CROSS_PREFIXES.get(target)
    if prefix:
        return f"{prefix}-gcc"
    return "cc"


def _ios_arch(target: str) -> str:
    arch = target.split("-", 1)[0]
    return {"aarch64": "arm64", "x86_64": "x86_64", "i386": "i386"}.get(arch, arch)


def _ios_sdk_path(target: str) -> str:
    sdk = "iphonesimulator" if target.startswith(("x86_64", "i386")) or "-sim" in target else "iphoneos"
    cmd = ["xcrun", "--show-sdk-path", "--sdk", sdk]
    logger.debug("Locating iOS SDK: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise ToolchainError(f"Failed to locate the {sdk} SDK with xcrun: {e}") from e
    return result.stdout.strip()


def _platform_args(target: str) -> list[str]:
    args = list(_DEFAULT_ARGS)
    if "windows" not in target:
        args.append("-fPIC")
    if "linux" in target:
        if target.startswith("x86_64"):
            args.append("-m64")
        elif target.startswith(("i586", "i686")):
            args.append("-m32")
    if "musl" in target:
        args.append("-static")
    if "apple-ios" in target:
        args.extend(["-arch", _ios_arch(target), "-isysroot", _ios_sdk_path(target)])
    return args


def find_compiler(
    target: str,
    host: str,
    environ: Mapping[str, str] | None = None,
) -> Compiler:
    """Return the C compiler and its default arguments for ``target``."""
    env = os.environ if environ is None else environ

    configured = _lookup(env, "CC", target, host)
    path = configured[0].strip() if configured else _default_compiler(target, host)

    args = _platform_args(target)
    for flags in _lookup(env, "CFLAGS", target, host):
        args.extend(shlex.split(flags))

    logger.debug("Compiler for %s (host %s): %s %s", target, host, path, args)
    return Compiler(path=path, args=tuple(args))
