"""Translate compiler settings into the variables the mbed TLS Makefile reads."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import PurePath

# Hosts whose default make is BSD make; GNU make is installed as gmake
GMAKE_HOSTS = {"x86_64-unknown-dragonfly", "x86_64-unknown-freebsd"}
_GMAKE_OSES = {"dragonfly", "freebsd"}

# Separates the Xcode platform Developer dir from the SDK name in an isysroot
SDK_MARKER = "/SDKs/"


def make_program(host: str) -> str:
    """Name of the GNU make binary on ``host``."""
    if host in GMAKE_HOSTS:
        return "gmake"
    parts = host.split("-")
    if len(parts) >= 3 and parts[2] in _GMAKE_OSES:
        return "gmake"
    return "make"


def translate_cflags(args: Iterable[str], target: str) -> tuple[list[str], str | None]:
    """Filter compiler arguments into CFLAGS.

    Returns the surviving flags and, for iOS targets, the ``-isysroot`` value
    that was pulled out of them.

    - musl targets: ``-static`` breaks the mbed TLS build, drop it.
    - iOS targets: ``-arch X`` (added by cargo-lipo) is dropped, and the
      ``-isysroot`` path is captured for CROSS_TOP/CROSS_SDK instead.
    """
    is_musl = "musl" in target
    is_ios = "apple-ios" in target

    cflags: list[str] = []
    isysroot: str | None = None
    skip_next = False
    want_isysroot = False
    for arg in args:
        if is_musl and arg == "-static":
            continue

        if is_ios:
            if arg == "-arch":
                skip_next = True
                continue
            if arg == "-isysroot":
                want_isysroot = True
                continue
            if want_isysroot:
                want_isysroot = False
                isysroot = arg
                continue

        if skip_next:
            skip_next = False
            continue

        cflags.append(arg)
    return cflags, isysroot


def cross_tools(compiler_path: str, target: str) -> dict[str, str]:
    """AR/RANLIB for a ``foo-gcc`` cross compiler: ``foo-ar`` and ``foo-ranlib``."""
    if "unknown-linux-musl" in target:
        return {}
    if not PurePath(compiler_path).name.endswith("-gcc"):
        return {}
    prefix = compiler_path[: -len("-gcc")]
    return {"AR": f"{prefix}-ar", "RANLIB": f"{prefix}-ranlib"}


def split_sdk_path(isysroot: str) -> tuple[str, str]:
    """Split an SDK path into (CROSS_TOP, CROSS_SDK) around ``/SDKs/``.

    >>> split_sdk_path("/Xcode/Platforms/iPhoneOS.platform/Developer/SDKs/iPhoneOS.sdk")
    ('/Xcode/Platforms/iPhoneOS.platform/Developer', 'iPhoneOS.sdk')
    """
    top, sep, sdk = isysroot.partition(SDK_MARKER)
    if not sep:
        raise ValueError(f"SDK path has no '{SDK_MARKER}' segment: {isysroot}")
    return top, sdk
