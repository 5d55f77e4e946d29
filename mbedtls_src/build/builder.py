"""Build orchestration: stage sources, derive toolchain settings, make + install.

Every build starts from empty build/ and install/ directories under the output
root. The staged copy of the sources is removed once install succeeds.
"""

from __future__ import annotations

import logging
import shlex
import shutil
from functools import partial
from pathlib import Path
from typing import Callable

from mbedtls_src.build.flags import cross_tools, make_program, split_sdk_path, translate_cflags
from mbedtls_src.build.runner import Command, run_command
from mbedtls_src.build.staging import copy_tree
from mbedtls_src.config import BuildConfig
from mbedtls_src.exceptions import ConfigurationError, FilesystemError, ToolchainError
from mbedtls_src.models.build import MBEDTLS_LIBS, Artifacts, Compiler
from mbedtls_src.toolchain import find_compiler

logger = logging.getLogger(__name__)

# Matched literally. The standard simulator triple is x86_64-apple-ios.
IOS_SIMULATOR_TARGET = "x64_64-apple-ios"

CompilerFinder = Callable[[str, str], Compiler]
Runner = Callable[[Command, str], None]


class Build:
    """
    Build the vendored mbed TLS into ``<out_dir>/install``:
    1. Remove stale build/ and install/
    2. Copy the sources into build/src
    3. Pick make/gmake for the host, CC/AR/RANLIB/CFLAGS for the target
    4. make, then make install DESTDIR=<install>
    5. Delete build/src and return Artifacts
    """

    def __init__(
        self,
        config: BuildConfig | None = None,
        *,
        compiler_finder: CompilerFinder | None = None,
        runner: Runner | None = None,
        stdout_to_stderr: bool = False,
    ) -> None:
        self.config = config if config is not None else BuildConfig.from_env()
        self._find_compiler = compiler_finder or find_compiler
        self._run = runner or partial(run_command, stdout_to_stderr=stdout_to_stderr)
        self._started = False

    def _check_mutable(self) -> None:
        if self._started:
            raise ConfigurationError("Build settings cannot change once build() has run")

    def out_dir(self, path: str | Path) -> Build:
        self._check_mutable()
        self.config.out_dir = Path(path)
        return self

    def target(self, target: str) -> Build:
        self._check_mutable()
        self.config.target = target
        return self

    def host(self, host: str) -> Build:
        self._check_mutable()
        self.config.host = host
        return self

    def make_command(self) -> Command:
        if not self.config.host:
            raise ConfigurationError("HOST not set")
        return Command(make_program(self.config.host))

    def _require(self) -> tuple[str, str, Path]:
        if not self.config.target:
            raise ConfigurationError("TARGET not set")
        if not self.config.host:
            raise ConfigurationError("HOST not set")
        if self.config.out_dir is None:
            raise ConfigurationError("OUT_DIR not set")
        source = Path(self.config.source_dir)
        if not source.is_dir():
            raise ConfigurationError(
                f"mbed TLS sources not found at {source}. "
                "Run `git submodule update --init` to fetch the bundled tree, "
                "or point --source-dir (BuildConfig.source_dir) at an mbed TLS checkout."
            )
        return self.config.target, self.config.host, Path(self.config.out_dir)

    def build(self) -> Artifacts:
        target, host, out_dir = self._require()
        self._started = True

        build_dir = out_dir / "build"
        install_dir = out_dir / "install"
        inner_dir = build_dir / "src"

        logger.info("Building mbedtls for %s (host %s) in %s", target, host, out_dir)
        self._stage(build_dir, install_dir, inner_dir)

        build = self.make_command()
        compiler = self._find_compiler(target, host)
        build.env_set("CC", compiler.path)

        for key, value in cross_tools(compiler.path, target).items():
            build.env_set(key, value)

        cflags, isysroot = translate_cflags(compiler.args, target)
        build.env_set("CFLAGS", " ".join(cflags))

        if target == IOS_SIMULATOR_TARGET and isysroot is not None:
            build.env_set(
                "CC", f"xcrun -sdk iphonesimulator cc -isysroot {shlex.quote(isysroot)}"
            )

        build.current_dir(inner_dir)

        if self.config.makeflags:
            build.env_set("MAKEFLAGS", self.config.makeflags)

        if isysroot is not None:
            try:
                cross_top, cross_sdk = split_sdk_path(isysroot)
            except ValueError as e:
                raise ToolchainError(str(e)) from e
            build.env_set("CROSS_TOP", cross_top)
            build.env_set("CROSS_SDK", cross_sdk)

        self._run(build, "building mbedtls")

        install = self.make_command()
        install.arg("install")
        install.current_dir(inner_dir)
        install.arg(f"DESTDIR={install_dir}")
        self._run(install, "installing mbedtls")

        try:
            shutil.rmtree(inner_dir)
        except OSError as e:
            raise FilesystemError(f"Failed to remove staged sources {inner_dir}: {e}") from e

        artifacts = Artifacts(
            include_dir=install_dir / "include",
            lib_dir=install_dir / "lib",
            libs=MBEDTLS_LIBS,
        )
        logger.info("Installed mbedtls to %s", install_dir)
        return artifacts

    def _stage(self, build_dir: Path, install_dir: Path, inner_dir: Path) -> None:
        """Reset build/ and install/, then copy the sources into build/src."""
        source = Path(self.config.source_dir)
        try:
            for stale in (build_dir, install_dir):
                if stale.exists():
                    logger.debug("Removing stale %s", stale)
                    shutil.rmtree(stale)
            inner_dir.mkdir(parents=True)
            copy_tree(source, inner_dir)
        except OSError as e:
            raise FilesystemError(f"Failed to stage {source} into {inner_dir}: {e}") from e
