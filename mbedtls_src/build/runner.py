"""Run one external build command to completion."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path

from mbedtls_src.exceptions import SubprocessExitError, SubprocessLaunchError

logger = logging.getLogger(__name__)

# File descriptor 2 of this process; sys.stderr may be an in-memory stream
_STDERR_FD = 2


@dataclass
class Command:
    """A program invocation with its working directory and env overrides."""

    program: str
    args: list[str] = field(default_factory=list)
    cwd: Path | None = None
    env: dict[str, str] = field(default_factory=dict)

    def arg(self, value: str) -> Command:
        self.args.append(value)
        return self

    def env_set(self, key: str, value: str) -> Command:
        self.env[key] = value
        return self

    def current_dir(self, path: Path) -> Command:
        self.cwd = Path(path)
        return self

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def __str__(self) -> str:
        assignments = [f"{k}={shlex.quote(v)}" for k, v in self.env.items()]
        return " ".join(assignments + [shlex.join(self.argv)])


def run_command(command: Command, desc: str, *, stdout_to_stderr: bool = False) -> None:
    """Run ``command`` with inherited stdio; raise if it cannot start or fails.

    Args:
        command: Fully configured command.
        desc: Phase description for error messages, e.g. "building mbedtls".
        stdout_to_stderr: Send the command echo and the child's stdout to
            stderr, leaving stdout for the caller's own output.
    """
    echo = sys.stderr if stdout_to_stderr else sys.stdout
    print(f"running {command}", file=echo, flush=True)
    logger.debug("cwd=%s env overrides=%s", command.cwd, sorted(command.env))

    env = {**os.environ, **command.env}
    try:
        result = subprocess.run(
            command.argv,
            cwd=command.cwd,
            env=env,
            stdout=_STDERR_FD if stdout_to_stderr else None,
        )
    except OSError as e:
        raise SubprocessLaunchError(desc, command, e) from e

    if result.returncode != 0:
        raise SubprocessExitError(desc, command, result.returncode)
    logger.info("Finished %s", desc)
