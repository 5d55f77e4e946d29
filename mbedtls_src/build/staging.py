"""Copy the vendored source tree into a disposable build directory."""

from __future__ import annotations

import shutil
from pathlib import Path

# Version-control metadata, skipped at every depth
VCS_DIR = ".git"


def copy_tree(src: Path, dst: Path) -> None:
    """Recursively copy ``src`` into the existing directory ``dst``.

    Always a full copy. Files already at the destination are replaced.
    """
    for entry in Path(src).iterdir():
        if entry.name == VCS_DIR:
            continue

        target = Path(dst) / entry.name
        if entry.is_dir():
            target.mkdir(parents=True, exist_ok=True)
            copy_tree(entry, target)
        else:
            target.unlink(missing_ok=True)
            shutil.copyfile(entry, target)
