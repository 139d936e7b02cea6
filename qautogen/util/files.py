# SPDX-License-Identifier: MIT
"""File helpers for writing generated artifacts.

Artifacts are written to a temporary file in the destination directory
and moved into place, so readers never see a partially written file.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def write_atomic(dest: Path | str, content: str) -> None:
    """Write content to dest via a temporary file and os.replace()."""
    dest_path = Path(dest)
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{dest_path.name}.", suffix=".tmp", dir=dest_path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        os.replace(tmp_name, dest_path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def write_if_changed(dest: Path | str, content: str) -> bool:
    """Write content unless dest already holds exactly that content.

    Returns:
        True if the file was (re)written.
    """
    dest_path = Path(dest)
    try:
        if dest_path.read_text(encoding="utf-8") == content:
            return False
    except (FileNotFoundError, IsADirectoryError, UnicodeDecodeError):
        pass
    write_atomic(dest_path, content)
    return True
