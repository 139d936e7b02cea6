# SPDX-License-Identifier: MIT
"""Checksums used to name generated files and detect stale settings."""

from __future__ import annotations

import base64
import hashlib
import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

CHECKSUM_LENGTH = 10


def path_checksum(
    path: Path | str,
    roots: Iterable[tuple[str, Path]] = (),
    *,
    with_name: bool = False,
) -> str:
    """Checksum of the directory containing path.

    When the directory lies below one of the named roots (for example
    ("SOURCE", source_dir)), the checksum is taken over the root name and
    the relative path, so it does not change when the whole tree moves.
    With with_name the file name is included, which separates files of
    one directory whose names differ only in case or extension.

    Returns:
        A CHECKSUM_LENGTH character base32 string.
    """
    parent = Path(path).parent
    key = parent.as_posix()
    for name, root in roots:
        try:
            rel = parent.relative_to(root)
        except ValueError:
            continue
        key = f"{name}:{rel.as_posix()}"
        break
    if with_name:
        key = f"{key}/{Path(path).name}"
    digest = hashlib.sha256(key.encode("utf-8")).digest()
    return base64.b32encode(digest).decode("ascii")[:CHECKSUM_LENGTH]


def input_fingerprint(raw_inputs: dict[str, Any]) -> str:
    """Reproducible hash over the raw inputs of settings generation."""
    canonical = json.dumps(raw_inputs, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
