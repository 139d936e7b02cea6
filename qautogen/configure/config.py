# SPDX-License-Identifier: MIT
"""Qt tool lookup for qautogen.

Configure finds the Qt generators (moc, uic, rcc and their versioned
'-qt<major>' variants) in hint directories or on PATH and records each
hit, together with the version line the tool prints, in a JSON cache in
the build directory. A cached hit is reused only while it was found with
the same hints and the executable is still there.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class ProgramInfo:
    """A located Qt tool.

    Attributes:
        path: Path to the executable.
        version: First line the tool printed for its version flag, if any.
    """

    path: Path
    version: str | None = None


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


class Configure:
    """Qt tool lookup with a persistent cache.

    Example:
        config = Configure(build_dir=Path("build"))

        moc = config.find_program("moc", hints=["/opt/Qt/5.15.2/gcc_64/bin"])
        if moc:
            print(f"Found moc {moc.version} at {moc.path}")

        config.save()

    Attributes:
        build_dir: Directory holding the cache file.
    """

    def __init__(
        self,
        *,
        build_dir: Path | str = "build",
        cache_file: str = "qautogen_config.json",
    ) -> None:
        self.build_dir = Path(build_dir)
        self._cache_file = cache_file
        self._cache: dict[str, Any] = {}

        self._load_cache()

    def _cache_path(self) -> Path:
        return self.build_dir / self._cache_file

    def _load_cache(self) -> None:
        cache_path = self._cache_path()
        if cache_path.exists():
            try:
                with open(cache_path) as f:
                    self._cache = json.load(f)
            except (json.JSONDecodeError, OSError):
                logger.debug("Ignoring unreadable cache %s", cache_path)
                self._cache = {}

    def save(self, path: Path | None = None) -> None:
        """Write the tool cache.

        Args:
            path: Optional path override for the cache file.
        """
        cache_path = path or self._cache_path()
        cache_path.parent.mkdir(parents=True, exist_ok=True)

        with open(cache_path, "w") as f:
            json.dump(self._cache, f, indent=2, sort_keys=True)
            f.write("\n")

    def find_program(
        self,
        name: str,
        *,
        hints: list[Path | str] | None = None,
        version_flag: str = "--version",
    ) -> ProgramInfo | None:
        """Locate a Qt tool.

        Each hint is either the executable itself or a directory
        containing name. PATH is searched after the hints.

        Args:
            name: Tool name (e.g. 'moc', 'rcc-qt5').
            hints: Executables or directories searched before PATH.
            version_flag: Flag making the tool print its version.

        Returns:
            ProgramInfo if found, None otherwise.
        """
        hint_keys = [str(h) for h in hints or []]
        cache_key = f"program:{name}"
        cached = self._cache.get(cache_key)
        if cached and cached.get("hints") == hint_keys:
            path = Path(cached["path"])
            if _is_executable(path):
                return ProgramInfo(path=path, version=cached.get("version"))

        found_path = self._search_hints(name, hints or [])
        if found_path is None:
            found_path = self._which(name)
        if found_path is None:
            logger.debug("%s not found", name)
            return None

        version = self._get_program_version(found_path, version_flag)
        self._cache[cache_key] = {
            "path": str(found_path),
            "version": version,
            "hints": hint_keys,
        }
        logger.debug("Found %s at %s (%s)", name, found_path, version)
        return ProgramInfo(path=found_path, version=version)

    def _search_hints(self, name: str, hints: list[Path | str]) -> Path | None:
        for hint in hints:
            hint_path = Path(hint)
            if _is_executable(hint_path):
                return hint_path
            candidate = hint_path / name
            if sys.platform == "win32" and not candidate.suffix:
                candidate = candidate.with_suffix(".exe")
            if _is_executable(candidate):
                return candidate
        return None

    def _which(self, name: str) -> Path | None:
        result = shutil.which(name)
        if result:
            return Path(result)
        return None

    def _get_program_version(self, path: Path, version_flag: str) -> str | None:
        """First non-empty output line of '<path> <version_flag>'."""
        try:
            result = subprocess.run(
                [str(path), version_flag],
                capture_output=True,
                text=True,
                timeout=5,
            )
        except (subprocess.TimeoutExpired, OSError):
            return None
        if result.returncode != 0:
            return None
        # moc/uic/rcc print their version on stdout, Qt 4 tools on stderr
        for line in (result.stdout + "\n" + result.stderr).splitlines():
            line = line.strip()
            if line:
                return line
        return None

    def __repr__(self) -> str:
        return f"Configure(build_dir={self.build_dir})"
