# SPDX-License-Identifier: MIT
"""Content-based detection of files that need moc or uic.

The classifier asks a NeedDetector whether a header or source requires
generation. ContentDetector is the default: it looks for the configured
moc macros and for includes of uic-generated headers.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from enum import Flag
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

DEFAULT_MACRO_NAMES = ("Q_OBJECT", "Q_GADGET", "Q_NAMESPACE", "Q_NAMESPACE_EXPORT")

_UIC_INCLUDE = re.compile(r'^[ \t]*#[ \t]*include[ \t]+["<](?:[^">]*/)?ui_[^">/]+\.h[">]', re.MULTILINE)
_MOC_INCLUDE = re.compile(
    r'^[ \t]*#[ \t]*include[ \t]+["<](?:[^">]*/)?(?:moc_[^">/]+\.cpp|[^">/]+\.moc)[">]',
    re.MULTILINE,
)


class GenerationNeed(Flag):
    """What kind of generation a file needs."""

    NONE = 0
    MOC = 1
    UIC = 2


@runtime_checkable
class NeedDetector(Protocol):
    """Protocol for the generation-need detector."""

    def needs_generation(self, path: Path) -> GenerationNeed:
        ...


class ContentDetector:
    """Detect generation needs by scanning file content.

    A file needs moc when it uses one of the macro names (as a whole word)
    or includes a moc output; it needs uic when it includes a ui_*.h
    header. Files that cannot be read need nothing yet; they are expected
    to be produced later and are handled at build time.
    """

    def __init__(self, macro_names: Iterable[str] = DEFAULT_MACRO_NAMES) -> None:
        names = [re.escape(n) for n in macro_names if n]
        self._macro_re = (
            re.compile(r"\b(?:" + "|".join(names) + r")\b") if names else None
        )

    def needs_generation(self, path: Path) -> GenerationNeed:
        try:
            text = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug("Cannot read %s for scanning: %s", path, e)
            return GenerationNeed.NONE

        need = GenerationNeed.NONE
        if (self._macro_re is not None and self._macro_re.search(text)) or (
            _MOC_INCLUDE.search(text)
        ):
            need |= GenerationNeed.MOC
        if _UIC_INCLUDE.search(text):
            need |= GenerationNeed.UIC
        return need
