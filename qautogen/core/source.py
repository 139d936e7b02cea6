# SPDX-License-Identifier: MIT
"""Source file entries of a target's source list.

A SourceFile is one entry in the target's source list together with the
per-file properties (SKIP_AUTOMOC, GENERATED, AUTOUIC_OPTIONS, ...) that
steer autogen.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from qautogen.core.config import GenKind

HEADER_EXTENSIONS = frozenset(
    {"h", "hh", "h++", "hm", "hpp", "hxx", "in", "txx"}
)
SOURCE_EXTENSIONS = frozenset(
    {"c", "C", "c++", "cc", "cpp", "cxx", "m", "M", "mm"}
)
UI_EXTENSION = "ui"
QRC_EXTENSION = "qrc"


def property_bool(value: Any) -> bool:
    """Interpret a property value the way build properties are spelled."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().upper()
    if text in ("", "0", "OFF", "NO", "FALSE", "N", "IGNORE", "NOTFOUND"):
        return False
    if text.endswith("-NOTFOUND"):
        return False
    return True


def property_list(value: Any) -> list[str]:
    """Interpret a property value as a list of strings.

    Strings are split on ';', lists are taken element-wise.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        result: list[str] = []
        for item in value:
            result.extend(property_list(item))
        return result
    if isinstance(value, bool):
        return ["ON" if value else "OFF"]
    text = str(value)
    if not text:
        return []
    return [part for part in text.split(";") if part]


class SourceFile:
    """A file in the target's source list.

    Note that the file may not exist at initialization time, for example
    when it is produced by another build step (GENERATED).

    Attributes:
        path: Absolute path of the file.
        properties: Raw per-file properties.
        generated_by: The autogen generator that produces this file, if any.
    """

    __slots__ = ("path", "properties", "generated_by")

    def __init__(
        self,
        path: Path | str,
        properties: dict[str, Any] | None = None,
        *,
        generated_by: GenKind | None = None,
    ) -> None:
        self.path = Path(path)
        self.properties: dict[str, Any] = dict(properties or {})
        self.generated_by = generated_by

    @property
    def extension(self) -> str:
        """Extension without the leading dot, case preserved."""
        return self.path.suffix[1:]

    @property
    def is_header(self) -> bool:
        return self.extension in HEADER_EXTENSIONS

    @property
    def is_source(self) -> bool:
        return self.extension in SOURCE_EXTENSIONS

    @property
    def is_ui(self) -> bool:
        return self.extension.lower() == UI_EXTENSION

    @property
    def is_qrc(self) -> bool:
        return self.extension.lower() == QRC_EXTENSION

    @property
    def generated(self) -> bool:
        """True when another build step (or autogen itself) produces the file."""
        return self.generated_by is not None or property_bool(
            self.properties.get("GENERATED")
        )

    def get_property(self, name: str, default: Any = None) -> Any:
        return self.properties.get(name, default)

    def flag(self, name: str) -> bool:
        return property_bool(self.properties.get(name))

    def skips(self, kind: GenKind) -> bool:
        """True when SKIP_AUTOGEN or SKIP_AUTO<KIND> is set."""
        return self.flag("SKIP_AUTOGEN") or self.flag(f"SKIP_AUTO{kind.upper}")

    def __repr__(self) -> str:
        return f"SourceFile({str(self.path)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourceFile):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)
