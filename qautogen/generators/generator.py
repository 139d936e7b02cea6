# SPDX-License-Identifier: MIT
"""Settings writer and emitter base for autogen info files.

Info files are line oriented and meant to be diffable:

    # General
    AM_MULTI_CONFIG "TRUE"
    AM_HEADERS "/src/a.h;/src/b.h"
    AM_MOC_INCLUDES_Debug "/src/include;/src/debug"
    AM_UIC_OPTIONS_OPTIONS "{-tr;i18n}<<<S>>>{--no-protection}"

Each record is a key followed by a JSON string literal. List elements are
joined with ';' (a ';' inside an element is written as '\\;'), per
configuration records append '_<CONFIG>' to the key and nested lists wrap
each group in braces and join the groups with LIST_SEPARATOR.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from qautogen.core.config import ConfigValue
from qautogen.core.errors import SettingsWriteError
from qautogen.util.files import write_if_changed

logger = logging.getLogger(__name__)

LIST_SEPARATOR = "<<<S>>>"


def list_join(items: Iterable[Any]) -> str:
    """Join items with ';', escaping embedded separators."""
    return ";".join(str(item).replace(";", "\\;") for item in items)


def split_list(value: str) -> list[str]:
    """Inverse of list_join()."""
    if not value:
        return []
    items: list[str] = []
    current: list[str] = []
    i = 0
    while i < len(value):
        c = value[i]
        if c == "\\" and i + 1 < len(value) and value[i + 1] == ";":
            current.append(";")
            i += 2
            continue
        if c == ";":
            items.append("".join(current))
            current = []
        else:
            current.append(c)
        i += 1
    items.append("".join(current))
    return items


def split_nested_lists(value: str) -> list[list[str]]:
    """Inverse of InfoWriter.write_nested_lists()."""
    if not value:
        return []
    groups: list[list[str]] = []
    for group in value.split(LIST_SEPARATOR):
        if group.startswith("{") and group.endswith("}"):
            group = group[1:-1]
        groups.append(split_list(group))
    return groups


def config_key(key: str, config: str) -> str:
    if not config:
        return key
    return f"{key}_{config}"


class InfoWriter:
    """Builds the text of one info file.

    Example:
        writer = InfoWriter()
        writer.write_comment("General")
        writer.write_bool("AM_MULTI_CONFIG", False)
        writer.write_strings("AM_HEADERS", headers)
        text = writer.getvalue()
    """

    def __init__(self) -> None:
        self._lines: list[str] = []

    def write_comment(self, text: str) -> None:
        self._lines.append(f"# {text}")

    def write(self, key: str, value: str | Path) -> None:
        self._lines.append(f"{key} {json.dumps(str(value), ensure_ascii=False)}")

    def write_uint(self, key: str, value: int) -> None:
        if value < 0:
            raise ValueError(f"{key}: unsigned value expected, got {value}")
        self.write(key, str(value))

    def write_bool(self, key: str, value: bool) -> None:
        self.write(key, "TRUE" if value else "FALSE")

    def write_strings(self, key: str, items: Iterable[Any]) -> None:
        self.write(key, list_join(items))

    def write_config(self, key: str, value: ConfigValue[Any]) -> None:
        """Write a scalar that may vary per configuration.

        A collapsed value is written once; otherwise the default
        configuration's value goes under key and every configuration
        gets its own key_<CONFIG> record.
        """
        self.write(key, value.default)
        if value.collapsed:
            return
        for config, item in value.per_config().items():
            self.write(config_key(key, config), item)

    def write_config_strings(self, key: str, value: ConfigValue[Any]) -> None:
        """Like write_config() for list values."""
        self.write_strings(key, value.default)
        if value.collapsed:
            return
        for config, items in value.per_config().items():
            self.write_strings(config_key(key, config), items)

    def write_config_map(self, key: str, values: dict[str, Any]) -> None:
        """Write one key_<CONFIG> record per entry of a config-keyed map."""
        for config, item in values.items():
            self.write(config_key(key, config), item)

    def write_nested_lists(self, key: str, lists: Sequence[Sequence[Any]]) -> None:
        groups = ["{" + list_join(items) + "}" for items in lists]
        self.write(key, LIST_SEPARATOR.join(groups))

    def getvalue(self) -> str:
        return "\n".join(self._lines) + "\n"


class InfoReader:
    """Reads info files written by InfoWriter.

    Unknown keys are kept in the result; callers pick what they know and
    ignore the rest.
    """

    @staticmethod
    def parse(text: str) -> dict[str, str]:
        records: dict[str, str] = {}
        for lineno, line in enumerate(text.splitlines(), 1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            key, sep, raw = line.partition(" ")
            if not sep:
                logger.debug("Ignoring malformed info line %d: %r", lineno, line)
                continue
            try:
                value = json.loads(raw)
            except json.JSONDecodeError:
                logger.debug("Ignoring malformed info line %d: %r", lineno, line)
                continue
            records[key] = str(value)
        return records

    @classmethod
    def read(cls, path: Path | str) -> dict[str, str]:
        with open(path, encoding="utf-8") as f:
            return cls.parse(f.read())


def is_stale(info_file: Path | str, fingerprint: str, key: str = "AM_INPUT_FINGERPRINT") -> bool:
    """True when info_file is missing or its stored fingerprint differs."""
    try:
        records = InfoReader.read(info_file)
    except OSError:
        return True
    return records.get(key) != fingerprint


class BaseEmitter:
    """Base class for info file emitters."""

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def _persist(self, path: Path, writer: InfoWriter) -> bool:
        """Write the writer's content to path atomically.

        Raises:
            SettingsWriteError: If the file cannot be written.
        """
        try:
            changed = write_if_changed(path, writer.getvalue())
        except OSError as e:
            raise SettingsWriteError(path, e.strerror or str(e)) from e
        if changed:
            logger.debug("Wrote %s", path)
        else:
            logger.debug("Unchanged %s", path)
        return changed

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"
