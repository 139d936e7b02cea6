# SPDX-License-Identifier: MIT
"""Resource compiler (rcc) configurator."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from qautogen.core.config import BuildConfigs, ConfigValue, GenKind, QtVersion
from qautogen.tools.toolchain import BaseConfigurator

if TYPE_CHECKING:
    from qautogen.core.target import Target
    from qautogen.tools.toolchain import ToolResolver

# rcc options that take a value
VALUE_OPTIONS = frozenset({"name", "root", "compress", "threshold"})


@dataclass(frozen=True)
class RccSettings:
    """rcc specific settings.

    Attributes:
        list_options: Options making rcc list a manifest's inputs.
        options: Target-wide rcc options per configuration.
    """

    list_options: tuple[str, ...]
    options: ConfigValue[tuple[str, ...]]


def list_options_for(version: QtVersion) -> tuple[str, ...]:
    """rcc option that lists the files of a manifest, by Qt version."""
    if version.major < 5:
        return ()
    if version.major == 5 and version.minor < 2:
        return ("-list",)
    return ("--list",)


def _option_name(option: str, qt_major: int) -> str | None:
    if qt_major >= 5 and option.startswith("--"):
        return option[2:]
    if option.startswith("-"):
        return option[1:]
    return None


def merge_rcc_options(
    base: Iterable[str], extra: Iterable[str], qt_major: int
) -> list[str]:
    """Merge extra rcc options into base.

    Valued options (-name, -root, -compress, -threshold) already present
    get their value replaced, other options already present are not
    repeated and new options are appended.

    Example:
        merge_rcc_options(["-compress", "9"], ["-compress", "1", "-binary"], 5)
        # ["-compress", "1", "-binary"]
    """
    result = list(base)
    items = list(extra)
    i = 0
    while i < len(items):
        option = items[i]
        name = _option_name(option, qt_major)
        if name in VALUE_OPTIONS and i + 1 < len(items):
            value = items[i + 1]
            index = _find_option(result, name, qt_major)
            if index is not None and index + 1 < len(result):
                result[index + 1] = value
            else:
                result.extend((option, value))
            i += 2
            continue
        if option not in result:
            result.append(option)
        i += 1
    return result


def _find_option(options: list[str], name: str, qt_major: int) -> int | None:
    for index, option in enumerate(options):
        if _option_name(option, qt_major) == name:
            return index
    return None


class RccConfigurator(BaseConfigurator):
    """Configurator for rcc.

    Reads AUTORCC_OPTIONS, which may vary per configuration.
    """

    kind = GenKind.RCC

    def _configure_settings(
        self,
        target: Target,
        configs: BuildConfigs,
        toolchain: ToolResolver,
    ) -> RccSettings:
        return RccSettings(
            list_options=list_options_for(toolchain.version),
            options=ConfigValue.capture(
                configs, lambda c: tuple(target.property_list("AUTORCC_OPTIONS", c))
            ),
        )
