# SPDX-License-Identifier: MIT
"""Meta-object compiler (moc) configurator.

Properties read from the target:
    AUTOMOC: enables moc
    AUTOMOC_EXECUTABLE: explicit moc executable (path or build target)
    INCLUDE_DIRECTORIES: include path (may vary per configuration)
    COMPILE_DEFINITIONS: preprocessor defines (may vary per configuration)
    AUTOMOC_MOC_OPTIONS: extra moc options
    AUTOMOC_MACRO_NAMES: macros that make a file need moc
    AUTOMOC_DEPEND_FILTERS: (key, regex) pairs for extra dependencies
    AUTOMOC_RELAXED_MODE: Qt 4 style relaxed include detection
    AUTOMOC_COMPILER_PREDEFINES: pass compiler predefined macros to moc
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from qautogen.core.config import BuildConfigs, ConfigValue, GenKind
from qautogen.core.detect import DEFAULT_MACRO_NAMES
from qautogen.core.errors import ConfigureError
from qautogen.tools.toolchain import BaseConfigurator

if TYPE_CHECKING:
    from qautogen.core.target import Target
    from qautogen.tools.toolchain import ToolResolver


@dataclass(frozen=True)
class MocSettings:
    """moc specific settings.

    Attributes:
        includes: Absolute include directories per configuration.
        defines: Sorted, unique defines per configuration.
        options: Extra moc command line options.
        relaxed_mode: Qt 4 compatible relaxed mode.
        macro_names: Macros that make a file need moc.
        depend_filters: (key, regex) pairs.
        predefs_cmd: Command printing compiler predefines, empty if unused.
    """

    includes: ConfigValue[tuple[str, ...]]
    defines: ConfigValue[tuple[str, ...]]
    options: tuple[str, ...] = ()
    relaxed_mode: bool = False
    macro_names: tuple[str, ...] = DEFAULT_MACRO_NAMES
    depend_filters: tuple[tuple[str, str], ...] = ()
    predefs_cmd: tuple[str, ...] = ()


class MocConfigurator(BaseConfigurator):
    """Configurator for moc."""

    kind = GenKind.MOC

    def _configure_settings(
        self,
        target: Target,
        configs: BuildConfigs,
        toolchain: ToolResolver,
    ) -> MocSettings:
        def includes(config: str) -> tuple[str, ...]:
            result: list[str] = []
            for entry in target.property_list("INCLUDE_DIRECTORIES", config):
                path = Path(entry)
                if not path.is_absolute():
                    path = target.source_dir / path
                text = path.as_posix()
                if text not in result:
                    result.append(text)
            return tuple(result)

        def defines(config: str) -> tuple[str, ...]:
            return tuple(sorted(set(target.property_list("COMPILE_DEFINITIONS", config))))

        filters = target.property_list("AUTOMOC_DEPEND_FILTERS")
        if len(filters) % 2 != 0:
            raise ConfigureError(
                f"AUTOMOC_DEPEND_FILTERS list size {len(filters)} is not a multiple of 2",
                target.name,
                generator=self.kind.upper,
            )
        pairs = tuple(zip(filters[0::2], filters[1::2]))

        if target.get_property("AUTOMOC_MACRO_NAMES") is None:
            macro_names = DEFAULT_MACRO_NAMES
        else:
            macro_names = tuple(target.property_list("AUTOMOC_MACRO_NAMES"))

        predefs: tuple[str, ...] = ()
        if toolchain.version.at_least(5, 8) and target.property_bool(
            "AUTOMOC_COMPILER_PREDEFINES", default=True
        ):
            predefs = tuple(getattr(toolchain, "predefs_command", ()) or ())

        return MocSettings(
            includes=ConfigValue.capture(configs, includes),
            defines=ConfigValue.capture(configs, defines),
            options=tuple(target.property_list("AUTOMOC_MOC_OPTIONS")),
            relaxed_mode=target.property_bool("AUTOMOC_RELAXED_MODE"),
            macro_names=macro_names,
            depend_filters=pairs,
            predefs_cmd=predefs,
        )
