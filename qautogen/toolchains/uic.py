# SPDX-License-Identifier: MIT
"""User interface compiler (uic) configurator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from qautogen.core.config import BuildConfigs, ConfigValue, GenKind
from qautogen.tools.toolchain import BaseConfigurator

if TYPE_CHECKING:
    from qautogen.core.target import Target
    from qautogen.tools.toolchain import ToolResolver


@dataclass(frozen=True)
class UicSettings:
    """uic specific settings.

    Attributes:
        search_paths: Absolute directories searched for .ui files.
        options: Target-wide uic options per configuration.
    """

    search_paths: tuple[str, ...]
    options: ConfigValue[tuple[str, ...]]


class UicConfigurator(BaseConfigurator):
    """Configurator for uic.

    Reads AUTOUIC_SEARCH_PATHS (relative entries are taken from the
    target's source directory) and AUTOUIC_OPTIONS.
    """

    kind = GenKind.UIC

    def _configure_settings(
        self,
        target: Target,
        configs: BuildConfigs,
        toolchain: ToolResolver,
    ) -> UicSettings:
        search_paths: list[str] = []
        for entry in target.property_list("AUTOUIC_SEARCH_PATHS"):
            path = Path(entry)
            if not path.is_absolute():
                path = target.source_dir / path
            if path.as_posix() not in search_paths:
                search_paths.append(path.as_posix())

        return UicSettings(
            search_paths=tuple(search_paths),
            options=ConfigValue.capture(
                configs, lambda c: tuple(target.property_list("AUTOUIC_OPTIONS", c))
            ),
        )
