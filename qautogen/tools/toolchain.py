# SPDX-License-Identifier: MIT
"""Qt toolchain and the generator configurator base class.

A QtToolchain knows the Qt version and how to locate the Qt code
generators (moc, uic, rcc). Each generator has a configurator that turns
a target's raw properties into a GeneratorConfig.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, Union, runtime_checkable

from qautogen.core.config import BuildConfigs, GenKind, QtVersion
from qautogen.core.errors import ConfigureError, ToolNotFoundError

if TYPE_CHECKING:
    from qautogen.configure.config import Configure
    from qautogen.core.target import Target
    from qautogen.toolchains.moc import MocSettings
    from qautogen.toolchains.rcc import RccSettings
    from qautogen.toolchains.uic import UicSettings

    GeneratorSettings = Union[MocSettings, UicSettings, RccSettings]

logger = logging.getLogger(__name__)

SUPPORTED_QT_MAJORS = (4, 5, 6)

_VERSION_RE = re.compile(r"(\d+)\.(\d+)(?:\.\d+)?")


@dataclass(frozen=True)
class ResolvedTool:
    """A resolved generator executable.

    Attributes:
        path: Invocable path.
        target: Name of the build target producing the executable, when the
            tool is built as part of this build.
    """

    path: Path
    target: str | None = None


@runtime_checkable
class ToolResolver(Protocol):
    """Protocol for toolchain tool lookup."""

    @property
    def version(self) -> QtVersion:
        ...

    def resolve(self, name: str) -> ResolvedTool:
        """Resolve a logical tool name.

        Raises:
            ToolNotFoundError: If the tool cannot be found.
        """
        ...


@dataclass
class QtToolchain:
    """The Qt toolchain a target builds against.

    Tools are looked up in this order: the explicit tools mapping, then
    (when a Configure context is given) '<name>-qt<major>' and '<name>' in
    the hint directories and on PATH.

    Example:
        toolchain = QtToolchain(QtVersion(5, 15), tools={"moc": "/opt/qt/bin/moc"})
        toolchain.resolve("moc").path

    Attributes:
        version: Qt version.
        tools: Explicit logical name -> executable path.
        built_tools: Build target name -> executable it produces, for
            generators built as part of the same build.
        hints: Directories searched before PATH.
        configure: Program lookup context.
        predefs_command: Compiler command printing predefined macros, used
            by moc (Qt >= 5.8).
    """

    version: QtVersion
    tools: dict[str, Path | str] = field(default_factory=dict)
    built_tools: dict[str, Path | str] = field(default_factory=dict)
    hints: list[Path | str] = field(default_factory=list)
    configure: Configure | None = None
    predefs_command: list[str] = field(default_factory=list)

    def resolve(self, name: str) -> ResolvedTool:
        if name in self.tools:
            return ResolvedTool(Path(self.tools[name]))

        if self.configure is not None:
            for candidate in (f"{name}-qt{self.version.major}", name):
                info = self.configure.find_program(candidate, hints=self.hints)
                if info is not None:
                    return ResolvedTool(info.path)

        raise ToolNotFoundError(name)

    def resolve_override(self, value: str) -> ResolvedTool:
        """Resolve an explicit executable given as a path or a build target."""
        if value in self.built_tools:
            return ResolvedTool(Path(self.built_tools[value]), target=value)
        path = Path(value)
        if path.is_file():
            return ResolvedTool(path)
        raise ToolNotFoundError(value)

    @classmethod
    def detect(
        cls,
        configure: Configure,
        *,
        hints: list[Path | str] | None = None,
    ) -> QtToolchain:
        """Detect the Qt version from the moc found on the system.

        Raises:
            ToolNotFoundError: If no moc can be found.
            ConfigureError: If the moc version cannot be determined.
        """
        for major in (6, 5, 4):
            info = configure.find_program(f"moc-qt{major}", hints=hints)
            if info is not None:
                break
        else:
            info = configure.find_program("moc", hints=hints)
        if info is None:
            raise ToolNotFoundError("moc")

        match = _VERSION_RE.search(info.version or "")
        if match is None:
            raise ConfigureError(
                f"cannot determine Qt version from {info.version!r}", str(info.path)
            )
        version = QtVersion(int(match.group(1)), int(match.group(2)))
        logger.info("Detected Qt %s from %s", version, info.path)
        return cls(version, hints=list(hints or []), configure=configure)


@dataclass(frozen=True)
class GeneratorConfig:
    """Resolved configuration of one generator for one target.

    Attributes:
        kind: Which generator.
        enabled: Whether the generator runs for the target. When False no
            classification or step creation happens for this kind.
        executable: Resolved executable.
        executable_target: Build target producing the executable, if any.
        settings: Kind-specific settings (MocSettings, UicSettings or
            RccSettings matching kind).
    """

    kind: GenKind
    enabled: bool = False
    executable: Path | None = None
    executable_target: str | None = None
    settings: GeneratorSettings | None = None

    @classmethod
    def disabled(cls, kind: GenKind) -> GeneratorConfig:
        return cls(kind)


class BaseConfigurator(ABC):
    """Abstract base class for generator configurators.

    Subclasses provide the generator kind and the kind-specific settings.
    """

    kind: GenKind

    def enabled_for(self, target: Target) -> bool:
        return target.property_bool(f"AUTO{self.kind.upper}")

    def configure(
        self,
        target: Target,
        configs: BuildConfigs,
        toolchain: ToolResolver,
    ) -> GeneratorConfig:
        """Produce the GeneratorConfig for a target.

        Raises:
            ToolNotFoundError: If the executable cannot be resolved.
            ConfigureError: If a property is invalid.
        """
        if not self.enabled_for(target):
            return GeneratorConfig.disabled(self.kind)

        tool = self._resolve_executable(target, toolchain)
        settings = self._configure_settings(target, configs, toolchain)
        logger.debug("%s: %s uses %s", target.name, self.kind.upper, tool.path)
        return GeneratorConfig(
            kind=self.kind,
            enabled=True,
            executable=tool.path,
            executable_target=tool.target,
            settings=settings,
        )

    def _resolve_executable(self, target: Target, toolchain: ToolResolver) -> ResolvedTool:
        """Explicit target override first, then the toolchain default."""
        override = target.property_str(f"AUTO{self.kind.upper}_EXECUTABLE")
        try:
            if override:
                resolve_override = getattr(toolchain, "resolve_override", None)
                if resolve_override is not None:
                    tool: ResolvedTool = resolve_override(override)
                    return tool
                if Path(override).is_file():
                    return ResolvedTool(Path(override))
                raise ToolNotFoundError(override)
            return toolchain.resolve(self.kind.value)
        except ToolNotFoundError as e:
            raise ToolNotFoundError(
                e.tool, target.name, generator=self.kind.upper
            ) from None

    @abstractmethod
    def _configure_settings(
        self,
        target: Target,
        configs: BuildConfigs,
        toolchain: ToolResolver,
    ) -> GeneratorSettings:
        """Compute the kind-specific settings.

        Raises:
            ConfigureError: If a property is invalid.
        """
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.kind.upper})"
