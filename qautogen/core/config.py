# SPDX-License-Identifier: MIT
"""Build configuration values shared by all autogen components.

Values that may differ between build configurations (Debug, Release, ...)
are carried as ConfigValue. Single-configuration builds use the
configuration name "".
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Generic, TypeVar

T = TypeVar("T")


class GenKind(Enum):
    """Generator kinds handled by autogen."""

    MOC = "moc"
    UIC = "uic"
    RCC = "rcc"

    @property
    def upper(self) -> str:
        return self.value.upper()

    @classmethod
    def from_name(cls, name: str) -> GenKind:
        """Look up a kind by (case-insensitive) name, e.g. 'MOC'."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f"unknown generator: {name!r}") from None


@dataclass(frozen=True)
class QtVersion:
    """Qt version declared by the toolchain."""

    major: int
    minor: int = 0

    def at_least(self, major: int, minor: int = 0) -> bool:
        return (self.major, self.minor) >= (major, minor)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


class BuildConfigs:
    """The build's declared configuration list.

    An empty list (or [""]) is a single-configuration build. With more
    than one configuration the first one is the default.

    Example:
        configs = BuildConfigs(["Debug", "Release"])
        configs.multi_config  # True
        configs.default       # "Debug"
    """

    def __init__(self, configs: Iterable[str] | None = None) -> None:
        names: list[str] = []
        for name in configs or []:
            if name not in names:
                names.append(name)
        if not names:
            names = [""]
        self._names = names

    @property
    def names(self) -> list[str]:
        return list(self._names)

    @property
    def default(self) -> str:
        return self._names[0]

    @property
    def multi_config(self) -> bool:
        return len(self._names) > 1 or self._names[0] != ""

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"BuildConfigs({self._names!r})"


class ConfigValue(Generic[T]):
    """A value captured once per build configuration.

    When every configuration yields an equal value the ConfigValue is
    "collapsed" and only the shared value is emitted.
    """

    __slots__ = ("_values", "_default")

    def __init__(self, values: dict[str, T], default: str) -> None:
        if default not in values:
            raise ValueError(f"default configuration {default!r} has no value")
        self._values = dict(values)
        self._default = default

    @classmethod
    def shared(cls, value: T, configs: BuildConfigs) -> ConfigValue[T]:
        return cls({c: value for c in configs}, configs.default)

    @classmethod
    def capture(
        cls, configs: BuildConfigs, getter: Callable[[str], T]
    ) -> ConfigValue[T]:
        """Evaluate getter once per configuration."""
        return cls({c: getter(c) for c in configs}, configs.default)

    @property
    def default(self) -> T:
        return self._values[self._default]

    @property
    def collapsed(self) -> bool:
        first = self.default
        return all(v == first for v in self._values.values())

    def get(self, config: str) -> T:
        return self._values.get(config, self.default)

    def per_config(self) -> dict[str, T]:
        return dict(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigValue):
            return NotImplemented
        return self._values == other._values and self._default == other._default

    def __repr__(self) -> str:
        if self.collapsed:
            return f"ConfigValue({self.default!r})"
        return f"ConfigValue({self._values!r})"


@dataclass(frozen=True)
class Directories:
    """Directories derived for one target's autogen run.

    Attributes:
        info: Directory holding the info and settings files.
        build: Directory receiving generated sources.
        work: Working directory of the execution stage.
        include: Include directory for generated headers.
        config_include: Per-configuration include directories (multi-config).
    """

    info: Path
    build: Path
    work: Path
    include: Path
    config_include: dict[str, Path] = field(default_factory=dict)

    @classmethod
    def for_target(
        cls,
        name: str,
        binary_dir: Path,
        configs: BuildConfigs,
        build_dir: Path | None = None,
    ) -> Directories:
        build = build_dir if build_dir is not None else binary_dir / f"{name}_autogen"
        config_include: dict[str, Path] = {}
        if configs.multi_config:
            for config in configs:
                config_include[config] = build / f"include_{config}"
        return cls(
            info=binary_dir / f"{name}_autogen.dir",
            build=build,
            work=binary_dir,
            include=build / "include",
            config_include=config_include,
        )

    def include_for(self, config: str) -> Path:
        return self.config_include.get(config, self.include)
