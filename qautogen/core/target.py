# SPDX-License-Identifier: MIT
"""Target abstraction consumed by the autogen initializer.

A Target is the compiled build target whose sources may need moc, uic
or rcc. It carries raw properties, optionally overridden per build
configuration, and the target-level dependencies of the build graph.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from qautogen.core.config import GenKind
from qautogen.core.source import SourceFile, property_bool, property_list


class Target:
    """A named build target with autogen-relevant properties.

    Example:
        app = Target("app", source_dir=src, binary_dir=bld)
        app.add_sources(["main.cpp", "window.h", "res.qrc"], base=src)
        app.properties["AUTOMOC"] = True
        app.config_properties["Debug"] = {"COMPILE_DEFINITIONS": ["DEBUG"]}

    Attributes:
        name: Target name.
        source_dir: Directory the target is defined in.
        binary_dir: Build directory of the target.
        sources: Source list, in declaration order.
        properties: Raw target properties.
        config_properties: Per-configuration property overrides.
        dependencies: Other targets this target depends on.
        include_dirs: Include directories added to the target (autogen adds
            its include directory here).
    """

    __slots__ = (
        "name",
        "source_dir",
        "binary_dir",
        "sources",
        "properties",
        "config_properties",
        "dependencies",
        "include_dirs",
    )

    def __init__(
        self,
        name: str,
        *,
        source_dir: Path | str,
        binary_dir: Path | str,
        properties: dict[str, Any] | None = None,
    ) -> None:
        self.name = name
        self.source_dir = Path(source_dir).absolute()
        self.binary_dir = Path(binary_dir).absolute()
        self.sources: list[SourceFile] = []
        self.properties: dict[str, Any] = dict(properties or {})
        self.config_properties: dict[str, dict[str, Any]] = {}
        self.dependencies: list[Target] = []
        self.include_dirs: list[Path] = []

    def link(self, *targets: Target) -> Target:
        """Add targets as dependencies (fluent API)."""
        for target in targets:
            if target not in self.dependencies:
                self.dependencies.append(target)
        return self

    def add_source(
        self,
        source: SourceFile | Path | str,
        properties: dict[str, Any] | None = None,
    ) -> SourceFile:
        """Add a source to this target.

        Relative paths are resolved against source_dir. Adding a path that
        is already listed returns the existing entry.
        """
        if isinstance(source, SourceFile):
            entry = source
        else:
            path = Path(source)
            if not path.is_absolute():
                path = self.source_dir / path
            entry = SourceFile(path, properties)
        existing = self.find_source(entry.path)
        if existing is not None:
            return existing
        self.sources.append(entry)
        return entry

    def add_sources(
        self,
        sources: list[SourceFile | Path | str],
        *,
        base: Path | str | None = None,
    ) -> Target:
        """Add multiple sources to this target (fluent API).

        Args:
            sources: Source files (SourceFiles, Paths, or string paths).
            base: Optional base directory for relative paths.
        """
        base_path = Path(base) if base else None
        for source in sources:
            if base_path and isinstance(source, (str, Path)):
                path = Path(source)
                if not path.is_absolute():
                    source = base_path / path
            self.add_source(source)
        return self

    def add_generated_source(self, path: Path, kind: GenKind) -> SourceFile:
        """Record a file produced by an autogen generator in the source list."""
        existing = self.find_source(path)
        if existing is not None:
            if existing.generated_by is None:
                existing.generated_by = kind
            return existing
        entry = SourceFile(path, generated_by=kind)
        self.sources.append(entry)
        return entry

    def find_source(self, path: Path | str) -> SourceFile | None:
        wanted = Path(path)
        for source in self.sources:
            if source.path == wanted:
                return source
        return None

    def get_property(self, name: str, config: str = "") -> Any:
        """Get a property, honouring the per-configuration override."""
        overrides = self.config_properties.get(config)
        if overrides is not None and name in overrides:
            return overrides[name]
        return self.properties.get(name)

    def property_bool(self, name: str, config: str = "", default: bool = False) -> bool:
        value = self.get_property(name, config)
        if value is None:
            return default
        return property_bool(value)

    def property_list(self, name: str, config: str = "") -> list[str]:
        return property_list(self.get_property(name, config))

    def property_str(self, name: str, config: str = "") -> str:
        value = self.get_property(name, config)
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return ";".join(property_list(value))
        return str(value)

    def raw_inputs(self) -> dict[str, Any]:
        """Raw inputs that feed settings generation, for fingerprinting."""
        return {
            "name": self.name,
            "source_dir": str(self.source_dir),
            "binary_dir": str(self.binary_dir),
            "properties": _jsonable(self.properties),
            "config_properties": _jsonable(self.config_properties),
            # Files registered by autogen itself are outputs, not inputs
            "sources": [
                {"path": str(s.path), "properties": _jsonable(s.properties)}
                for s in self.sources
                if s.generated_by is None
            ],
            "dependencies": [d.name for d in self.dependencies],
        }

    def __repr__(self) -> str:
        deps = ", ".join(d.name for d in self.dependencies)
        return f"Target({self.name!r}, deps=[{deps}])"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Target):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, Path):
        return str(value)
    return value
