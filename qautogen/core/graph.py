# SPDX-License-Identifier: MIT
"""Build graph interface used by the autogen initializer.

The initializer never builds rules itself. It describes each step as a
BuildStep and hands it to a BuildGraph, which is owned by the surrounding
build system. RecordingBuildGraph is an in-memory implementation used by
the CLI and the tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class BuildStep:
    """One generation step to add to the build graph.

    Attributes:
        name: Unique step name (e.g. "app_autogen").
        origin: Name of the target the step belongs to.
        command: Command line of the step.
        inputs: Files read by the step.
        outputs: Files the step produces.
        byproducts: Files the step may produce or update.
        depend_files: Additional file-level dependencies.
        depend_targets: Names of targets that must be built first.
        comment: Human readable description.
        parallel: Hint for how many generator invocations may run at once.
    """

    name: str
    origin: str
    command: tuple[str, ...] = ()
    inputs: tuple[Path, ...] = ()
    outputs: tuple[Path, ...] = ()
    byproducts: tuple[Path, ...] = ()
    depend_files: tuple[Path, ...] = ()
    depend_targets: tuple[str, ...] = ()
    comment: str = ""
    parallel: str = "1"


@runtime_checkable
class BuildGraph(Protocol):
    """Protocol for the build-graph mutator."""

    def has_target(self, name: str) -> bool:
        """True if a target of that name exists in the build."""
        ...

    def add_step(self, step: BuildStep) -> None:
        """Create a build step."""
        ...

    def add_dependency_edge(self, dependent: str, dependency: str) -> None:
        """Make dependent (a step or target name) depend on dependency."""
        ...


@dataclass
class RecordingBuildGraph:
    """In-memory build graph that records what it is asked to create.

    Attributes:
        targets: Names of targets known to exist in the build.
        steps: Steps added, keyed by name, in creation order.
        edges: Dependency edges as (dependent, dependency) pairs.
    """

    targets: set[str] = field(default_factory=set)
    steps: dict[str, BuildStep] = field(default_factory=dict)
    edges: list[tuple[str, str]] = field(default_factory=list)

    def has_target(self, name: str) -> bool:
        return name in self.targets or name in self.steps

    def add_step(self, step: BuildStep) -> None:
        if step.name in self.steps:
            raise ValueError(f"duplicate build step: {step.name}")
        self.steps[step.name] = step

    def add_dependency_edge(self, dependent: str, dependency: str) -> None:
        edge = (dependent, dependency)
        if edge not in self.edges:
            self.edges.append(edge)

    def dependencies_of(self, name: str) -> list[str]:
        return [dep for (dependent, dep) in self.edges if dependent == name]
