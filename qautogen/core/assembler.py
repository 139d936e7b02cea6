# SPDX-License-Identifier: MIT
"""Assembly of the autogen build steps for one target.

The assembler turns the generator configurations, the classification and
the scanned manifests into an AssemblyPlan: the umbrella autogen step, one
rcc step per individually processed manifest, the dependency edges and the
files to register back into the target. Nothing is added to the build
graph here; the initializer applies the plan once the info files exist.

Every list in the plan is ordered deterministically (source order for
classified files, sorted for dependency sets) so that unchanged input
gives byte-identical info files.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from qautogen.core.config import BuildConfigs, ConfigValue, Directories, GenKind
from qautogen.core.graph import BuildStep
from qautogen.util.checksum import path_checksum

if TYPE_CHECKING:
    from qautogen.core.classifier import Classification, SourceEntry
    from qautogen.core.errors import AutogenError
    from qautogen.core.graph import BuildGraph
    from qautogen.core.manifest import ResourceManifest
    from qautogen.core.target import Target
    from qautogen.tools.toolchain import GeneratorConfig

logger = logging.getLogger(__name__)

PARALLEL_MAX = 64
EXEC_COMMAND = "qautogen-exec"
GLOBAL_AUTOGEN_TARGET = "autogen"
GLOBAL_AUTORCC_TARGET = "autorcc"


def parallel_hint(value: str) -> str:
    """Number of generator processes the execution stage may run at once.

    "" and "AUTO" mean the number of CPUs, an integer 1..PARALLEL_MAX is
    taken as is, anything else falls back to 1.
    """
    value = value.strip()
    if value in ("", "AUTO"):
        return str(os.cpu_count() or 1)
    try:
        count = int(value)
    except ValueError:
        count = 0
    if 1 <= count <= PARALLEL_MAX:
        return str(count)
    logger.warning(
        "AUTOGEN_PARALLEL value %r is not AUTO or an integer in 1..%d, using 1",
        value,
        PARALLEL_MAX,
    )
    return "1"


def config_expression(value: ConfigValue[str]) -> str:
    """The value itself when shared, else one $<$<CONFIG:name>:value> per config."""
    if value.collapsed:
        return value.default
    return "".join(
        f"$<$<CONFIG:{config}>:{item}>" for config, item in value.per_config().items()
    )


@dataclass
class AutogenTarget:
    """The umbrella autogen step description.

    Attributes:
        name: Step name ("<target>_autogen").
        global_target: The step is attached to the global autogen target.
        parallel: Parallelism hint per configuration.
        info_file: General info file.
        settings_files: Settings file per configuration ("" single-config).
        mocs_compilation: moc aggregate source per configuration.
        depend_files: Extra file dependencies (sorted).
        depend_targets: Upstream target names (sorted).
        headers, sources: Classified files needing moc or uic.
        headers_generated, sources_generated: Files produced by other build
            steps; scanned by the execution stage, not here.
        moc_skip, uic_skip: Files excluded from moc or uic (sorted).
        uic_files: .ui files.
        uic_file_options: Per .ui file options.
        manifests: Manifests folded into the umbrella step.
    """

    name: str
    global_target: bool
    parallel: ConfigValue[str]
    info_file: Path
    settings_files: dict[str, Path]
    mocs_compilation: dict[str, Path] = field(default_factory=dict)
    depend_files: list[Path] = field(default_factory=list)
    depend_targets: list[str] = field(default_factory=list)
    headers: list[SourceEntry] = field(default_factory=list)
    sources: list[SourceEntry] = field(default_factory=list)
    headers_generated: list[SourceEntry] = field(default_factory=list)
    sources_generated: list[SourceEntry] = field(default_factory=list)
    moc_skip: list[Path] = field(default_factory=list)
    uic_skip: list[Path] = field(default_factory=list)
    uic_files: list[Path] = field(default_factory=list)
    uic_file_options: list[tuple[Path, tuple[str, ...]]] = field(default_factory=list)
    manifests: list[ResourceManifest] = field(default_factory=list)


@dataclass
class AssemblyPlan:
    """Everything the initializer needs to emit files and mutate the graph."""

    target: str
    configs: BuildConfigs
    dirs: Directories
    generators: dict[GenKind, GeneratorConfig]
    autogen: AutogenTarget | None = None
    manifests: list[ResourceManifest] = field(default_factory=list)
    steps: list[BuildStep] = field(default_factory=list)
    edges: list[tuple[str, str]] = field(default_factory=list)
    generated_sources: list[tuple[Path, GenKind]] = field(default_factory=list)
    include_dirs: list[Path] = field(default_factory=list)
    failures: list[AutogenError] = field(default_factory=list)
    fingerprint: str = ""

    def enabled(self, kind: GenKind) -> bool:
        config = self.generators.get(kind)
        return config is not None and config.enabled

    def step(self, name: str) -> BuildStep | None:
        for step in self.steps:
            if step.name == name:
                return step
        return None


def _unique(items: Iterable[str]) -> list[str]:
    result: list[str] = []
    for item in items:
        if item not in result:
            result.append(item)
    return result


class TargetAssembler:
    """Builds the AssemblyPlan for one target.

    Example:
        assembler = TargetAssembler(graph, global_autogen_target=True)
        plan = assembler.assemble(target, configs, dirs, generators,
                                  classification, manifests)
    """

    def __init__(
        self,
        graph: BuildGraph,
        *,
        global_autogen_target: bool = False,
        global_autorcc_target: bool = False,
        exec_command: str = EXEC_COMMAND,
    ) -> None:
        self._graph = graph
        self._global_autogen = global_autogen_target
        self._global_autorcc = global_autorcc_target
        self._exec_command = exec_command

    def assemble(
        self,
        target: Target,
        configs: BuildConfigs,
        dirs: Directories,
        generators: Mapping[GenKind, GeneratorConfig],
        classification: Classification,
        manifests: list[ResourceManifest],
    ) -> AssemblyPlan:
        plan = AssemblyPlan(
            target=target.name,
            configs=configs,
            dirs=dirs,
            generators=dict(generators),
            manifests=list(manifests),
        )
        moc = plan.enabled(GenKind.MOC)
        uic = plan.enabled(GenKind.UIC)

        folded = [m for m in manifests if not m.individual]
        if moc or uic or folded:
            plan.autogen = self._umbrella(target, configs, dirs, plan, classification, folded)
            plan.steps.append(self._umbrella_step(target, configs, plan.autogen, plan))
            plan.edges.append((target.name, plan.autogen.name))
            if self._global_autogen:
                plan.edges.append((GLOBAL_AUTOGEN_TARGET, plan.autogen.name))
            if moc or uic:
                if configs.multi_config:
                    plan.include_dirs.append(dirs.build / "include_$<CONFIG>")
                else:
                    plan.include_dirs.append(dirs.include)

        for manifest in manifests:
            plan.generated_sources.append((manifest.rcc_file, GenKind.RCC))
            if not manifest.individual:
                continue
            step = self._rcc_step(target, manifest, plan)
            plan.steps.append(step)
            plan.edges.append((target.name, step.name))
            if self._global_autorcc:
                plan.edges.append((GLOBAL_AUTORCC_TARGET, step.name))

        logger.info(
            "%s: planned %d autogen step(s) for %s",
            target.name,
            len(plan.steps),
            ", ".join(k.upper for k in GenKind if plan.enabled(k)) or "nothing",
        )
        return plan

    def _umbrella(
        self,
        target: Target,
        configs: BuildConfigs,
        dirs: Directories,
        plan: AssemblyPlan,
        classification: Classification,
        folded: list[ResourceManifest],
    ) -> AutogenTarget:
        if configs.multi_config:
            settings_files = {
                c: dirs.info / f"AutogenUsed_{c}.txt" for c in configs
            }
        else:
            settings_files = {"": dirs.info / "AutogenUsed.txt"}

        autogen = AutogenTarget(
            name=f"{target.name}_autogen",
            global_target=self._global_autogen,
            parallel=ConfigValue.capture(
                configs, lambda c: parallel_hint(target.property_str("AUTOGEN_PARALLEL", c))
            ),
            info_file=dirs.info / "AutogenInfo.txt",
            settings_files=settings_files,
            headers=list(classification.headers),
            sources=list(classification.sources),
            headers_generated=list(classification.headers_generated),
            sources_generated=list(classification.sources_generated),
            moc_skip=sorted(set(classification.moc_skip)),
            uic_skip=sorted(set(classification.uic_skip)),
            uic_files=list(classification.uic_files),
            uic_file_options=list(classification.uic_file_options),
            manifests=list(folded),
        )

        if plan.enabled(GenKind.MOC):
            if configs.multi_config:
                autogen.mocs_compilation = {
                    c: dirs.build / f"mocs_compilation_{c}.cpp" for c in configs
                }
            else:
                autogen.mocs_compilation = {"": dirs.build / "mocs_compilation.cpp"}
            for path in autogen.mocs_compilation.values():
                plan.generated_sources.append((path, GenKind.MOC))

        # File dependencies
        depend_files: set[Path] = set()
        depend_targets: list[str] = []
        for entry in target.property_list("AUTOGEN_TARGET_DEPENDS"):
            if self._graph.has_target(entry):
                depend_targets.append(entry)
                continue
            path = Path(entry)
            if not path.is_absolute():
                path = target.source_dir / path
            depend_files.add(path)

        origin = target.property_bool("AUTOGEN_ORIGIN_DEPENDS", default=True)
        if origin:
            depend_targets.extend(dep.name for dep in target.dependencies)
            # Resource files of every manifest, so the umbrella step reruns
            # when packaged files change
            for manifest in plan.manifests:
                depend_files.add(manifest.path)
                depend_files.update(manifest.resources)
        for manifest in folded:
            depend_files.add(manifest.path)
            depend_files.update(manifest.resources)

        # Generator executables built in this build
        for kind in (GenKind.MOC, GenKind.UIC):
            config = plan.generators.get(kind)
            if config is not None and config.enabled and config.executable_target:
                depend_targets.append(config.executable_target)
        rcc = plan.generators.get(GenKind.RCC)
        if folded and rcc is not None and rcc.executable_target:
            depend_targets.append(rcc.executable_target)

        autogen.depend_files = sorted(depend_files)
        autogen.depend_targets = sorted(_unique(depend_targets))
        return autogen

    def _umbrella_step(
        self,
        target: Target,
        configs: BuildConfigs,
        autogen: AutogenTarget,
        plan: AssemblyPlan,
    ) -> BuildStep:
        inputs: list[Path] = [autogen.info_file]
        for entries in (
            autogen.headers,
            autogen.sources,
            autogen.headers_generated,
            autogen.sources_generated,
        ):
            inputs.extend(entry.path for entry in entries)
        inputs.extend(autogen.uic_files)
        if configs.multi_config:
            inputs.extend(autogen.settings_files.values())

        byproducts: list[Path] = []
        roots = (("SOURCE", target.source_dir), ("BINARY", target.binary_dir))
        for entry in autogen.headers + autogen.headers_generated:
            if "M" in entry.flags:
                checksum = path_checksum(entry.path, roots)
                byproducts.append(plan.dirs.build / checksum / f"moc_{entry.path.stem}.cpp")
        include_dirs = (
            list(plan.dirs.config_include.values())
            if configs.multi_config
            else [plan.dirs.include]
        )
        for ui_file in autogen.uic_files:
            for include in include_dirs:
                byproducts.append(include / f"ui_{ui_file.stem}.h")
        byproducts.extend(m.rcc_file for m in autogen.manifests)

        command: list[str] = [self._exec_command, "autogen", str(autogen.info_file)]
        if configs.multi_config:
            command.append("$<CONFIG>")

        enabled = [k.upper for k in (GenKind.MOC, GenKind.UIC) if plan.enabled(k)]
        if autogen.manifests:
            enabled.append(GenKind.RCC.upper)
        return BuildStep(
            name=autogen.name,
            origin=target.name,
            command=tuple(command),
            inputs=tuple(_unique_paths(inputs)),
            outputs=tuple(autogen.mocs_compilation.values()),
            byproducts=tuple(_unique_paths(byproducts)),
            depend_files=tuple(autogen.depend_files),
            depend_targets=tuple(autogen.depend_targets),
            comment=f"Automatic {' and '.join(enabled)} for target {target.name}",
            parallel=config_expression(autogen.parallel),
        )

    def _rcc_step(
        self,
        target: Target,
        manifest: ResourceManifest,
        plan: AssemblyPlan,
    ) -> BuildStep:
        inputs = [manifest.path, *manifest.info_files.values()]
        depend_targets: list[str] = []
        rcc = plan.generators.get(GenKind.RCC)
        if rcc is not None and rcc.executable_target:
            depend_targets.append(rcc.executable_target)

        if "" in manifest.info_files:
            info = str(manifest.info_files[""])
        else:
            info = str(plan.dirs.info / f"RCC{manifest.name}Info_$<CONFIG>.txt")
        command: list[str] = [self._exec_command, "rcc", info]
        if plan.configs.multi_config:
            command.append("$<CONFIG>")

        return BuildStep(
            name=f"{target.name}_arcc_{manifest.name}",
            origin=target.name,
            command=tuple(command),
            inputs=tuple(inputs),
            outputs=(manifest.rcc_file,),
            depend_files=tuple(sorted(set(manifest.resources))),
            depend_targets=tuple(depend_targets),
            comment=f"Automatic RCC for {manifest.path.name}",
        )


def _unique_paths(paths: Iterable[Path]) -> list[Path]:
    result: list[Path] = []
    seen: set[Path] = set()
    for path in paths:
        if path not in seen:
            seen.add(path)
            result.append(path)
    return result
