# SPDX-License-Identifier: MIT
"""Autogen initialization for one target.

The initializer runs in two phases:

init_custom_targets()
    configure the generators, classify the sources, scan the resource
    manifests and assemble the steps. The build graph is not touched.

setup_custom_targets(plan)
    write the info files, then add the steps and edges to the build graph
    and register the generated sources on the target.

A failing generator (tool not found, invalid property) or manifest (parse
error) is dropped and reported in InitResult.failures; the others
proceed. Errors that make the whole target unusable raise
InitializationError before the build graph is modified.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from qautogen.core.assembler import AssemblyPlan, TargetAssembler
from qautogen.core.classifier import DualNeedPolicy, SourceClassifier
from qautogen.core.config import BuildConfigs, Directories, GenKind
from qautogen.core.detect import ContentDetector
from qautogen.core.errors import (
    AutogenError,
    ClassificationConflictError,
    ConfigureError,
    InitializationError,
    ParseError,
    SettingsWriteError,
    ToolNotFoundError,
)
from qautogen.core.manifest import ResourceManifest, ResourceScanner, prepare_builders
from qautogen.generators.autogen_info import AutogenInfoEmitter
from qautogen.generators.rcc_info import RccInfoEmitter
from qautogen.tools.toolchain import SUPPORTED_QT_MAJORS, GeneratorConfig
from qautogen.toolchains.moc import MocConfigurator
from qautogen.toolchains.rcc import RccConfigurator
from qautogen.toolchains.uic import UicConfigurator
from qautogen.util.checksum import input_fingerprint

if TYPE_CHECKING:
    from qautogen.core.detect import NeedDetector
    from qautogen.core.graph import BuildGraph
    from qautogen.core.source import SourceFile
    from qautogen.core.target import Target
    from qautogen.toolchains.rcc import RccSettings
    from qautogen.tools.toolchain import BaseConfigurator, ToolResolver

logger = logging.getLogger(__name__)

CONFIGURATORS: tuple[type[BaseConfigurator], ...] = (
    MocConfigurator,
    UicConfigurator,
    RccConfigurator,
)


@dataclass(frozen=True)
class InitializerOptions:
    """Options for an initializer run, fixed for the whole build.

    Attributes:
        global_autogen_target: Attach umbrella steps to a global 'autogen' target.
        global_autorcc_target: Attach rcc steps to a global 'autorcc' target.
        verbosity: Verbosity level passed to the execution stage.
        dual_need_policy: Handling of files needing both moc and uic.
        exec_command: Program the build steps invoke.
    """

    global_autogen_target: bool = False
    global_autorcc_target: bool = False
    verbosity: int = 0
    dual_need_policy: DualNeedPolicy = DualNeedPolicy.CONFLICT
    exec_command: str = "qautogen-exec"


@dataclass
class InitResult:
    """Outcome of AutogenInitializer.run().

    Attributes:
        plan: The applied plan.
        written: Info files written (or found unchanged).
        failures: Generator or manifest failures that did not abort the run.
    """

    plan: AssemblyPlan
    written: list[Path] = field(default_factory=list)
    failures: list[AutogenError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class AutogenInitializer:
    """Plans and sets up moc/uic/rcc generation for one target.

    Example:
        init = AutogenInitializer(target, toolchain, graph,
                                  configs=BuildConfigs(["Debug", "Release"]))
        result = init.run()
        for failure in result.failures:
            print(failure)
    """

    def __init__(
        self,
        target: Target,
        toolchain: ToolResolver,
        graph: BuildGraph,
        *,
        configs: BuildConfigs | None = None,
        options: InitializerOptions | None = None,
        detector: NeedDetector | None = None,
        scanner: ResourceScanner | None = None,
        fingerprint: Callable[[dict[str, Any]], str] = input_fingerprint,
    ) -> None:
        self.target = target
        self.toolchain = toolchain
        self.graph = graph
        self.configs = configs or BuildConfigs()
        self.options = options or InitializerOptions()
        self._detector = detector
        self._scanner = scanner or ResourceScanner()
        self._fingerprint = fingerprint
        self._classifier: SourceClassifier | None = None

    def raw_inputs(
        self, generators: dict[GenKind, GeneratorConfig] | None = None
    ) -> dict[str, Any]:
        """Inputs of settings generation, the basis of the fingerprint."""
        version = self.toolchain.version
        tools = {
            kind.value: str(config.executable) if config.executable else None
            for kind, config in (generators or {}).items()
        }
        return {
            "tools": tools,
            "qt_version": [version.major, version.minor],
            "configs": self.configs.names,
            "options": {
                "global_autogen_target": self.options.global_autogen_target,
                "global_autorcc_target": self.options.global_autorcc_target,
                "verbosity": self.options.verbosity,
                "dual_need_policy": self.options.dual_need_policy.value,
                "exec_command": self.options.exec_command,
            },
            "target": self.target.raw_inputs(),
        }

    def run(self) -> InitResult:
        """Plan, write the info files and apply the plan to the graph.

        Raises:
            InitializationError: On a target-fatal error. The build graph is
                left unmodified in that case.
        """
        plan = self.init_custom_targets()
        written = self.setup_custom_targets(plan)
        return InitResult(plan=plan, written=written, failures=list(plan.failures))

    def init_custom_targets(self) -> AssemblyPlan:
        """Configure, classify, scan and assemble without touching the graph.

        Raises:
            InitializationError: On a target-fatal error.
        """
        target = self.target
        version = self.toolchain.version
        if version.major not in SUPPORTED_QT_MAJORS:
            raise InitializationError(
                target.name,
                [ConfigureError(f"unsupported Qt version {version}", target.name)],
            )

        failures: list[AutogenError] = []
        fatal: list[AutogenError] = []
        required = {
            name.upper() for name in target.property_list("AUTOGEN_REQUIRED")
        }

        generators: dict[GenKind, GeneratorConfig] = {}
        for configurator_cls in CONFIGURATORS:
            configurator = configurator_cls()
            kind = configurator.kind
            try:
                generators[kind] = configurator.configure(
                    target, self.configs, self.toolchain
                )
            except ConfigureError as e:
                generators[kind] = GeneratorConfig.disabled(kind)
                if isinstance(e, ToolNotFoundError) and kind.upper in required:
                    fatal.append(e)
                else:
                    logger.warning("%s disabled: %s", kind.upper, e)
                    failures.append(e)
        if fatal:
            raise InitializationError(target.name, fatal)

        dirs = Directories.for_target(
            target.name,
            target.binary_dir,
            self.configs,
            self._build_dir_override(),
        )

        detector = self._detector
        if detector is None:
            moc_settings = generators[GenKind.MOC].settings
            macro_names = getattr(moc_settings, "macro_names", None)
            detector = (
                ContentDetector(macro_names) if macro_names is not None else ContentDetector()
            )
        self._classifier = SourceClassifier(
            generators, detector, policy=self.options.dual_need_policy
        )
        try:
            classification = self._classifier.classify(target)
        except ClassificationConflictError as e:
            raise InitializationError(target.name, [e]) from e

        manifests = self._scan_manifests(
            classification.manifests, generators, dirs, failures
        )

        assembler = TargetAssembler(
            self.graph,
            global_autogen_target=self.options.global_autogen_target,
            global_autorcc_target=self.options.global_autorcc_target,
            exec_command=self.options.exec_command,
        )
        plan = assembler.assemble(
            target, self.configs, dirs, generators, classification, manifests
        )
        self._check_unique(plan)
        self._classifier.seal()
        plan.failures = failures
        plan.fingerprint = self._fingerprint(self.raw_inputs(generators))
        return plan

    def setup_custom_targets(self, plan: AssemblyPlan) -> list[Path]:
        """Write the info files, then apply the plan to the graph.

        Raises:
            InitializationError: If an info file cannot be written. Nothing
                has been added to the graph in that case.
        """
        version = self.toolchain.version
        try:
            written = AutogenInfoEmitter(verbosity=self.options.verbosity).emit(
                plan, version
            )
            written += RccInfoEmitter(verbosity=self.options.verbosity).emit(plan)
        except SettingsWriteError as e:
            raise InitializationError(self.target.name, [e]) from e

        for step in plan.steps:
            self.graph.add_step(step)
        for dependent, dependency in plan.edges:
            self.graph.add_dependency_edge(dependent, dependency)

        for path, kind in plan.generated_sources:
            if self._classifier is not None:
                self._classifier.register_generated(self.target, path, kind)
            else:
                self.target.add_generated_source(path, kind)
        for include in plan.include_dirs:
            if include not in self.target.include_dirs:
                self.target.include_dirs.append(include)

        for failure in plan.failures:
            logger.warning("%s: %s", self.target.name, failure)
        return written

    def _check_unique(self, plan: AssemblyPlan) -> None:
        """Reject a plan whose steps or manifest files collide.

        Raises:
            InitializationError: If a step name is taken or two manifests
                share a generated file.
        """
        errors: list[AutogenError] = []
        names: set[str] = set()
        for step in plan.steps:
            if step.name in names or self.graph.has_target(step.name):
                errors.append(
                    ConfigureError(
                        f"build step name is not unique: {step.name}", self.target.name
                    )
                )
            names.add(step.name)

        paths: set[Path] = set()
        for manifest in plan.manifests:
            for path in (
                manifest.rcc_file,
                *manifest.info_files.values(),
                *manifest.settings_files.values(),
            ):
                if path in paths:
                    errors.append(
                        ConfigureError("generated by more than one manifest", str(path))
                    )
                paths.add(path)
        if errors:
            raise InitializationError(self.target.name, errors)

    def _build_dir_override(self) -> Path | None:
        value = self.target.property_str("AUTOGEN_BUILD_DIR")
        if not value:
            return None
        path = Path(value)
        if not path.is_absolute():
            path = self.target.binary_dir / path
        return path

    def _scan_manifests(
        self,
        sources: list[SourceFile],
        generators: dict[GenKind, GeneratorConfig],
        dirs: Directories,
        failures: list[AutogenError],
    ) -> list[ResourceManifest]:
        rcc = generators[GenKind.RCC]
        if not rcc.enabled or not sources:
            return []
        settings: RccSettings = rcc.settings  # type: ignore[assignment]
        builders = prepare_builders(
            sources,
            self.target,
            self.configs,
            settings.options,
            self.toolchain.version.major,
        )

        manifests: list[ResourceManifest] = []
        for builder in builders:
            resources: list[Path] = []
            if not builder.generated:
                try:
                    resources = self._scanner.scan(builder.path)
                except ParseError as e:
                    logger.warning("Skipping resource manifest: %s", e)
                    failures.append(e)
                    continue
            manifests.append(builder.build(dirs, self.configs, resources))
        return manifests
