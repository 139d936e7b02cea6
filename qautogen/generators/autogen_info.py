# SPDX-License-Identifier: MIT
"""Writer for the general autogen info file (AutogenInfo.txt).

The execution stage reads this file to run moc and uic. Only enabled
generators get their AM_MOC_* / AM_UIC_* / AM_RCC_* records;
AM_GENERATORS lists which ones are enabled.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from qautogen.core.config import GenKind
from qautogen.generators.generator import BaseEmitter, InfoWriter

if TYPE_CHECKING:
    from pathlib import Path

    from qautogen.core.assembler import AssemblyPlan, AutogenTarget
    from qautogen.core.classifier import SourceEntry
    from qautogen.core.config import QtVersion
    from qautogen.toolchains.moc import MocSettings
    from qautogen.toolchains.uic import UicSettings


class AutogenInfoEmitter(BaseEmitter):
    """Emitter for the general settings artifact.

    Example:
        emitter = AutogenInfoEmitter()
        emitter.emit(plan, QtVersion(5, 15))
        # Writes <info dir>/AutogenInfo.txt
    """

    def __init__(self, *, verbosity: int = 0) -> None:
        super().__init__("autogen_info")
        self._verbosity = verbosity

    def emit(self, plan: AssemblyPlan, qt_version: QtVersion) -> list[Path]:
        """Write the info file of the plan's umbrella step, if it has one.

        Returns:
            The written (or unchanged) files.

        Raises:
            SettingsWriteError: If the file cannot be written.
        """
        autogen = plan.autogen
        if autogen is None:
            return []
        writer = self.render(plan, autogen, qt_version)
        self._persist(autogen.info_file, writer)
        return [autogen.info_file]

    def render(
        self, plan: AssemblyPlan, autogen: AutogenTarget, qt_version: QtVersion
    ) -> InfoWriter:
        configs = plan.configs
        dirs = plan.dirs
        ofs = InfoWriter()

        ofs.write_comment("General")
        ofs.write("AM_INPUT_FINGERPRINT", plan.fingerprint)
        ofs.write_bool("AM_MULTI_CONFIG", configs.multi_config)
        ofs.write_strings("AM_CONFIGS", configs.names)
        ofs.write_config("AM_PARALLEL", autogen.parallel)
        ofs.write_uint("AM_VERBOSITY", self._verbosity)
        ofs.write_strings(
            "AM_GENERATORS", [k.upper for k in GenKind if plan.enabled(k)]
        )

        ofs.write_comment("Directories")
        ofs.write("AM_BUILD_DIR", dirs.build)
        ofs.write("AM_WORK_DIR", dirs.work)
        ofs.write("AM_INCLUDE_DIR", dirs.include)
        ofs.write_config_map("AM_INCLUDE_DIR", dirs.config_include)

        ofs.write_comment("Files")
        settings = autogen.settings_files
        if "" in settings:
            ofs.write("AM_SETTINGS_FILE", settings[""])
        else:
            ofs.write_config_map("AM_SETTINGS_FILE", settings)
        self._write_entries(ofs, "AM_HEADERS", autogen.headers)
        self._write_entries(ofs, "AM_SOURCES", autogen.sources)
        self._write_entries(ofs, "AM_HEADERS_GENERATED", autogen.headers_generated)
        self._write_entries(ofs, "AM_SOURCES_GENERATED", autogen.sources_generated)
        ofs.write_strings("AM_DEPEND_FILES", autogen.depend_files)
        ofs.write_strings("AM_DEPEND_TARGETS", autogen.depend_targets)

        ofs.write_comment("Qt")
        ofs.write_uint("AM_QT_VERSION_MAJOR", qt_version.major)
        ofs.write_uint("AM_QT_VERSION_MINOR", qt_version.minor)

        moc = plan.generators.get(GenKind.MOC)
        if moc is not None and moc.enabled and moc.settings is not None:
            self._write_moc(ofs, plan, autogen, moc.executable, moc.settings)  # type: ignore[arg-type]

        uic = plan.generators.get(GenKind.UIC)
        if uic is not None and uic.enabled and uic.settings is not None:
            self._write_uic(ofs, autogen, uic.executable, uic.settings)  # type: ignore[arg-type]

        rcc = plan.generators.get(GenKind.RCC)
        if rcc is not None and rcc.enabled and autogen.manifests:
            ofs.write_comment("RCC settings")
            ofs.write("AM_RCC_EXECUTABLE", rcc.executable or "")
            info_files: list[Path] = []
            for manifest in autogen.manifests:
                info_files.extend(manifest.info_files.values())
            ofs.write_strings("AM_RCC_INFO_FILES", info_files)

        return ofs

    def _write_entries(
        self, ofs: InfoWriter, key: str, entries: list[SourceEntry]
    ) -> None:
        ofs.write_strings(key, [e.path for e in entries])
        ofs.write_strings(f"{key}_FLAGS", [e.flags for e in entries])

    def _write_moc(
        self,
        ofs: InfoWriter,
        plan: AssemblyPlan,
        autogen: AutogenTarget,
        executable: Path | None,
        settings: MocSettings,
    ) -> None:
        ofs.write_comment("MOC settings")
        ofs.write("AM_MOC_EXECUTABLE", executable or "")
        ofs.write_strings("AM_MOC_SKIP", autogen.moc_skip)
        ofs.write_config_strings("AM_MOC_DEFINITIONS", settings.defines)
        ofs.write_config_strings("AM_MOC_INCLUDES", settings.includes)
        ofs.write_strings("AM_MOC_OPTIONS", settings.options)
        ofs.write_bool("AM_MOC_RELAXED_MODE", settings.relaxed_mode)
        ofs.write_strings("AM_MOC_MACRO_NAMES", settings.macro_names)
        ofs.write_strings(
            "AM_MOC_DEPEND_FILTERS",
            [item for pair in settings.depend_filters for item in pair],
        )
        ofs.write_strings("AM_MOC_PREDEFS_CMD", settings.predefs_cmd)
        compilation = autogen.mocs_compilation
        if "" in compilation:
            ofs.write("AM_MOC_COMPILATION_FILE", compilation[""])
        else:
            ofs.write_config_map("AM_MOC_COMPILATION_FILE", compilation)

    def _write_uic(
        self,
        ofs: InfoWriter,
        autogen: AutogenTarget,
        executable: Path | None,
        settings: UicSettings,
    ) -> None:
        ofs.write_comment("UIC settings")
        ofs.write("AM_UIC_EXECUTABLE", executable or "")
        ofs.write_strings("AM_UIC_SKIP", autogen.uic_skip)
        ofs.write_config_strings("AM_UIC_TARGET_OPTIONS", settings.options)
        ofs.write_strings("AM_UIC_FILES", autogen.uic_files)
        ofs.write_strings("AM_UIC_OPTIONS_FILES", [p for p, _ in autogen.uic_file_options])
        ofs.write_nested_lists(
            "AM_UIC_OPTIONS_OPTIONS", [opts for _, opts in autogen.uic_file_options]
        )
        ofs.write_strings("AM_UIC_SEARCH_PATHS", settings.search_paths)
