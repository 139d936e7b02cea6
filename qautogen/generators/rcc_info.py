# SPDX-License-Identifier: MIT
"""Writer for the per-manifest rcc info files."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from qautogen.core.config import GenKind
from qautogen.generators.generator import BaseEmitter, InfoWriter

if TYPE_CHECKING:
    from qautogen.core.assembler import AssemblyPlan
    from qautogen.core.manifest import ResourceManifest
    from qautogen.toolchains.rcc import RccSettings


class RccInfoEmitter(BaseEmitter):
    """Emitter for the resource settings artifacts.

    Writes RCC<name>Info.txt for each manifest, or one
    RCC<name>Info_<CONFIG>.txt per configuration when the manifest's rcc
    options differ between configurations.
    """

    def __init__(self, *, verbosity: int = 0) -> None:
        super().__init__("rcc_info")
        self._verbosity = verbosity

    def emit(self, plan: AssemblyPlan) -> list[Path]:
        """Write the info files of every manifest in the plan.

        Raises:
            SettingsWriteError: If a file cannot be written.
        """
        rcc = plan.generators.get(GenKind.RCC)
        if rcc is None or not rcc.enabled:
            return []
        settings: RccSettings | None = rcc.settings  # type: ignore[assignment]
        written: list[Path] = []
        for manifest in plan.manifests:
            for config, info_file in manifest.info_files.items():
                writer = self.render(plan, manifest, config, rcc.executable, settings)
                self._persist(info_file, writer)
                written.append(info_file)
        return written

    def render(
        self,
        plan: AssemblyPlan,
        manifest: ResourceManifest,
        config: str,
        executable: Path | None,
        settings: RccSettings | None,
    ) -> InfoWriter:
        """Render the info file of manifest for config ("" when shared)."""
        ofs = InfoWriter()

        ofs.write_comment("General")
        ofs.write("ARCC_INPUT_FINGERPRINT", plan.fingerprint)
        ofs.write_bool("ARCC_MULTI_CONFIG", plan.configs.multi_config)
        if config:
            ofs.write("ARCC_CONFIG", config)
        ofs.write_uint("ARCC_VERBOSITY", self._verbosity)

        ofs.write_comment("Directories")
        ofs.write("ARCC_BUILD_DIR", plan.dirs.build)
        ofs.write("ARCC_INCLUDE_DIR", plan.dirs.include)

        ofs.write_comment("Rcc executable")
        ofs.write("ARCC_RCC_EXECUTABLE", executable or "")
        ofs.write_strings(
            "ARCC_RCC_LIST_OPTIONS", settings.list_options if settings else ()
        )

        ofs.write_comment("Rcc job")
        ofs.write("ARCC_LOCK_FILE", manifest.lock_file)
        ofs.write("ARCC_SOURCE", manifest.path)
        ofs.write("ARCC_OUTPUT_CHECKSUM", manifest.checksum)
        ofs.write("ARCC_OUTPUT_NAME", manifest.rcc_file.name)
        ofs.write("ARCC_OUTPUT", manifest.rcc_file)
        ofs.write_bool("ARCC_UNIQUE", manifest.unique)
        ofs.write_bool("ARCC_SOURCE_GENERATED", manifest.generated)
        if config:
            ofs.write_strings("ARCC_OPTIONS", manifest.options.get(config))
        else:
            ofs.write_strings("ARCC_OPTIONS", manifest.options.default)
        ofs.write_strings("ARCC_INPUTS", manifest.resources)

        settings_files = manifest.settings_files
        if "" in settings_files:
            ofs.write("ARCC_SETTINGS_FILE", settings_files[""])
        elif config:
            ofs.write("ARCC_SETTINGS_FILE", settings_files[config])
        else:
            ofs.write_config_map("ARCC_SETTINGS_FILE", settings_files)
        return ofs
