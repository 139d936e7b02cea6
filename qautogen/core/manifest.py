# SPDX-License-Identifier: MIT
"""Resource manifests (.qrc) and the scanner listing their inputs.

A manifest looks like:

    <RCC>
      <qresource prefix="/icons">
        <file>icon.png</file>
        <file alias="logo.svg">art/logo.svg</file>
      </qresource>
    </RCC>

File entries are relative to the manifest's directory. An entry naming a
directory packages every file below it.
"""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from qautogen.core.config import BuildConfigs, ConfigValue, Directories
from qautogen.core.errors import ParseError
from qautogen.core.source import property_bool, property_list
from qautogen.toolchains.rcc import merge_rcc_options
from qautogen.util.checksum import path_checksum

if TYPE_CHECKING:
    from qautogen.core.source import SourceFile
    from qautogen.core.target import Target

logger = logging.getLogger(__name__)


class ResourceScanner:
    """Lists the files a resource manifest packages.

    The scanner keeps no state between calls. Referenced files that do not
    exist are still listed, since another build step may produce them.
    """

    def scan(self, manifest: Path | str) -> list[Path]:
        """Return the ordered, deduplicated files referenced by manifest.

        Raises:
            ParseError: If the manifest cannot be read or is malformed.
        """
        path = Path(manifest)
        try:
            root = ET.parse(path).getroot()
        except ET.ParseError as e:
            raise ParseError(path, str(e)) from e
        except OSError as e:
            raise ParseError(path, e.strerror or str(e)) from e

        if root.tag != "RCC":
            raise ParseError(path, f"root element is <{root.tag}>, expected <RCC>")

        base = path.parent
        files: list[Path] = []
        seen: set[Path] = set()

        def add(item: Path) -> None:
            if item not in seen:
                seen.add(item)
                files.append(item)

        for qresource in root.findall("qresource"):
            for entry in qresource.findall("file"):
                text = (entry.text or "").strip()
                if not text:
                    raise ParseError(path, "empty <file> element")
                item = Path(text)
                if not item.is_absolute():
                    item = base / item
                item = Path(os.path.normpath(item))
                if item.is_dir():
                    for child in sorted(item.rglob("*")):
                        if child.is_file():
                            add(child)
                else:
                    add(item)

        logger.debug("%s packages %d file(s)", path, len(files))
        return files


@dataclass(frozen=True)
class ResourceManifest:
    """One .qrc file of the target, ready for step creation.

    Attributes:
        path: The manifest.
        name: Logical name; includes the checksum when not unique.
        checksum: Checksum of the manifest's directory.
        unique: False when another manifest of the target has the same stem.
        generated: The manifest is produced by a build step and was not scanned.
        individual: Gets its own rcc step instead of joining the umbrella step.
        rcc_file: Generated source.
        info_files: Info file per configuration ("" when shared).
        settings_files: Settings file per configuration ("" when single-config).
        lock_file: Lock file used by the execution stage.
        options: rcc options per configuration.
        resources: Packaged files found by the scanner.
    """

    path: Path
    name: str
    checksum: str
    unique: bool
    generated: bool
    individual: bool
    rcc_file: Path
    info_files: dict[str, Path]
    settings_files: dict[str, Path]
    lock_file: Path
    options: ConfigValue[tuple[str, ...]]
    resources: tuple[Path, ...] = ()


@dataclass
class ManifestBuilder:
    """Collects a manifest's attributes until its resources are known."""

    path: Path
    checksum: str
    options: ConfigValue[tuple[str, ...]]
    generated: bool = False
    individual: bool = True
    unique: bool = True

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def name(self) -> str:
        if self.unique:
            return self.stem
        return f"{self.stem}_{self.checksum}"

    def build(
        self,
        dirs: Directories,
        configs: BuildConfigs,
        resources: list[Path] | tuple[Path, ...] = (),
    ) -> ResourceManifest:
        name = self.name
        if self.options.collapsed:
            info_files = {"": dirs.info / f"RCC{name}Info.txt"}
        else:
            info_files = {c: dirs.info / f"RCC{name}Info_{c}.txt" for c in configs}
        if configs.multi_config:
            settings_files = {
                c: dirs.info / f"RCC{name}_Settings_{c}.txt" for c in configs
            }
        else:
            settings_files = {"": dirs.info / f"RCC{name}_Settings.txt"}

        return ResourceManifest(
            path=self.path,
            name=name,
            checksum=self.checksum,
            unique=self.unique,
            generated=self.generated,
            individual=self.individual,
            rcc_file=dirs.build / self.checksum / f"qrc_{name}.cpp",
            info_files=info_files,
            settings_files=settings_files,
            lock_file=dirs.info / f"RCC{name}_Lock.lock",
            options=self.options,
            resources=tuple(resources),
        )


def prepare_builders(
    sources: list[SourceFile],
    target: Target,
    configs: BuildConfigs,
    options: ConfigValue[tuple[str, ...]],
    qt_major: int,
) -> list[ManifestBuilder]:
    """Create one ManifestBuilder per manifest of the target.

    Manifests sharing a stem are marked not unique so their names carry
    the directory checksum. Each manifest's options are the target-wide
    rcc options merged with its AUTORCC_OPTIONS and '-name <name>'.
    """
    roots = (("SOURCE", target.source_dir), ("BINARY", target.binary_dir))
    builders = [
        ManifestBuilder(
            path=source.path,
            checksum=path_checksum(source.path, roots),
            options=options,
            generated=source.generated,
            individual=property_bool(source.get_property("AUTORCC_INDIVIDUAL", True)),
        )
        for source in sources
    ]

    stems = Counter(builder.stem for builder in builders)
    for builder in builders:
        builder.unique = stems[builder.stem] == 1

    # Same stem in the same directory (res.qrc, res.QRC)
    names = Counter(builder.name for builder in builders)
    for builder in builders:
        if names[builder.name] > 1:
            builder.checksum = path_checksum(builder.path, roots, with_name=True)

    for builder, source in zip(builders, sources):
        file_options = property_list(source.get_property("AUTORCC_OPTIONS"))
        name_option = ["-name", builder.name]

        def merged(config: str) -> tuple[str, ...]:
            result = merge_rcc_options(options.get(config), file_options, qt_major)
            return tuple(merge_rcc_options(result, name_option, qt_major))

        builder.options = ConfigValue.capture(configs, merged)
    return builders
