# SPDX-License-Identifier: MIT
"""Partitioning of a target's sources for moc, uic and rcc.

Every distinct file of the source list lands in exactly one Bucket. The
decision for a file follows this precedence:

1. a skip property (SKIP_AUTOGEN, SKIP_AUTO<KIND>) removes the file from
   consideration for that generator,
2. a file produced by a build step (GENERATED, or registered by autogen
   itself) is recorded as generated and never scanned,
3. otherwise the NeedDetector decides from the file content.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from qautogen.core.config import GenKind
from qautogen.core.detect import GenerationNeed
from qautogen.core.errors import AutogenError, ClassificationConflictError
from qautogen.core.source import property_list

if TYPE_CHECKING:
    from qautogen.core.detect import NeedDetector
    from qautogen.core.source import SourceFile
    from qautogen.core.target import Target
    from qautogen.tools.toolchain import GeneratorConfig

logger = logging.getLogger(__name__)


class Bucket(Enum):
    """Classification outcome for one file."""

    MOC = "moc"
    UIC = "uic"
    RCC = "rcc"
    GENERATED = "generated"
    IRRELEVANT = "irrelevant"


class DualNeedPolicy(Enum):
    """What to do with a file that needs both moc and uic.

    CONFLICT raises ClassificationConflictError, PREFER_MOC keeps only the
    moc need and BOTH hands the file to the execution stage flagged "MU".
    """

    CONFLICT = "conflict"
    PREFER_MOC = "prefer_moc"
    BOTH = "both"


@dataclass(frozen=True)
class SourceEntry:
    """A header or source handed to the execution stage.

    Attributes:
        path: Absolute path.
        flags: 'M' (moc), 'U' (uic) or 'MU'.
    """

    path: Path
    flags: str


def _flags(need: GenerationNeed) -> str:
    flags = ""
    if GenerationNeed.MOC in need:
        flags += "M"
    if GenerationNeed.UIC in need:
        flags += "U"
    return flags


@dataclass
class Classification:
    """Result of classifying one target's source list."""

    buckets: dict[Path, Bucket] = field(default_factory=dict)
    headers: list[SourceEntry] = field(default_factory=list)
    sources: list[SourceEntry] = field(default_factory=list)
    headers_generated: list[SourceEntry] = field(default_factory=list)
    sources_generated: list[SourceEntry] = field(default_factory=list)
    moc_skip: list[Path] = field(default_factory=list)
    uic_skip: list[Path] = field(default_factory=list)
    uic_files: list[Path] = field(default_factory=list)
    uic_file_options: list[tuple[Path, tuple[str, ...]]] = field(default_factory=list)
    manifests: list[SourceFile] = field(default_factory=list)

    def files_in(self, bucket: Bucket) -> list[Path]:
        return [path for path, b in self.buckets.items() if b is bucket]


class SourceClassifier:
    """Classifies a target's source list.

    Example:
        classifier = SourceClassifier(configs, ContentDetector())
        result = classifier.classify(target)
        result.files_in(Bucket.MOC)
    """

    def __init__(
        self,
        configs: Mapping[GenKind, GeneratorConfig],
        detector: NeedDetector,
        *,
        policy: DualNeedPolicy = DualNeedPolicy.CONFLICT,
    ) -> None:
        self._enabled = {kind for kind, cfg in configs.items() if cfg.enabled}
        self._detector = detector
        self._policy = policy
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        """Forbid further classification (called once steps are assembled)."""
        self._sealed = True

    def classify(self, target: Target) -> Classification:
        """Classify every distinct file of the target's source list.

        Raises:
            ClassificationConflictError: If generators claim a file in a
                mutually exclusive way.
            AutogenError: If called after seal().
        """
        if self._sealed:
            raise AutogenError("sources cannot be reclassified after assembly", target.name)

        result = Classification()
        for source in target.sources:
            if source.path in result.buckets:
                continue
            bucket = self._classify_one(source, result)
            result.buckets[source.path] = bucket
            logger.debug("%s: %s -> %s", target.name, source.path, bucket.value)
        return result

    def register_generated(self, target: Target, path: Path, kind: GenKind) -> None:
        """Record a file produced by autogen in the target's source list."""
        target.add_generated_source(path, kind)

    def _classify_one(self, source: SourceFile, result: Classification) -> Bucket:
        if source.is_ui:
            return self._classify_input(source, GenKind.UIC, result)
        if source.is_qrc:
            return self._classify_input(source, GenKind.RCC, result)
        if source.is_header or source.is_source:
            return self._classify_code(source, result)
        return Bucket.IRRELEVANT

    def _classify_input(
        self, source: SourceFile, kind: GenKind, result: Classification
    ) -> Bucket:
        """Classify a .ui form or .qrc manifest."""
        producer = source.generated_by
        if producer is not None and producer is not kind:
            raise ClassificationConflictError(
                source.path,
                (kind.upper, producer.upper),
                f"{kind.upper} input is an output of {producer.upper}",
            )
        if kind not in self._enabled:
            return Bucket.IRRELEVANT
        if source.skips(kind):
            if kind is GenKind.UIC:
                result.uic_skip.append(source.path)
            return Bucket.IRRELEVANT
        if producer is not None:
            return Bucket.GENERATED

        if kind is GenKind.UIC:
            result.uic_files.append(source.path)
            options = source.get_property("AUTOUIC_OPTIONS")
            if options:
                result.uic_file_options.append(
                    (source.path, tuple(property_list(options)))
                )
            return Bucket.UIC

        result.manifests.append(source)
        return Bucket.RCC

    def _classify_code(self, source: SourceFile, result: Classification) -> Bucket:
        """Classify a header or source file."""
        allowed = GenerationNeed.NONE
        for kind, need, skip_list in (
            (GenKind.MOC, GenerationNeed.MOC, result.moc_skip),
            (GenKind.UIC, GenerationNeed.UIC, result.uic_skip),
        ):
            if kind not in self._enabled:
                continue
            if source.skips(kind):
                skip_list.append(source.path)
            else:
                allowed |= need
        if not allowed:
            return Bucket.IRRELEVANT

        if source.generated_by is not None:
            return Bucket.GENERATED
        if source.generated:
            # Content is not available yet; the execution stage scans it
            entry = SourceEntry(source.path, _flags(allowed))
            if source.is_header:
                result.headers_generated.append(entry)
            else:
                result.sources_generated.append(entry)
            return Bucket.GENERATED

        need = self._detector.needs_generation(source.path) & allowed
        if need == GenerationNeed.MOC | GenerationNeed.UIC:
            if self._policy is DualNeedPolicy.CONFLICT:
                raise ClassificationConflictError(
                    source.path, ("MOC", "UIC"), "file needs both moc and uic"
                )
            if self._policy is DualNeedPolicy.PREFER_MOC:
                logger.warning("%s: needs moc and uic, uic is not run", source.path)
                need = GenerationNeed.MOC
        if not need:
            return Bucket.IRRELEVANT

        entry = SourceEntry(source.path, _flags(need))
        if source.is_header:
            result.headers.append(entry)
        else:
            result.sources.append(entry)
        # A file flagged "MU" is in the MOC bucket
        return Bucket.UIC if need == GenerationNeed.UIC else Bucket.MOC
