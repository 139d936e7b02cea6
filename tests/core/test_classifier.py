# SPDX-License-Identifier: MIT
"""Tests for qautogen.core.classifier."""

from __future__ import annotations

from pathlib import Path

import pytest

from qautogen.core.classifier import Bucket, DualNeedPolicy, SourceClassifier, SourceEntry
from qautogen.core.config import GenKind
from qautogen.core.detect import ContentDetector, GenerationNeed
from qautogen.core.errors import AutogenError, ClassificationConflictError
from qautogen.core.target import Target
from qautogen.tools.toolchain import GeneratorConfig


class FixedDetector:
    """Detector returning preset needs by file name."""

    def __init__(self, needs: dict[str, GenerationNeed]) -> None:
        self.needs = needs
        self.calls: list[Path] = []

    def needs_generation(self, path: Path) -> GenerationNeed:
        self.calls.append(path)
        return self.needs.get(path.name, GenerationNeed.NONE)


def generators(*kinds: GenKind) -> dict[GenKind, GeneratorConfig]:
    return {
        kind: GeneratorConfig(kind, enabled=kind in kinds) for kind in GenKind
    }


ALL = generators(GenKind.MOC, GenKind.UIC, GenKind.RCC)


@pytest.fixture
def target(tmp_path: Path) -> Target:
    return Target("app", source_dir=tmp_path, binary_dir=tmp_path / "build")


class TestBuckets:
    def test_every_file_in_exactly_one_bucket(self, target: Target) -> None:
        """Each distinct file gets one bucket, duplicates are classified once."""
        target.add_sources(["a.h", "b.cpp", "c.ui", "d.qrc", "notes.txt"])
        target.sources.append(target.sources[0])
        detector = FixedDetector({"a.h": GenerationNeed.MOC})

        result = SourceClassifier(ALL, detector).classify(target)

        assert result.buckets == {
            target.source_dir / "a.h": Bucket.MOC,
            target.source_dir / "b.cpp": Bucket.IRRELEVANT,
            target.source_dir / "c.ui": Bucket.UIC,
            target.source_dir / "d.qrc": Bucket.RCC,
            target.source_dir / "notes.txt": Bucket.IRRELEVANT,
        }
        assert detector.calls == [target.source_dir / "a.h", target.source_dir / "b.cpp"]

    def test_headers_and_sources_keep_order(self, target: Target) -> None:
        target.add_sources(["z.h", "a.h", "m.cpp"])
        detector = FixedDetector(
            {"z.h": GenerationNeed.MOC, "a.h": GenerationNeed.MOC, "m.cpp": GenerationNeed.UIC}
        )
        result = SourceClassifier(ALL, detector).classify(target)
        assert [e.path.name for e in result.headers] == ["z.h", "a.h"]
        assert [(e.path.name, e.flags) for e in result.sources] == [("m.cpp", "U")]

    def test_ui_options_recorded(self, target: Target) -> None:
        target.add_source("form.ui", {"AUTOUIC_OPTIONS": "-tr;i18n"})
        target.add_source("plain.ui")
        result = SourceClassifier(ALL, FixedDetector({})).classify(target)
        form = target.source_dir / "form.ui"
        assert result.uic_files == [form, target.source_dir / "plain.ui"]
        assert result.uic_file_options == [(form, ("-tr", "i18n"))]

    def test_disabled_generator_ignores_its_files(self, target: Target) -> None:
        target.add_sources(["a.h", "c.ui", "d.qrc"])
        detector = FixedDetector({"a.h": GenerationNeed.MOC})
        result = SourceClassifier(generators(GenKind.RCC), detector).classify(target)
        assert result.files_in(Bucket.RCC) == [target.source_dir / "d.qrc"]
        assert result.files_in(Bucket.MOC) == []
        assert result.files_in(Bucket.UIC) == []
        assert detector.calls == []

    def test_idempotent(self, target: Target, tmp_path: Path) -> None:
        (tmp_path / "a.h").write_text("Q_OBJECT\n")
        target.add_sources(["a.h", "b.cpp", "c.ui"])
        classifier = SourceClassifier(ALL, ContentDetector())
        assert classifier.classify(target) == classifier.classify(target)


class TestSkips:
    def test_skip_automoc(self, target: Target) -> None:
        target.add_source("a.h", {"SKIP_AUTOMOC": True})
        detector = FixedDetector({"a.h": GenerationNeed.MOC})
        result = SourceClassifier(ALL, detector).classify(target)
        path = target.source_dir / "a.h"
        assert result.moc_skip == [path]
        assert result.uic_skip == []
        # still scanned for uic, but needs only moc
        assert result.buckets[path] is Bucket.IRRELEVANT

    def test_skip_autogen_skips_everything(self, target: Target) -> None:
        target.add_source("a.h", {"SKIP_AUTOGEN": "ON"})
        target.add_source("c.ui", {"SKIP_AUTOGEN": "ON"})
        target.add_source("d.qrc", {"SKIP_AUTOGEN": "ON"})
        detector = FixedDetector({"a.h": GenerationNeed.MOC})
        result = SourceClassifier(ALL, detector).classify(target)
        assert set(result.buckets.values()) == {Bucket.IRRELEVANT}
        assert result.moc_skip == [target.source_dir / "a.h"]
        assert result.uic_skip == [target.source_dir / "a.h", target.source_dir / "c.ui"]
        assert detector.calls == []


class TestGenerated:
    def test_generated_files_are_not_scanned(self, target: Target) -> None:
        target.add_source("gen.h", {"GENERATED": True})
        target.add_source("gen.cpp", {"GENERATED": True, "SKIP_AUTOUIC": True})
        detector = FixedDetector({})
        result = SourceClassifier(ALL, detector).classify(target)
        assert [(e.path.name, e.flags) for e in result.headers_generated] == [("gen.h", "MU")]
        assert [(e.path.name, e.flags) for e in result.sources_generated] == [("gen.cpp", "M")]
        assert detector.calls == []

    def test_own_outputs_are_generated(self, target: Target) -> None:
        path = target.binary_dir / "mocs_compilation.cpp"
        target.add_generated_source(path, GenKind.MOC)
        result = SourceClassifier(ALL, FixedDetector({})).classify(target)
        assert result.buckets[path] is Bucket.GENERATED
        assert result.sources_generated == []

    def test_generated_qrc_is_listed_unscanned(self, target: Target) -> None:
        target.add_source("gen.qrc", {"GENERATED": True})
        result = SourceClassifier(ALL, FixedDetector({})).classify(target)
        assert [s.path.name for s in result.manifests] == ["gen.qrc"]


class TestConflicts:
    def test_dual_need_conflict(self, target: Target) -> None:
        target.add_source("both.cpp")
        detector = FixedDetector({"both.cpp": GenerationNeed.MOC | GenerationNeed.UIC})
        with pytest.raises(ClassificationConflictError) as exc_info:
            SourceClassifier(ALL, detector).classify(target)
        assert exc_info.value.kinds == ("MOC", "UIC")
        assert exc_info.value.path == target.source_dir / "both.cpp"

    def test_dual_need_prefer_moc(self, target: Target) -> None:
        target.add_source("both.cpp")
        detector = FixedDetector({"both.cpp": GenerationNeed.MOC | GenerationNeed.UIC})
        result = SourceClassifier(
            ALL, detector, policy=DualNeedPolicy.PREFER_MOC
        ).classify(target)
        assert result.buckets[target.source_dir / "both.cpp"] is Bucket.MOC
        assert result.sources[0].flags == "M"

    def test_dual_need_both(self, target: Target) -> None:
        target.add_source("both.cpp")
        detector = FixedDetector({"both.cpp": GenerationNeed.MOC | GenerationNeed.UIC})
        result = SourceClassifier(ALL, detector, policy=DualNeedPolicy.BOTH).classify(target)
        assert result.buckets[target.source_dir / "both.cpp"] is Bucket.MOC
        assert result.sources == [SourceEntry(target.source_dir / "both.cpp", "MU")]

    def test_dual_need_with_uic_disabled(self, target: Target) -> None:
        target.add_source("both.cpp")
        detector = FixedDetector({"both.cpp": GenerationNeed.MOC | GenerationNeed.UIC})
        result = SourceClassifier(generators(GenKind.MOC), detector).classify(target)
        assert result.buckets[target.source_dir / "both.cpp"] is Bucket.MOC

    def test_input_produced_by_other_generator(self, target: Target) -> None:
        target.add_generated_source(target.binary_dir / "odd.ui", GenKind.RCC)
        with pytest.raises(ClassificationConflictError, match="output of RCC"):
            SourceClassifier(ALL, FixedDetector({})).classify(target)


class TestSealing:
    def test_classify_after_seal(self, target: Target) -> None:
        classifier = SourceClassifier(ALL, FixedDetector({}))
        classifier.classify(target)
        classifier.seal()
        assert classifier.sealed
        with pytest.raises(AutogenError, match="reclassified"):
            classifier.classify(target)

    def test_register_generated(self, target: Target) -> None:
        classifier = SourceClassifier(ALL, FixedDetector({}))
        path = target.binary_dir / "qrc_res.cpp"
        classifier.register_generated(target, path, GenKind.RCC)
        classifier.register_generated(target, path, GenKind.RCC)
        assert [s.path for s in target.sources] == [path]
        assert target.sources[0].generated_by is GenKind.RCC
