# SPDX-License-Identifier: MIT
"""Tests for qautogen.core.detect."""

from qautogen.core.detect import ContentDetector, GenerationNeed, NeedDetector


class TestContentDetector:
    def test_is_need_detector(self):
        assert isinstance(ContentDetector(), NeedDetector)

    def test_q_object(self, tmp_path):
        header = tmp_path / "w.h"
        header.write_text("class W : public QObject {\n    Q_OBJECT\n};\n")
        assert ContentDetector().needs_generation(header) == GenerationNeed.MOC

    def test_macro_must_be_whole_word(self, tmp_path):
        header = tmp_path / "w.h"
        header.write_text("#define MY_Q_OBJECTS 1\n")
        assert ContentDetector().needs_generation(header) == GenerationNeed.NONE

    def test_custom_macro_names(self, tmp_path):
        header = tmp_path / "w.h"
        header.write_text("class W { MY_MACRO };\n")
        assert ContentDetector(["MY_MACRO"]).needs_generation(header) == GenerationNeed.MOC
        assert ContentDetector().needs_generation(header) == GenerationNeed.NONE

    def test_moc_include(self, tmp_path):
        source = tmp_path / "w.cpp"
        source.write_text('#include "w.moc"\n')
        assert ContentDetector().needs_generation(source) == GenerationNeed.MOC

    def test_ui_include(self, tmp_path):
        source = tmp_path / "w.cpp"
        source.write_text('#include "forms/ui_main.h"\n')
        assert ContentDetector().needs_generation(source) == GenerationNeed.UIC

    def test_both(self, tmp_path):
        source = tmp_path / "w.cpp"
        source.write_text('#include "ui_main.h"\nclass W { Q_GADGET };\n')
        need = ContentDetector().needs_generation(source)
        assert need == GenerationNeed.MOC | GenerationNeed.UIC

    def test_missing_file_needs_nothing(self, tmp_path):
        assert ContentDetector().needs_generation(tmp_path / "nope.h") == GenerationNeed.NONE
