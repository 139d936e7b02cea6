# SPDX-License-Identifier: MIT
"""Tests for qautogen.configure.config."""

import json

from qautogen.configure.config import Configure, ProgramInfo


def make_tool(directory, name, version_line="tool 1.2.3"):
    directory.mkdir(parents=True, exist_ok=True)
    tool = directory / name
    tool.write_text(f"#!/bin/sh\necho '{version_line}'\n")
    tool.chmod(0o755)
    return tool


class TestConfigure:
    def test_creation(self, tmp_path):
        config = Configure(build_dir=tmp_path)
        assert config.build_dir == tmp_path
        assert repr(config) == f"Configure(build_dir={tmp_path})"

    def test_save_writes_cache(self, tmp_path):
        bin_dir = tmp_path / "bin"
        rcc = make_tool(bin_dir, "rcc", "rcc 5.15.2")
        config = Configure(build_dir=tmp_path / "build")
        config.find_program("rcc", hints=[bin_dir])
        config.save()

        data = json.loads((tmp_path / "build" / "qautogen_config.json").read_text())
        assert data["program:rcc"] == {
            "path": str(rcc),
            "version": "rcc 5.15.2",
            "hints": [str(bin_dir)],
        }

    def test_corrupt_cache_ignored(self, tmp_path):
        (tmp_path / "qautogen_config.json").write_text("{not json")
        config = Configure(build_dir=tmp_path)
        assert config.find_program("qautogen-no-such-program-xyz") is None


class TestFindProgram:
    def test_in_hint_directory(self, tmp_path):
        moc = make_tool(tmp_path / "qt" / "bin", "moc-qt6", "moc 6.5.0")
        config = Configure(build_dir=tmp_path / "build")
        info = config.find_program("moc-qt6", hints=[tmp_path / "qt" / "bin"])
        assert info == ProgramInfo(path=moc, version="moc 6.5.0")

    def test_hint_can_be_the_program(self, tmp_path):
        moc = make_tool(tmp_path, "my-moc")
        config = Configure(build_dir=tmp_path / "build")
        info = config.find_program("moc", hints=[moc])
        assert info is not None
        assert info.path == moc

    def test_not_found(self, tmp_path):
        config = Configure(build_dir=tmp_path)
        assert config.find_program("qautogen-no-such-program-xyz") is None

    def test_failing_version_flag(self, tmp_path):
        tool = tmp_path / "uic"
        tool.write_text("#!/bin/sh\nexit 1\n")
        tool.chmod(0o755)
        info = Configure(build_dir=tmp_path / "build").find_program("uic", hints=[tmp_path])
        assert info == ProgramInfo(path=tool, version=None)

    def test_result_is_cached(self, tmp_path):
        bin_dir = tmp_path / "bin"
        moc = make_tool(bin_dir, "moc")
        config = Configure(build_dir=tmp_path / "build")
        config.find_program("moc", hints=[bin_dir])
        config.save()
        make_tool(bin_dir, "moc", "tool 9.9.9")

        reloaded = Configure(build_dir=tmp_path / "build")
        info = reloaded.find_program("moc", hints=[bin_dir])
        assert info == ProgramInfo(path=moc, version="tool 1.2.3")

    def test_cache_ignored_for_other_hints(self, tmp_path):
        make_tool(tmp_path / "qt5", "moc", "moc 5.15.2")
        qt6_moc = make_tool(tmp_path / "qt6", "moc", "moc 6.5.0")
        config = Configure(build_dir=tmp_path / "build")
        config.find_program("moc", hints=[tmp_path / "qt5"])

        info = config.find_program("moc", hints=[tmp_path / "qt6"])
        assert info == ProgramInfo(path=qt6_moc, version="moc 6.5.0")

    def test_cache_ignored_when_tool_removed(self, tmp_path):
        tool = make_tool(tmp_path / "bin", "qautogen-test-rcc")
        config = Configure(build_dir=tmp_path / "build")
        config.find_program("qautogen-test-rcc", hints=[tmp_path / "bin"])
        tool.unlink()
        assert config.find_program("qautogen-test-rcc", hints=[tmp_path / "bin"]) is None
