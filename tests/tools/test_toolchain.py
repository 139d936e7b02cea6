# SPDX-License-Identifier: MIT
"""Tests for qautogen.tools.toolchain."""

from __future__ import annotations

from pathlib import Path

import pytest

from qautogen.configure.config import Configure
from qautogen.core.config import BuildConfigs, GenKind, QtVersion
from qautogen.core.errors import ConfigureError, ToolNotFoundError
from qautogen.core.target import Target
from qautogen.toolchains.moc import MocConfigurator
from qautogen.tools.toolchain import (
    GeneratorConfig,
    QtToolchain,
    ResolvedTool,
    ToolResolver,
)


def make_tool(directory: Path, name: str, version_line: str | None = None) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    tool = directory / name
    if version_line is None:
        tool.write_text("#!/bin/sh\n")
    else:
        tool.write_text(f"#!/bin/sh\necho '{version_line}'\n")
    tool.chmod(0o755)
    return tool


class TestQtToolchain:
    def test_is_tool_resolver(self) -> None:
        assert isinstance(QtToolchain(QtVersion(5, 15)), ToolResolver)

    def test_explicit_tools(self, tmp_path: Path) -> None:
        moc = make_tool(tmp_path, "moc")
        toolchain = QtToolchain(QtVersion(5, 15), tools={"moc": moc})
        assert toolchain.resolve("moc") == ResolvedTool(moc)

    def test_not_found(self) -> None:
        with pytest.raises(ToolNotFoundError) as exc_info:
            QtToolchain(QtVersion(5, 15)).resolve("uic")
        assert exc_info.value.tool == "uic"

    def test_versioned_name_preferred(self, tmp_path: Path) -> None:
        bin_dir = tmp_path / "bin"
        versioned = make_tool(bin_dir, "rcc-qt5")
        make_tool(bin_dir, "rcc")
        configure = Configure(build_dir=tmp_path / "build")
        toolchain = QtToolchain(QtVersion(5, 15), hints=[bin_dir], configure=configure)
        assert toolchain.resolve("rcc").path == versioned

    def test_override_built_tool(self) -> None:
        toolchain = QtToolchain(
            QtVersion(6, 5), built_tools={"mymoc": "/build/bin/mymoc"}
        )
        tool = toolchain.resolve_override("mymoc")
        assert tool == ResolvedTool(Path("/build/bin/mymoc"), target="mymoc")

    def test_override_path(self, tmp_path: Path) -> None:
        uic = make_tool(tmp_path, "uic")
        assert QtToolchain(QtVersion(6, 5)).resolve_override(str(uic)).path == uic

    def test_override_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ToolNotFoundError):
            QtToolchain(QtVersion(6, 5)).resolve_override(str(tmp_path / "nope"))

    def test_detect(self, tmp_path: Path) -> None:
        bin_dir = tmp_path / "bin"
        make_tool(bin_dir, "moc-qt5", "moc 5.15.2")
        configure = Configure(build_dir=tmp_path / "build")
        toolchain = QtToolchain.detect(configure, hints=[bin_dir])
        assert toolchain.version == QtVersion(5, 15)
        assert toolchain.configure is configure

    def test_detect_unparsable_version(self, tmp_path: Path) -> None:
        bin_dir = tmp_path / "bin"
        make_tool(bin_dir, "moc-qt6", "moc")
        configure = Configure(build_dir=tmp_path / "build")
        with pytest.raises(ConfigureError, match="cannot determine Qt version"):
            QtToolchain.detect(configure, hints=[bin_dir])


class TestBaseConfigurator:
    def test_disabled(self, tmp_path: Path) -> None:
        target = Target("app", source_dir=tmp_path, binary_dir=tmp_path)
        config = MocConfigurator().configure(target, BuildConfigs(), QtToolchain(QtVersion(5, 15)))
        assert config == GeneratorConfig.disabled(GenKind.MOC)
        assert not config.enabled

    def test_tool_not_found_names_generator(self, tmp_path: Path) -> None:
        target = Target("app", source_dir=tmp_path, binary_dir=tmp_path, properties={"AUTOMOC": True})
        with pytest.raises(ToolNotFoundError) as exc_info:
            MocConfigurator().configure(target, BuildConfigs(), QtToolchain(QtVersion(5, 15)))
        assert exc_info.value.generator == "MOC"
        assert exc_info.value.location == "app"

    def test_executable_override(self, tmp_path: Path) -> None:
        target = Target(
            "app",
            source_dir=tmp_path,
            binary_dir=tmp_path,
            properties={"AUTOMOC": True, "AUTOMOC_EXECUTABLE": "mymoc"},
        )
        toolchain = QtToolchain(QtVersion(5, 15), built_tools={"mymoc": tmp_path / "mymoc"})
        config = MocConfigurator().configure(target, BuildConfigs(), toolchain)
        assert config.enabled
        assert config.executable == tmp_path / "mymoc"
        assert config.executable_target == "mymoc"
