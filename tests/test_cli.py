# SPDX-License-Identifier: MIT
"""Tests for qautogen CLI."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from qautogen import __version__
from qautogen.cli import (
    build_target,
    load_description,
    main,
    parse_variables,
    setup_logging,
)
from qautogen.core.errors import AutogenError


@pytest.fixture
def project(tmp_path: Path, qt_tools: dict[str, Path]) -> Path:
    """A source tree with a target description."""
    src = tmp_path / "project"
    src.mkdir()
    (src / "window.h").write_text("class Window { Q_OBJECT };\n")
    (src / "main.cpp").write_text("int main() { return 0; }\n")
    (src / "logo.png").write_bytes(b"")
    (src / "res.qrc").write_text("<RCC><qresource><file>logo.png</file></qresource></RCC>\n")
    description = src / "target.toml"
    description.write_text(
        f"""\
name = "app"
sources = ["window.h", "main.cpp", "res.qrc"]

[properties]
AUTOMOC = true
AUTORCC = true

[build]
configs = ["Debug", "Release"]

[qt]
version = "5.15"
tools = {{ moc = "{qt_tools['moc'].as_posix()}", rcc = "{qt_tools['rcc'].as_posix()}" }}
"""
    )
    return description


class TestParseVariables:
    def test_parse_variables(self) -> None:
        """Test KEY=value parsing."""
        variables, remaining = parse_variables(["AUTOUIC=ON", "-x", "=bad", "plain"])
        assert variables == {"AUTOUIC": "ON"}
        assert remaining == ["-x", "=bad", "plain"]


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_normal(self) -> None:
        setup_logging(verbose=False, debug=False)

    def test_setup_logging_verbose(self) -> None:
        setup_logging(verbose=True, debug=False)

    def test_setup_logging_debug(self) -> None:
        setup_logging(verbose=False, debug=True)


class TestDescription:
    def test_load(self, project: Path) -> None:
        data = load_description(project)
        assert data["name"] == "app"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(AutogenError, match="cannot read"):
            load_description(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("name = \n")
        with pytest.raises(AutogenError, match="invalid target description"):
            load_description(path)

    def test_name_required(self, tmp_path: Path) -> None:
        path = tmp_path / "noname.toml"
        path.write_text('sources = ["a.cpp"]\n')
        with pytest.raises(AutogenError, match="no 'name'"):
            load_description(path)

    def test_build_target(self, tmp_path: Path) -> None:
        data = {
            "name": "app",
            "sources": ["a.h"],
            "files": [{"path": "b.h", "properties": {"SKIP_AUTOMOC": True}}],
            "dependencies": ["core"],
            "properties": {"AUTOMOC": True},
            "config_properties": {"Debug": {"COMPILE_DEFINITIONS": ["DEBUG"]}},
        }
        target = build_target(data, tmp_path, tmp_path / "build", {"AUTOUIC": "ON"})
        assert [s.path for s in target.sources] == [tmp_path / "a.h", tmp_path / "b.h"]
        assert target.sources[1].flag("SKIP_AUTOMOC")
        assert [d.name for d in target.dependencies] == ["core"]
        assert target.property_bool("AUTOUIC")
        assert target.property_list("COMPILE_DEFINITIONS", "Debug") == ["DEBUG"]

    def test_file_entry_without_path(self, tmp_path: Path) -> None:
        data = {"name": "app", "files": [{"properties": {"SKIP_AUTOMOC": True}}]}
        with pytest.raises(AutogenError, match="has no 'path'"):
            build_target(data, tmp_path, tmp_path / "build")

    def test_init_reports_file_entry_without_path(self, tmp_path: Path) -> None:
        description = tmp_path / "target.toml"
        description.write_text('name = "app"\n[[files]]\nproperties = { SKIP_AUTOMOC = true }\n')
        assert main(["init", "-B", str(tmp_path / "out"), str(description)]) == 1


class TestCommands:
    def test_init(self, project: Path, tmp_path: Path, capsys) -> None:
        build = tmp_path / "out"
        assert main(["init", "-B", str(build), str(project)]) == 0
        out = capsys.readouterr().out
        assert "app_autogen: Automatic MOC for target app" in out
        assert "app_arcc_res" in out
        assert (build / "app_autogen.dir" / "AutogenInfo.txt").is_file()
        assert (build / "app_autogen.dir" / "RCCresInfo.txt").is_file()
        assert (build / "qautogen_config.json").is_file()

    def test_status(self, project: Path, tmp_path: Path, capsys) -> None:
        build = tmp_path / "out"
        assert main(["status", "-B", str(build), str(project)]) == 1
        assert "stale:" in capsys.readouterr().out

        main(["init", "-B", str(build), str(project)])
        capsys.readouterr()
        assert main(["status", "-B", str(build), str(project)]) == 0
        assert "up to date" in capsys.readouterr().out

        # A property override changes the inputs
        assert main(["status", "-B", str(build), str(project), "AUTOMOC_MOC_OPTIONS=-nw"]) == 1

    def test_init_reports_fatal_error(self, tmp_path: Path) -> None:
        description = tmp_path / "target.toml"
        description.write_text('name = "app"\n[qt]\nversion = "3.3"\n')
        assert main(["init", "-B", str(tmp_path / "out"), str(description)]) == 1

    def test_no_command(self, capsys) -> None:
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out


class TestCLISubprocess:
    def test_help(self) -> None:
        """Test qautogen --help."""
        result = subprocess.run(
            [sys.executable, "-m", "qautogen.cli", "--help"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert "qautogen" in result.stdout
        assert "init" in result.stdout
        assert "status" in result.stdout

    def test_version(self) -> None:
        """Test qautogen --version."""
        result = subprocess.run(
            [sys.executable, "-m", "qautogen.cli", "--version"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert __version__ in result.stdout
