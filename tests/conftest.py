# SPDX-License-Identifier: MIT
"""Shared fixtures for the qautogen tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from qautogen.core.config import QtVersion
from qautogen.core.graph import RecordingBuildGraph
from qautogen.core.target import Target
from qautogen.tools.toolchain import QtToolchain

QOBJECT_HEADER = """\
#include <QObject>

class Widget : public QObject
{
    Q_OBJECT
public:
    Widget();
};
"""

PLAIN_SOURCE = """\
#include "widget.h"

int main() { return 0; }
"""

UI_SOURCE = """\
#include "ui_form.h"

void setup() {}
"""

UI_FORM = """\
<ui version="4.0">
 <class>Form</class>
 <widget class="QWidget" name="Form"/>
</ui>
"""


def write_qrc(path: Path, *files: str) -> Path:
    """Write a resource manifest listing files."""
    entries = "\n".join(f"    <file>{f}</file>" for f in files)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f'<RCC>\n  <qresource prefix="/">\n{entries}\n  </qresource>\n</RCC>\n')
    return path


@pytest.fixture
def qt_tools(tmp_path: Path) -> dict[str, Path]:
    """Fake moc/uic/rcc executables."""
    bin_dir = tmp_path / "qt" / "bin"
    bin_dir.mkdir(parents=True)
    tools = {}
    for name in ("moc", "uic", "rcc"):
        tool = bin_dir / name
        tool.write_text("#!/bin/sh\n")
        tool.chmod(0o755)
        tools[name] = tool
    return tools


@pytest.fixture
def toolchain(qt_tools: dict[str, Path]) -> QtToolchain:
    return QtToolchain(QtVersion(5, 15), tools=dict(qt_tools))


@pytest.fixture
def graph() -> RecordingBuildGraph:
    return RecordingBuildGraph()


@pytest.fixture
def src_dir(tmp_path: Path) -> Path:
    path = tmp_path / "src"
    path.mkdir()
    return path


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    path = tmp_path / "build"
    path.mkdir()
    return path


@pytest.fixture
def app(src_dir: Path, build_dir: Path) -> Target:
    """Target with a Q_OBJECT header, a plain source and a resource manifest."""
    (src_dir / "a.h").write_text(QOBJECT_HEADER)
    (src_dir / "a.cpp").write_text(PLAIN_SOURCE)
    (src_dir / "icon.png").write_bytes(b"\x89PNG")
    write_qrc(src_dir / "b.qrc", "icon.png")

    target = Target(
        "app",
        source_dir=src_dir,
        binary_dir=build_dir,
        properties={"AUTOMOC": True, "AUTOUIC": True, "AUTORCC": True},
    )
    target.add_sources(["a.h", "a.cpp", "b.qrc"])
    return target
