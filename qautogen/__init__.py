# SPDX-License-Identifier: MIT
"""
qautogen: planning stage of the Qt autogen pipeline.

qautogen decides which files of a build target need the Qt code
generators (moc, uic, rcc), writes the info files the build-time
execution stage reads, and adds the generation steps to a build graph.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Re-export commonly used classes for convenient imports
from qautogen.configure.config import Configure  # noqa: E402
from qautogen.core.config import BuildConfigs, GenKind, QtVersion  # noqa: E402
from qautogen.core.errors import AutogenError, InitializationError  # noqa: E402
from qautogen.core.graph import BuildStep, RecordingBuildGraph  # noqa: E402
from qautogen.core.initializer import (  # noqa: E402
    AutogenInitializer,
    InitializerOptions,
    InitResult,
)
from qautogen.core.target import Target  # noqa: E402
from qautogen.tools.toolchain import QtToolchain  # noqa: E402

__all__ = [
    "AutogenError",
    "AutogenInitializer",
    "BuildConfigs",
    "BuildStep",
    "Configure",
    "GenKind",
    "InitResult",
    "InitializationError",
    "InitializerOptions",
    "QtToolchain",
    "QtVersion",
    "RecordingBuildGraph",
    "Target",
    "__version__",
]
