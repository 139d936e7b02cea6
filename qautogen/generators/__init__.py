# SPDX-License-Identifier: MIT
"""Info file emitters for qautogen."""

from qautogen.generators.autogen_info import AutogenInfoEmitter
from qautogen.generators.generator import BaseEmitter, InfoReader, InfoWriter
from qautogen.generators.rcc_info import RccInfoEmitter

__all__ = [
    "AutogenInfoEmitter",
    "BaseEmitter",
    "InfoReader",
    "InfoWriter",
    "RccInfoEmitter",
]
