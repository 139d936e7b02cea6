# SPDX-License-Identifier: MIT
"""Configurators for the Qt code generators (moc, uic, rcc)."""

from qautogen.toolchains.moc import MocConfigurator, MocSettings
from qautogen.toolchains.rcc import RccConfigurator, RccSettings, merge_rcc_options
from qautogen.toolchains.uic import UicConfigurator, UicSettings

__all__ = [
    # moc
    "MocConfigurator",
    "MocSettings",
    # uic
    "UicConfigurator",
    "UicSettings",
    # rcc
    "RccConfigurator",
    "RccSettings",
    "merge_rcc_options",
]
