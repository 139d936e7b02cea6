# SPDX-License-Identifier: MIT
"""Qt toolchain and generator configurator base."""
