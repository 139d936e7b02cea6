# SPDX-License-Identifier: MIT
"""Core planning model: targets, classification, assembly and initialization."""
