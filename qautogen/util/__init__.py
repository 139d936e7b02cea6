# SPDX-License-Identifier: MIT
"""Checksum and file helpers."""
