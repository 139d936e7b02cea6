# SPDX-License-Identifier: MIT
"""Program discovery for the Qt code generators."""
