# SPDX-License-Identifier: MIT
"""Custom exceptions for qautogen.

All qautogen exceptions inherit from AutogenError, which includes
optional location information (usually the offending file or the
generator name) for better error messages.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path


class AutogenError(Exception):
    """Base class for all qautogen exceptions.

    Attributes:
        message: The error message.
        location: Optional location (path or generator) the error refers to.
    """

    def __init__(
        self,
        message: str,
        location: str | None = None,
    ) -> None:
        self.message = message
        self.location = location
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message


class ConfigureError(AutogenError):
    """Error while configuring a generator.

    Raised for invalid target properties or an unsupported Qt version.

    Attributes:
        generator: Upper-case generator name (MOC, UIC, RCC) or None.
    """

    def __init__(
        self,
        message: str,
        location: str | None = None,
        *,
        generator: str | None = None,
    ) -> None:
        self.generator = generator
        super().__init__(message, location)


class ToolNotFoundError(ConfigureError):
    """A generator executable could not be resolved.

    Attributes:
        tool: The logical tool name or explicit path that was not found.
    """

    def __init__(
        self,
        tool: str,
        location: str | None = None,
        *,
        generator: str | None = None,
    ) -> None:
        self.tool = tool
        super().__init__(f"tool not found: {tool}", location, generator=generator)


class ParseError(AutogenError):
    """A resource manifest could not be parsed.

    Attributes:
        path: Path of the malformed manifest.
        reason: Human-readable reason.
    """

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot parse resource manifest: {reason}", str(path))


class ClassificationConflictError(AutogenError):
    """A file is claimed by generators in a mutually exclusive way.

    Attributes:
        path: The conflicting file.
        kinds: Names of the generators claiming it.
    """

    def __init__(self, path: Path | str, kinds: Iterable[str], reason: str) -> None:
        self.path = Path(path)
        self.kinds = tuple(kinds)
        claimed = ", ".join(self.kinds)
        super().__init__(f"claimed by {claimed}: {reason}", str(path))


class SettingsWriteError(AutogenError):
    """An info file could not be persisted.

    Attributes:
        path: The destination that could not be written.
    """

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"cannot write settings file: {reason}", str(path))


class InitializationError(AutogenError):
    """Target initialization aborted.

    Attributes:
        errors: The fatal errors that caused the abort.
    """

    def __init__(self, target: str, errors: list[AutogenError]) -> None:
        self.errors = list(errors)
        details = "; ".join(str(e) for e in self.errors)
        super().__init__(f"autogen initialization failed: {details}", target)
