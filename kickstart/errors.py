"""Error taxonomy for kickstart.

Every error the tool raises on purpose derives from :class:`KickstartError`
so the CLI can print a single human-readable line and exit non-zero.
Validation errors are handled inside the prompt loop and never reach the CLI.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kickstart.pipeline import ScaffoldState
    from kickstart.scaffolder.installer import InstallResult


class KickstartError(Exception):
    """Base class for all errors raised by kickstart."""


class ValidationError(KickstartError):
    """User input failed validation (empty name, path collision)."""


class PromptCancelled(KickstartError):
    """The user aborted an interactive prompt."""

    def __init__(self, message: str = "Selection cancelled") -> None:
        super().__init__(message)


# ---------------------------------------------------------------------------
# Filesystem
# ---------------------------------------------------------------------------


class FilesystemError(KickstartError):
    """A directory or file could not be created."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{message}: {self.path}")


class DirectoryExistsError(FilesystemError):
    def __init__(self, path: str | Path) -> None:
        super().__init__(path, "Folder already exists")


class DirectoryCreateError(FilesystemError):
    def __init__(self, path: str | Path, reason: str = "") -> None:
        message = "Could not create folder"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(path, message)


class FileWriteError(FilesystemError):
    def __init__(self, path: str | Path, reason: str = "") -> None:
        message = "Could not write file"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(path, message)


# ---------------------------------------------------------------------------
# Package manager
# ---------------------------------------------------------------------------


class ExternalToolError(KickstartError):
    """A package-manager invocation failed.

    Carries the :class:`~kickstart.scaffolder.installer.InstallResult` when the
    failure came from a finished (or timed out) process.
    """

    def __init__(self, message: str, result: InstallResult | None = None) -> None:
        self.result = result
        super().__init__(message)


class ManifestError(ExternalToolError):
    """The package manifest is missing or is not a JSON object."""


# ---------------------------------------------------------------------------
# Programmer errors
# ---------------------------------------------------------------------------


class UnknownTemplateError(KickstartError):
    """Raised when a template id is not present in the registry."""

    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__(f"Unknown template: {template_id!r}")


class InvalidTransitionError(KickstartError):
    """The orchestrator attempted to move backwards or skip a state."""

    def __init__(self, current: ScaffoldState, target: ScaffoldState) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot move from {current.value} to {target.value}")


class ScaffoldError(KickstartError):
    """Raised by the orchestrator when a step fails irrecoverably."""

    def __init__(self, state: ScaffoldState, message: str) -> None:
        self.state = state
        super().__init__(message)
