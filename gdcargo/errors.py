"""Error taxonomy for gdcargo.

Every failure a command can hit is raised as a subclass of ``GdcargoError``.
The CLI catches the root class only and renders it through
:mod:`gdcargo.reporting`; nothing below the CLI prints errors itself.
"""

from __future__ import annotations


class GdcargoError(Exception):
    """Root of every error a command can report."""

    kind = "error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_message(self) -> str:
        """Return the human-readable line shown to the operator."""
        return f"{self.kind}: {self.message}"


class ConfigurationError(GdcargoError):
    """A project or tool configuration file is missing or cannot be parsed."""

    kind = "configuration error"


# ---------------------------------------------------------------------------
# File-system failures
# ---------------------------------------------------------------------------


class ProjectIOError(GdcargoError):
    """A file or directory could not be created or written."""

    kind = "io error"

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class TargetExistsError(ProjectIOError):
    """The directory a new project would be created in already exists."""

    kind = "target exists"


class FileWriteError(ProjectIOError):
    """A generated file collides with an existing one or cannot be written."""

    kind = "file write error"


# ---------------------------------------------------------------------------
# External process failures
# ---------------------------------------------------------------------------


class ExternalProcessError(GdcargoError):
    """An external toolchain or engine process is missing or failed."""

    kind = "external process error"

    def __init__(
        self,
        message: str,
        command: str = "",
        returncode: int | None = None,
        output: str = "",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        super().__init__(message)

    def to_message(self) -> str:
        text = super().to_message()
        if self.output:
            text = f"{text}\n{self.output}"
        return text


class ExecutableNotFoundError(ExternalProcessError):
    """The binary for an external process is not installed or not on PATH."""

    kind = "executable not found"


class TemplateFetchError(ExternalProcessError):
    """A custom project template could not be fetched."""

    kind = "template fetch error"


class ExecutionError(ExternalProcessError):
    """The game engine could not be launched or exited non-zero."""

    kind = "execution error"


class BuildError(ExternalProcessError):
    """The native library build failed."""

    kind = "build error"


class ExportError(ExternalProcessError):
    """The engine export step failed or no preset exists for the target."""

    kind = "export error"


class DependencyError(GdcargoError):
    """A command needs the output of a previous command that never ran."""

    kind = "dependency error"
