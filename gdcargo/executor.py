"""Blocking invocation of external processes.

The toolchain, the template fetcher and the engine binary are all spawned
through :func:`run_command`. Each call is awaited to completion before the
caller moves on; there is no retry and, unless the caller asks for one, no
timeout.
"""

from __future__ import annotations

import asyncio
import os
import shlex
from dataclasses import dataclass
from pathlib import Path

from gdcargo.errors import ExecutableNotFoundError, ExternalProcessError


@dataclass
class ProcessOutcome:
    """What an external process left behind."""

    command: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return shlex.join(self.command)

    def diagnostics(self, max_lines: int = 40) -> str:
        """Return the tail of the captured output, stderr first."""
        text = "\n".join(part for part in (self.stderr, self.stdout) if part)
        lines = text.splitlines()
        if len(lines) > max_lines:
            lines = ["..."] + lines[-max_lines:]
        return "\n".join(lines)


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    capture: bool = True,
    env: dict[str, str] | None = None,
    timeout: float | None = None,
) -> ProcessOutcome:
    """Run an external command and wait for it to exit.

    Args:
        cmd: Program and arguments; no shell is involved.
        cwd: Working directory for the child process.
        capture: Whether to capture stdout/stderr.  If ``False`` the child
            inherits the parent's streams and the outcome carries no output.
        env: Optional extra environment variables merged on top of ``os.environ``.
        timeout: Seconds to wait before killing the child.  ``None`` waits
            for as long as the child runs.

    Returns:
        A :class:`ProcessOutcome` built from the exit status and any captured output.

    Raises:
        ExecutableNotFoundError: If the program does not exist.
        ExternalProcessError: If the program cannot be started or times out.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None
    cmd_str = shlex.join(cmd)

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=stdout_pipe,
            stderr=stderr_pipe,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )
    except FileNotFoundError:
        raise ExecutableNotFoundError(
            f"'{cmd[0]}' was not found. Ensure it is installed and in PATH.",
            command=cmd_str,
        )
    except PermissionError:
        raise ExternalProcessError(
            f"Permission denied executing '{cmd[0]}'.",
            command=cmd_str,
        )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        raise ExternalProcessError(
            f"Command timed out after {timeout}s: {cmd_str}",
            command=cmd_str,
        )
    finally:
        if process.returncode is None:
            process.kill()
            await process.wait()

    return ProcessOutcome(
        command=list(cmd),
        returncode=process.returncode if process.returncode is not None else -1,
        stdout=(stdout_bytes or b"").decode("utf-8", errors="replace").strip(),
        stderr=(stderr_bytes or b"").decode("utf-8", errors="replace").strip(),
    )
