"""Shared pytest fixtures for the gdcargo test suite.

Provides reusable fixtures for:
- Tool configurations rooted in a temporary directory
- A freshly scaffolded project from the bundled skeleton
- Mock subprocess helpers
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from gdcargo.config import ToolConfig
from gdcargo.options import DefaultTemplate
from gdcargo.scaffolder import ProjectGenerator

# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------

_ENV_VARS = (
    "GDCARGO_GODOT_EXE",
    "GDCARGO_GODOT_SERVER_EXE",
    "GDCARGO_CARGO_EXE",
    "GDCARGO_CROSS_EXE",
    "GDCARGO_ENABLE_CROSS",
    "GDCARGO_CARGO_GENERATE_EXE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's GDCARGO_* variables out of the tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Paths & configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Directory new projects are created in."""
    path = tmp_path / "workspace"
    path.mkdir()
    return path


@pytest.fixture
def workspace_config(workspace: Path) -> ToolConfig:
    return ToolConfig(project_root=workspace)


@pytest.fixture
async def project(workspace_config: ToolConfig) -> Path:
    """A project generated from the bundled skeleton, named ``my-game``."""
    return await ProjectGenerator(workspace_config).generate("my-game", DefaultTemplate())


@pytest.fixture
def project_config(project: Path) -> ToolConfig:
    return ToolConfig(project_root=project)


# ---------------------------------------------------------------------------
# Mock subprocess (generic)
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
