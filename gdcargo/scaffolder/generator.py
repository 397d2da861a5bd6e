"""Project scaffolding.

Creates a new project directory either from the skeleton bundled with
gdcargo (rendered with Jinja2) or from a custom template fetched with
``cargo-generate``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from gdcargo.config import ToolConfig
from gdcargo.errors import (
    ExecutableNotFoundError,
    FileWriteError,
    TargetExistsError,
    TemplateFetchError,
)
from gdcargo.executor import run_command
from gdcargo.options import TARGET_SPECS, CustomTemplate, Template
from gdcargo.utils import crate_name, print_step

from .templates import TemplateRenderer

# Directories every skeleton has, even when no template file lands in them.
SKELETON_DIRS: tuple[str, ...] = (
    "bin",
    "godot/lib",
    "godot/native",
    "godot/scenes",
    "rust/src",
)


class ProjectGenerator:
    """Materialises a project directory from a template.

    The bundled skeleton contains a Rust crate (``rust/``) exposing a single
    ``Game`` class, a Godot project (``godot/``) wired to load the crate for
    every supported target, one export preset per target, and a
    ``gdcargo.json`` holding the default tool configuration.
    """

    def __init__(self, tool_config: ToolConfig, renderer: TemplateRenderer | None = None) -> None:
        self.tool_config = tool_config
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    async def generate(self, project_name: str, template: Template) -> Path:
        """Create ``<project_root>/<project_name>`` from *template*.

        Returns:
            Path to the generated project root.

        Raises:
            TargetExistsError: If the destination already exists.
            TemplateFetchError: If a custom template cannot be fetched.
            FileWriteError: If the skeleton cannot be written.
        """
        destination = self.tool_config.project_root / project_name
        if destination.exists():
            raise TargetExistsError(
                f"Destination already exists: {destination}", path=str(destination)
            )

        if isinstance(template, CustomTemplate):
            await self._fetch_custom(project_name, template, destination)
        else:
            await self._render_default(project_name, destination)
        return destination

    # -- Default skeleton --------------------------------------------------

    def build_context(self, project_name: str) -> dict[str, Any]:
        """Build the Jinja2 context for the bundled skeleton."""
        crate = crate_name(project_name)
        targets = [
            {
                "name": target.value,
                "triple": spec.triple,
                "library": spec.library_file(crate),
                "exe_ext": spec.exe_ext,
                "preset": spec.export_preset,
                "platform": spec.export_preset.split(".")[0],
                "gdnlib_key": spec.gdnlib_key,
            }
            for target, spec in TARGET_SPECS.items()
            if spec.export_preset is not None
        ]
        return {
            "project_name": project_name,
            "crate_name": crate,
            "targets": targets,
        }

    async def _render_default(self, project_name: str, destination: Path) -> None:
        context = self.build_context(project_name)
        try:
            await asyncio.to_thread(destination.mkdir, parents=True)
            for directory in SKELETON_DIRS:
                (destination / directory).mkdir(parents=True, exist_ok=True)
            await self.renderer.render_tree("project", destination, context)
            ToolConfig(project_root=destination).save()
        except OSError as e:
            raise FileWriteError(
                f"Cannot write project skeleton to {destination}: {e}",
                path=str(destination),
            )

    # -- Custom template ---------------------------------------------------

    async def _fetch_custom(
        self, project_name: str, template: CustomTemplate, destination: Path
    ) -> None:
        source_flag = "--path" if Path(template.git_url).is_dir() else "--git"
        cmd = [
            self.tool_config.toolchain.cargo_generate_exe,
            "generate",
            source_flag,
            template.git_url,
            "--name",
            project_name,
        ]
        print_step(" ".join(cmd))
        try:
            outcome = await run_command(cmd, cwd=destination.parent)
        except ExecutableNotFoundError as e:
            raise TemplateFetchError(
                f"Could not fetch template '{template.git_url}': {e.message}",
                command=e.command,
            )
        if not outcome.success:
            raise TemplateFetchError(
                f"Could not fetch template '{template.git_url}'",
                command=outcome.command_line,
                returncode=outcome.returncode,
                output=outcome.diagnostics(),
            )
