"""Command dispatch.

:class:`Processor` is the single place a :data:`~gdcargo.commands.Command`
is turned into work: each variant has exactly one handler, and each handler
either finishes with a :class:`~gdcargo.reporting.Success` or raises a
:class:`~gdcargo.errors.GdcargoError`.
"""

from __future__ import annotations

import shutil
from datetime import datetime, timezone

from gdcargo.commands import Build, Class, Command, Export, New, Run, Singleton
from gdcargo.config import ToolConfig
from gdcargo.errors import (
    BuildError,
    DependencyError,
    ExecutableNotFoundError,
    ExecutionError,
    ExportError,
    FileWriteError,
    GdcargoError,
)
from gdcargo.executor import run_command
from gdcargo.options import BuildType, MachineType, NodeType, Target, Template
from gdcargo.reporting import ExecutionOutcome, Failure, Success
from gdcargo.scaffolder import ClassGenerator, ProjectGenerator
from gdcargo.toolchain import (
    BuildManifest,
    build_plan,
    export_plan,
    preset_defined,
    read_crate_name,
    run_args,
)
from gdcargo.utils import ensure_dir, print_step, print_summary_table


class Processor:
    """Executes one command against one project.

    Attributes:
        config: Tool configuration; ``config.project_root`` is the directory
            the command operates on.
    """

    def __init__(self, config: ToolConfig) -> None:
        self.config = config

    async def execute(self, command: Command) -> ExecutionOutcome:
        """Process *command*, folding any :class:`GdcargoError` into a ``Failure``."""
        try:
            return await self.process(command)
        except GdcargoError as e:
            return Failure.from_error(e)

    async def process(self, command: Command) -> Success:
        match command:
            case New(project_name=project_name, template=template):
                return await self._new(project_name, template)
            case Class(class_name=class_name, node_type=node_type):
                return await self._class(class_name, node_type)
            case Singleton(class_name=class_name):
                return await self._singleton(class_name)
            case Run(machine_type=machine_type):
                return await self._run(machine_type)
            case Build(target=target, build_type=build_type):
                return await self._build(target, build_type)
            case Export(target=target, build_type=build_type):
                return await self._export(target, build_type)
        raise TypeError(f"Unsupported command: {command!r}")

    # ------------------------------------------------------------------
    # Scaffolding
    # ------------------------------------------------------------------

    async def _new(self, project_name: str, template: Template) -> Success:
        path = await ProjectGenerator(self.config).generate(project_name, template)
        return Success(f"Project '{project_name}' created at {path} (template: {template})")

    async def _class(self, class_name: str, node_type: NodeType) -> Success:
        spec = await ClassGenerator(self.config).generate_class(class_name, node_type)
        return Success(f"Class '{spec.class_name}' ({node_type.value}) created at {spec.rust_file}")

    async def _singleton(self, class_name: str) -> Success:
        spec = await ClassGenerator(self.config).generate_singleton(class_name)
        return Success(f"Singleton '{spec.class_name}' created and autoloaded from {spec.gdns_resource}")

    # ------------------------------------------------------------------
    # External toolchain / engine
    # ------------------------------------------------------------------

    async def _run(self, machine_type: MachineType) -> Success:
        await self._build(Target.host(), BuildType.DEBUG)

        args = list(run_args(self.config, machine_type))
        print_step(" ".join(args))
        try:
            outcome = await run_command(args, cwd=self.config.godot_path, capture=False)
        except ExecutableNotFoundError as e:
            raise ExecutionError(e.message, command=e.command)
        if not outcome.success:
            raise ExecutionError(
                f"Game exited with code {outcome.returncode}",
                command=outcome.command_line,
                returncode=outcome.returncode,
            )
        return Success(f"Game finished ({machine_type.value})")

    async def _build(self, target: Target, build_type: BuildType) -> Success:
        crate = read_crate_name(self.config.cargo_toml_path)
        plan = build_plan(self.config, target, build_type, crate)

        print_step(" ".join(plan.args))
        try:
            outcome = await run_command(list(plan.args), cwd=plan.cwd)
        except ExecutableNotFoundError as e:
            raise BuildError(e.message, command=e.command)
        if not outcome.success:
            raise BuildError(
                f"Building for {target.value} ({build_type.value}) failed",
                command=outcome.command_line,
                returncode=outcome.returncode,
                output=outcome.diagnostics(),
            )
        if not plan.artifact.is_file():
            raise BuildError(
                f"Build succeeded but {plan.artifact} was not produced",
                command=outcome.command_line,
                returncode=outcome.returncode,
            )

        try:
            ensure_dir(plan.destination.parent)
            shutil.copy2(plan.artifact, plan.destination)
            BuildManifest(
                target=target,
                build_type=build_type,
                crate=crate,
                library=plan.destination.name,
                built_at=datetime.now(timezone.utc).isoformat(),
            ).save(plan.manifest)
        except OSError as e:
            raise FileWriteError(f"Cannot copy library to {plan.destination}: {e}", path=str(plan.destination))

        print_summary_table(
            {
                "Target": target.value,
                "Triple": target.spec.triple,
                "Profile": build_type.value,
                "Library": str(plan.destination),
            },
            title="Build",
        )

        return Success(f"Built {target.value} ({build_type.value}): {plan.destination}")

    async def _export(self, target: Target, build_type: BuildType) -> Success:
        manifest = BuildManifest.load(self.config.build_manifest_path(target))
        if (
            manifest is None
            or manifest.target is not target
            or manifest.build_type is not build_type
        ):
            raise self._missing_build(target, build_type)

        crate = read_crate_name(self.config.cargo_toml_path)
        game_name = self.config.project_root.resolve().name
        plan = export_plan(self.config, target, build_type, crate, game_name)
        if plan is None:
            raise ExportError(f"No export preset is defined for {target.value}")
        if not plan.required_artifact.is_file():
            raise self._missing_build(target, build_type)
        if not preset_defined(self.config.export_presets_path, plan.preset):
            raise ExportError(
                f"Export preset '{plan.preset}' is not defined in {self.config.export_presets_path}"
            )

        try:
            ensure_dir(plan.package.parent)
        except OSError as e:
            raise FileWriteError(f"Cannot create {plan.package.parent}: {e}", path=str(plan.package.parent))

        print_step(" ".join(plan.args))
        try:
            outcome = await run_command(list(plan.args), cwd=plan.cwd)
        except ExecutableNotFoundError as e:
            raise ExportError(e.message, command=e.command)
        if not outcome.success:
            raise ExportError(
                f"Exporting {target.value} ({build_type.value}) failed",
                command=outcome.command_line,
                returncode=outcome.returncode,
                output=outcome.diagnostics(),
            )
        return Success(f"Exported {target.value} ({build_type.value}): {plan.package}")

    def _missing_build(self, target: Target, build_type: BuildType) -> DependencyError:
        return DependencyError(
            f"No {build_type.value} build for {target.value} found in {self.config.lib_dir(target)}. "
            f"Run `gdcargo build {target.value} {build_type.value}` first."
        )
