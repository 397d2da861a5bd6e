"""Toolchain and engine invocations derived from (target, build type).

Everything in this module is a pure function of its arguments: the same
target, build type and configuration always produce the same argument lists
and paths, which is what lets ``export`` find the artifact a previous
``build`` left behind.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from gdcargo.config import ToolConfig
from gdcargo.errors import ConfigurationError
from gdcargo.options import BuildType, MachineType, Target


@dataclass(frozen=True)
class BuildPlan:
    """How to compile the library for one (target, build type) pair."""

    args: tuple[str, ...]
    cwd: Path
    artifact: Path
    destination: Path
    manifest: Path


@dataclass(frozen=True)
class ExportPlan:
    """How to package the game for one (target, build type) pair."""

    args: tuple[str, ...]
    cwd: Path
    preset: str
    required_artifact: Path
    manifest: Path
    package: Path


def read_crate_name(cargo_toml: Path) -> str:
    """Return the library name cargo uses for the crate described by *cargo_toml*.

    ``[lib] name`` wins; otherwise ``[package] name`` with hyphens replaced.

    Raises:
        ConfigurationError: If the manifest is missing, unparseable or unnamed.
    """
    try:
        with open(cargo_toml, "rb") as f:
            manifest = tomllib.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Cargo manifest not found: {cargo_toml}")
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Cannot parse {cargo_toml}: {e}")

    lib_name = manifest.get("lib", {}).get("name")
    if lib_name:
        return str(lib_name)
    package_name = manifest.get("package", {}).get("name")
    if not package_name:
        raise ConfigurationError(f"No package name in {cargo_toml}")
    return str(package_name).replace("-", "_")


def build_plan(
    config: ToolConfig, target: Target, build_type: BuildType, crate: str
) -> BuildPlan:
    """Resolve the toolchain invocation and artifact paths for a build."""
    spec = target.spec
    library = spec.library_file(crate)
    args = (
        config.toolchain.build_exe,
        "build",
        "--target",
        spec.triple,
        *build_type.cargo_flags,
    )
    artifact = config.rust_path / "target" / spec.triple / build_type.profile_dir / library
    return BuildPlan(
        args=args,
        cwd=config.rust_path,
        artifact=artifact,
        destination=config.lib_dir(target) / library,
        manifest=config.build_manifest_path(target),
    )


def export_plan(
    config: ToolConfig,
    target: Target,
    build_type: BuildType,
    crate: str,
    game_name: str,
) -> ExportPlan | None:
    """Resolve the engine export invocation, or ``None`` if *target* has no preset."""
    spec = target.spec
    if spec.export_preset is None:
        return None
    package = (config.bin_dir(target) / f"{game_name}.{spec.exe_ext}").resolve()
    args = (
        config.engine.godot_exe,
        "--path",
        ".",
        build_type.export_flag,
        spec.export_preset,
        str(package),
    )
    return ExportPlan(
        args=args,
        cwd=config.godot_path,
        preset=spec.export_preset,
        required_artifact=config.lib_dir(target) / spec.library_file(crate),
        manifest=config.build_manifest_path(target),
        package=package,
    )


def run_args(config: ToolConfig, machine_type: MachineType) -> tuple[str, ...]:
    """Engine invocation that runs the project in debug mode."""
    exe = (
        config.engine.server_exe
        if machine_type is MachineType.SERVER
        else config.engine.godot_exe
    )
    return (exe, "--path", ".", "-d", *machine_type.engine_flags)


class BuildManifest(BaseModel):
    """Written next to a copied library so ``export`` knows which build produced it."""

    target: Target
    build_type: BuildType
    crate: str
    library: str
    built_at: str = Field(default="")

    def save(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2) + "\n", encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "BuildManifest | None":
        """Return the manifest at *path*, or ``None`` if it is missing or unreadable."""
        try:
            return cls.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError):
            return None


def preset_defined(export_presets: Path, preset: str) -> bool:
    """Return ``True`` if *export_presets* declares a preset called *preset*."""
    try:
        text = export_presets.read_text(encoding="utf-8")
    except OSError:
        return False
    return any(line.strip() == f'name="{preset}"' for line in text.splitlines())
