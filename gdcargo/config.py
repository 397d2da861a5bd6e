"""gdcargo configuration.

Typed configuration for the tool itself: which executables to spawn and
where a project keeps its engine and Rust halves. All settings use Pydantic
v2 models so a ``gdcargo.json`` file or environment variables are validated
when the configuration is built.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from gdcargo.errors import ConfigurationError
from gdcargo.options import Target

CONFIG_FILE_NAME = "gdcargo.json"

_TRUTHY = {"1", "true", "yes", "on"}


class EngineConfig(BaseModel):
    """Where the game engine lives and how it is invoked."""

    godot_exe: str = Field(default="godot")
    godot_server_exe: str | None = Field(
        default=None, description="Binary used by `run server`; falls back to godot_exe"
    )
    project_dir: str = Field(default="godot", description="Engine project directory")

    @property
    def server_exe(self) -> str:
        return self.godot_server_exe or self.godot_exe


class ToolchainConfig(BaseModel):
    """Native toolchain settings."""

    cargo_exe: str = Field(default="cargo")
    cross_exe: str = Field(default="cross")
    enable_cross_compilation: bool = Field(
        default=False, description="Build with `cross` instead of `cargo`"
    )
    cargo_generate_exe: str = Field(default="cargo-generate")
    rust_dir: str = Field(default="rust", description="Rust crate directory")

    @property
    def build_exe(self) -> str:
        return self.cross_exe if self.enable_cross_compilation else self.cargo_exe


class ToolConfig(BaseModel):
    """Global gdcargo configuration.

    Built once by the CLI entry point and handed to the ``Processor``.
    """

    project_root: Path = Field(default=Path("."))
    engine: EngineConfig = Field(default_factory=EngineConfig)
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def godot_path(self) -> Path:
        return self.project_root / self.engine.project_dir

    @property
    def rust_path(self) -> Path:
        return self.project_root / self.toolchain.rust_dir

    @property
    def cargo_toml_path(self) -> Path:
        return self.rust_path / "Cargo.toml"

    @property
    def lib_rs_path(self) -> Path:
        """The crate root that registers every generated class."""
        return self.rust_path / "src" / "lib.rs"

    @property
    def project_godot_path(self) -> Path:
        return self.godot_path / "project.godot"

    @property
    def export_presets_path(self) -> Path:
        return self.godot_path / "export_presets.cfg"

    @property
    def native_dir(self) -> Path:
        """Directory holding ``.gdns``/``.gdnlib`` resources."""
        return self.godot_path / "native"

    @property
    def scenes_dir(self) -> Path:
        return self.godot_path / "scenes"

    @property
    def config_file_path(self) -> Path:
        return self.project_root / CONFIG_FILE_NAME

    def lib_dir(self, target: Target) -> Path:
        """Directory the built library for *target* is copied into.

        It lives inside the engine project so ``res://`` paths can reach it.
        """
        return self.godot_path / "lib" / target.value

    def build_manifest_path(self, target: Target) -> Path:
        """Record of the last successful build copied into ``lib_dir(target)``."""
        return self.lib_dir(target) / "gdcargo-build.json"

    def bin_dir(self, target: Target) -> Path:
        """Directory exported packages for *target* are written to."""
        return self.project_root / "bin" / target.value

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path | None = None) -> Path:
        """Persist the configuration (without ``project_root``) to JSON.

        Args:
            path: Destination file. Defaults to ``<project_root>/gdcargo.json``.

        Returns:
            The path where the file was written.
        """
        target = path or self.config_file_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            self.model_dump_json(indent=2, exclude={"project_root"}) + "\n",
            encoding="utf-8",
        )
        return target

    @classmethod
    def load(cls, path: Path, project_root: Path | None = None) -> "ToolConfig":
        """Load a configuration file.

        Raises:
            ConfigurationError: If the file cannot be read or does not validate.
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
            config = cls.model_validate_json(raw)
        except OSError as e:
            raise ConfigurationError(f"Cannot read {path}: {e}")
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {path}: {e}")
        config.project_root = project_root if project_root is not None else path.parent
        return config

    @classmethod
    def from_env(cls, project_root: Path | None = None) -> "ToolConfig":
        """Build a ``ToolConfig`` from environment variables.

        Recognised variables (all optional):
            GDCARGO_GODOT_EXE, GDCARGO_GODOT_SERVER_EXE, GDCARGO_CARGO_EXE,
            GDCARGO_CROSS_EXE, GDCARGO_ENABLE_CROSS, GDCARGO_CARGO_GENERATE_EXE.
        """
        config = cls(project_root=project_root or Path("."))
        config.apply_env()
        return config

    def apply_env(self) -> None:
        """Override fields with any ``GDCARGO_*`` environment variables that are set."""
        engine_kwargs: dict[str, Any] = {}
        if os.environ.get("GDCARGO_GODOT_EXE"):
            engine_kwargs["godot_exe"] = os.environ["GDCARGO_GODOT_EXE"]
        if os.environ.get("GDCARGO_GODOT_SERVER_EXE"):
            engine_kwargs["godot_server_exe"] = os.environ["GDCARGO_GODOT_SERVER_EXE"]

        toolchain_kwargs: dict[str, Any] = {}
        if os.environ.get("GDCARGO_CARGO_EXE"):
            toolchain_kwargs["cargo_exe"] = os.environ["GDCARGO_CARGO_EXE"]
        if os.environ.get("GDCARGO_CROSS_EXE"):
            toolchain_kwargs["cross_exe"] = os.environ["GDCARGO_CROSS_EXE"]
        if os.environ.get("GDCARGO_ENABLE_CROSS"):
            toolchain_kwargs["enable_cross_compilation"] = (
                os.environ["GDCARGO_ENABLE_CROSS"].strip().lower() in _TRUTHY
            )
        if os.environ.get("GDCARGO_CARGO_GENERATE_EXE"):
            toolchain_kwargs["cargo_generate_exe"] = os.environ["GDCARGO_CARGO_GENERATE_EXE"]

        if engine_kwargs:
            self.engine = self.engine.model_copy(update=engine_kwargs)
        if toolchain_kwargs:
            self.toolchain = self.toolchain.model_copy(update=toolchain_kwargs)

    @classmethod
    def discover(cls, project_root: Path | None = None) -> "ToolConfig":
        """Load ``gdcargo.json`` from *project_root* if present, then apply the environment."""
        root = Path(project_root) if project_root is not None else Path(".")
        config_file = root / CONFIG_FILE_NAME
        if config_file.is_file():
            config = cls.load(config_file, project_root=root)
        else:
            config = cls(project_root=root)
        config.apply_env()
        return config
