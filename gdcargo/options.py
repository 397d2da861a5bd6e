"""Configuration values parsed from command-line text.

Each type here has a ``parse`` classmethod that is total: unknown text never
raises, it resolves to the type's default. The one exception to "unknown means
default" is :class:`Template`, where any text other than ``default`` is taken
to be the location of a custom template.

The :data:`TARGET_SPECS` table holds everything that differs per target
platform (toolchain triple, library naming, export preset), so adding a
platform means adding a row, not a branch.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from gdcargo.host import get_current_platform


def _normalise(text: str | None) -> str:
    return (text or "").strip().lower()


# ---------------------------------------------------------------------------
# Template
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Template:
    """Source of the initial project scaffold."""

    @staticmethod
    def parse(text: str | None) -> "Template":
        """Return ``DefaultTemplate`` for ``default`` or blank text, else a custom template."""
        if not text or not text.strip() or _normalise(text) == "default":
            return DefaultTemplate()
        return CustomTemplate(git_url=text.strip())


@dataclass(frozen=True)
class DefaultTemplate(Template):
    """The skeleton bundled with gdcargo."""

    def __str__(self) -> str:
        return "default"


@dataclass(frozen=True)
class CustomTemplate(Template):
    """A template fetched from a git URL or local path."""

    git_url: str

    def __str__(self) -> str:
        return self.git_url


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class MachineType(str, Enum):
    """How ``run`` launches the engine."""

    DESKTOP = "desktop"
    SERVER = "server"

    @classmethod
    def parse(cls, text: str | None) -> "MachineType":
        try:
            return cls(_normalise(text))
        except ValueError:
            return cls.DESKTOP

    @property
    def engine_flags(self) -> list[str]:
        """Extra flags passed to the engine binary for this machine type."""
        if self is MachineType.SERVER:
            return ["--no-window"]
        return []


class BuildType(str, Enum):
    """Compilation profile."""

    DEBUG = "debug"
    RELEASE = "release"

    @classmethod
    def parse(cls, text: str | None) -> "BuildType":
        try:
            return cls(_normalise(text))
        except ValueError:
            return cls.DEBUG

    @property
    def cargo_flags(self) -> list[str]:
        return ["--release"] if self is BuildType.RELEASE else []

    @property
    def profile_dir(self) -> str:
        """Directory under ``target/<triple>/`` cargo writes this profile to."""
        return self.value

    @property
    def export_flag(self) -> str:
        """Godot 3 export switch: ``--export`` builds a release package."""
        return "--export" if self is BuildType.RELEASE else "--export-debug"


class NodeType(str, Enum):
    """Engine scene-node classes a generated class can inherit from."""

    NODE = "Node"
    NODE2D = "Node2D"
    SPATIAL = "Spatial"
    CONTROL = "Control"
    CANVAS_LAYER = "CanvasLayer"
    AREA2D = "Area2D"
    AREA = "Area"
    ANIMATED_SPRITE = "AnimatedSprite"
    ANIMATION_PLAYER = "AnimationPlayer"
    AUDIO_STREAM_PLAYER = "AudioStreamPlayer"
    BUTTON = "Button"
    CAMERA2D = "Camera2D"
    CAMERA = "Camera"
    COLLISION_SHAPE2D = "CollisionShape2D"
    COLLISION_SHAPE = "CollisionShape"
    KINEMATIC_BODY2D = "KinematicBody2D"
    KINEMATIC_BODY = "KinematicBody"
    LABEL = "Label"
    MESH_INSTANCE = "MeshInstance"
    PANEL = "Panel"
    PARTICLES2D = "Particles2D"
    PATH2D = "Path2D"
    POSITION2D = "Position2D"
    RAY_CAST2D = "RayCast2D"
    RIGID_BODY2D = "RigidBody2D"
    RIGID_BODY = "RigidBody"
    SPRITE = "Sprite"
    STATIC_BODY2D = "StaticBody2D"
    STATIC_BODY = "StaticBody"
    TILE_MAP = "TileMap"
    TIMER = "Timer"
    TWEEN = "Tween"

    @classmethod
    def parse(cls, text: str | None) -> "NodeType":
        """Match *text* against the node class names, ignoring case."""
        wanted = _normalise(text)
        for member in cls:
            if member.value.lower() == wanted:
                return member
        return cls.NODE


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TargetSpec:
    """Per-target toolchain and packaging conventions."""

    triple: str
    lib_prefix: str
    lib_ext: str
    exe_ext: str
    export_preset: str | None
    gdnlib_key: str

    def library_file(self, crate: str) -> str:
        """File name cargo gives the library for *crate* on this target."""
        return f"{self.lib_prefix}{crate}.{self.lib_ext}"


class Target(str, Enum):
    """Supported platform/architecture combinations."""

    LINUX_X86_64 = "linux-x86_64"
    LINUX_AARCH64 = "linux-aarch64"
    WINDOWS_X86_64 = "windows-x86_64"
    OSX_X86_64 = "osx-x86_64"
    OSX_AARCH64 = "osx-aarch64"
    ANDROID = "android"
    IOS = "ios"
    HTML5 = "html5"

    @classmethod
    def from_text(cls, text: str | None) -> "Target | None":
        """Strict lookup: the matching target, or ``None``."""
        wanted = _normalise(text)
        wanted = _TARGET_ALIASES.get(wanted, wanted)
        try:
            return cls(wanted)
        except ValueError:
            return None

    @classmethod
    def host(cls) -> "Target":
        """The target matching the host platform, or ``linux-x86_64`` if unsupported."""
        return cls.from_text(get_current_platform()) or cls.LINUX_X86_64

    @classmethod
    def parse(cls, text: str | None) -> "Target":
        """Total lookup: unknown text resolves to the host target."""
        return cls.from_text(text) or cls.host()

    @property
    def spec(self) -> TargetSpec:
        return TARGET_SPECS[self]


TARGET_SPECS: dict[Target, TargetSpec] = {
    Target.LINUX_X86_64: TargetSpec(
        triple="x86_64-unknown-linux-gnu",
        lib_prefix="lib",
        lib_ext="so",
        exe_ext="x86_64",
        export_preset="Linux/X11.x86_64",
        gdnlib_key="X11.64",
    ),
    Target.LINUX_AARCH64: TargetSpec(
        triple="aarch64-unknown-linux-gnu",
        lib_prefix="lib",
        lib_ext="so",
        exe_ext="arm64",
        export_preset="Linux/X11.arm64",
        gdnlib_key="X11.arm64",
    ),
    Target.WINDOWS_X86_64: TargetSpec(
        triple="x86_64-pc-windows-gnu",
        lib_prefix="",
        lib_ext="dll",
        exe_ext="exe",
        export_preset="Windows Desktop.x86_64",
        gdnlib_key="Windows.64",
    ),
    Target.OSX_X86_64: TargetSpec(
        triple="x86_64-apple-darwin",
        lib_prefix="lib",
        lib_ext="dylib",
        exe_ext="zip",
        export_preset="Mac OSX.x86_64",
        gdnlib_key="OSX.64",
    ),
    Target.OSX_AARCH64: TargetSpec(
        triple="aarch64-apple-darwin",
        lib_prefix="lib",
        lib_ext="dylib",
        exe_ext="zip",
        export_preset="Mac OSX.arm64",
        gdnlib_key="OSX.arm64",
    ),
    Target.ANDROID: TargetSpec(
        triple="aarch64-linux-android",
        lib_prefix="lib",
        lib_ext="so",
        exe_ext="apk",
        export_preset="Android.arm64-v8a",
        gdnlib_key="Android.arm64-v8a",
    ),
    Target.IOS: TargetSpec(
        triple="aarch64-apple-ios",
        lib_prefix="lib",
        lib_ext="a",
        exe_ext="ipa",
        export_preset="iOS",
        gdnlib_key="iOS.arm64",
    ),
    Target.HTML5: TargetSpec(
        triple="wasm32-unknown-emscripten",
        lib_prefix="",
        lib_ext="wasm",
        exe_ext="html",
        export_preset="HTML5",
        gdnlib_key="HTML5.wasm32",
    ),
}

_TARGET_ALIASES: dict[str, str] = {
    "macos-x86_64": "osx-x86_64",
    "macos-aarch64": "osx-aarch64",
    "osx-arm64": "osx-aarch64",
    "linux-arm64": "linux-aarch64",
    "web": "html5",
    "wasm": "html5",
}
