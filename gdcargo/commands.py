"""The closed set of commands gdcargo can execute.

Every variant is an immutable value whose fields are fully resolved when it
is built: nothing downstream parses text again. ``Command`` is the union of
the variants and is what :class:`gdcargo.processor.Processor` consumes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from gdcargo.options import BuildType, MachineType, NodeType, Target, Template


@dataclass(frozen=True)
class New:
    """Create a new project directory."""

    project_name: str
    template: Template


@dataclass(frozen=True)
class Class:
    """Generate a class inheriting from a scene-node type."""

    class_name: str
    node_type: NodeType


@dataclass(frozen=True)
class Singleton:
    """Generate a class and register it as an autoload."""

    class_name: str


@dataclass(frozen=True)
class Run:
    """Build for the host and launch the game in debug mode."""

    machine_type: MachineType


@dataclass(frozen=True)
class Build:
    """Compile the native library for a target."""

    target: Target
    build_type: BuildType


@dataclass(frozen=True)
class Export:
    """Package the game for a target using a previously built library."""

    target: Target
    build_type: BuildType


Command = Union[New, Class, Singleton, Run, Build, Export]

SUBCOMMANDS: tuple[str, ...] = ("new", "class", "singleton", "run", "build", "export")
