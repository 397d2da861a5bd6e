"""Command-line interface.

Usage::

    gdcargo new my-game [template]
    gdcargo class IronMan [node_type]
    gdcargo singleton Network
    gdcargo run [desktop|server]
    gdcargo build [target] [debug|release]
    gdcargo export [target] [debug|release]
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

from gdcargo import __version__
from gdcargo.commands import Build, Class, Command, Export, New, Run, Singleton
from gdcargo.config import ToolConfig
from gdcargo.errors import GdcargoError
from gdcargo.options import BuildType, MachineType, NodeType, Target, Template
from gdcargo.processor import Processor
from gdcargo.reporting import Failure, report

DEFAULT_PROJECT_NAME = "my-awesome-game"
DEFAULT_CLASS_NAME = "MyClass"
DEFAULT_SINGLETON_NAME = "MySingletonClass"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gdcargo",
        description="Manage a Godot game backed by a Rust library",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--project-dir", "-C",
        default=None,
        help="Project root to operate in (default: current directory)",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    new = subparsers.add_parser("new", help="create a new project directory")
    new.add_argument("project_name", help="name of the project")
    new.add_argument("template", nargs="?", help="'default' or a git URL/path of a custom template")

    cls = subparsers.add_parser("class", help="create a new class to be used by a node")
    cls.add_argument("class_name", help="name of the class, optionally prefixed by sub/directories")
    cls.add_argument("node_type", nargs="?", help="node type the class inherits from (default: Node)")

    singleton = subparsers.add_parser("singleton", help="create a singleton (autoloaded) class")
    singleton.add_argument("class_name", help="name of the class")

    run = subparsers.add_parser("run", help="build and run a debug version of the game")
    run.add_argument("machine_type", nargs="?", help="desktop or server (default: desktop)")

    for name, help_text in (
        ("build", "build the library for a target platform"),
        ("export", "export the game for a target platform"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("target", nargs="?", help="target platform (default: this machine)")
        sub.add_argument("build_type", nargs="?", help="debug or release (default: debug)")

    return parser


def build_command(name: str, values: Mapping[str, str | None]) -> Command:
    """Build the command for subcommand *name* from raw argument *values*.

    Missing or unrecognised optional values resolve to their defaults, so
    any mapping of strings yields a command.

    Raises:
        ValueError: If *name* is not a subcommand.
    """
    match name:
        case "new":
            return New(
                project_name=values.get("project_name") or DEFAULT_PROJECT_NAME,
                template=Template.parse(values.get("template")),
            )
        case "class":
            return Class(
                class_name=values.get("class_name") or DEFAULT_CLASS_NAME,
                node_type=NodeType.parse(values.get("node_type")),
            )
        case "singleton":
            return Singleton(class_name=values.get("class_name") or DEFAULT_SINGLETON_NAME)
        case "run":
            return Run(machine_type=MachineType.parse(values.get("machine_type")))
        case "build":
            return Build(
                target=Target.parse(values.get("target")),
                build_type=BuildType.parse(values.get("build_type")),
            )
        case "export":
            return Export(
                target=Target.parse(values.get("target")),
                build_type=BuildType.parse(values.get("build_type")),
            )
    raise ValueError(f"Unknown subcommand: {name}")


def parse_args(argv: Sequence[str] | None = None) -> tuple[Command, argparse.Namespace]:
    """Parse *argv* (default ``sys.argv[1:]``) into a command and the raw namespace."""
    args = build_parser().parse_args(argv)
    values = {k: v for k, v in vars(args).items() if k not in ("command", "project_dir")}
    return build_command(args.command, values), args


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for ``gdcargo`` and ``python -m gdcargo``."""
    command, args = parse_args(argv)
    project_root = Path(args.project_dir) if args.project_dir else Path(".")

    try:
        config = ToolConfig.discover(project_root)
    except GdcargoError as e:
        sys.exit(report(Failure.from_error(e)))

    outcome = asyncio.run(Processor(config).execute(command))
    sys.exit(report(outcome))


if __name__ == "__main__":
    main()
