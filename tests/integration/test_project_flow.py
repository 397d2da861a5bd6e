"""Integration tests for a whole project lifecycle driven through the CLI.

A project is created from the bundled skeleton, extended with a class and
a singleton, built and exported.  The real scaffolder writes real files;
only cargo and the engine are replaced by a recorder.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from unittest.mock import patch

import pytest

from gdcargo.cli import main
from gdcargo.executor import ProcessOutcome
from gdcargo.options import Target

pytestmark = pytest.mark.integration


class ToolchainRecorder:
    def __init__(self) -> None:
        self.commands: list[list[str]] = []

    async def __call__(self, cmd, cwd=None, capture=True, env=None, timeout=None):
        self.commands.append(list(cmd))
        if cmd[1:2] == ["build"]:
            triple = cmd[cmd.index("--target") + 1]
            profile = "release" if "--release" in cmd else "debug"
            target = next(t for t in Target if t.spec.triple == triple)
            artifact = Path(cwd) / "target" / triple / profile / target.spec.library_file("my_game")
            artifact.parent.mkdir(parents=True, exist_ok=True)
            artifact.write_bytes(b"lib")
        return ProcessOutcome(command=list(cmd), returncode=0)


def _gdcargo(*argv: str) -> int:
    with pytest.raises(SystemExit) as exc:
        main(list(argv))
    return exc.value.code


class TestProjectFlow:
    def test_full_lifecycle(self, workspace: Path, capsys: pytest.CaptureFixture[str]):
        project = workspace / "my-game"
        recorder = ToolchainRecorder()

        assert _gdcargo("-C", str(workspace), "new", "my-game") == 0
        assert (project / "gdcargo.json").is_file()

        assert _gdcargo("-C", str(project), "class", "IronMan", "Area2D") == 0
        assert _gdcargo("-C", str(project), "class", "enemies/Boss", "KinematicBody2D") == 0
        assert _gdcargo("-C", str(project), "singleton", "GameState") == 0

        lib_rs = (project / "rust" / "src" / "lib.rs").read_text(encoding="utf-8")
        for registration in ("game::Game", "iron_man::IronMan", "enemies::boss::Boss", "game_state::GameState"):
            assert f"handle.add_class::<{registration}>();" in lib_rs

        with patch("gdcargo.processor.run_command", recorder):
            assert _gdcargo("-C", str(project), "export", "linux-x86_64", "release") == 1
            assert "dependency error" in capsys.readouterr().err

            assert _gdcargo("-C", str(project), "build", "linux-x86_64", "release") == 0
            assert _gdcargo("-C", str(project), "export", "linux-x86_64", "release") == 0

        assert recorder.commands[0] == [
            "cargo", "build", "--target", "x86_64-unknown-linux-gnu", "--release",
        ]
        export = recorder.commands[1]
        assert export[:5] == ["godot", "--path", ".", "--export", "Linux/X11.x86_64"]
        assert export[5].endswith("my-game.x86_64")
        assert (project / "godot" / "lib" / "linux-x86_64" / "libmy_game.so").is_file()

    def test_unknown_arguments_fall_back(self, workspace: Path):
        project = workspace / "my-game"
        assert _gdcargo("-C", str(workspace), "new", "my-game") == 0
        assert _gdcargo("-C", str(project), "class", "Robot", "NotANode") == 0

        source = (project / "rust" / "src" / "robot.rs").read_text(encoding="utf-8")
        assert "#[inherit(Node)]" in source

    def test_generated_crate_is_valid_toml(self, workspace: Path):
        assert _gdcargo("-C", str(workspace), "new", "Space Rocks") == 0
        with open(workspace / "Space Rocks" / "rust" / "Cargo.toml", "rb") as f:
            manifest = tomllib.load(f)
        assert manifest["package"]["name"] == "space-rocks"
        assert manifest["lib"]["name"] == "space_rocks"

    def test_project_config_overrides(self, workspace: Path, monkeypatch: pytest.MonkeyPatch):
        project = workspace / "my-game"
        assert _gdcargo("-C", str(workspace), "new", "my-game") == 0
        monkeypatch.setenv("GDCARGO_CARGO_EXE", "/opt/rust/bin/cargo")

        recorder = ToolchainRecorder()
        with patch("gdcargo.processor.run_command", recorder):
            assert _gdcargo("-C", str(project), "build", "linux-x86_64", "debug") == 0
        assert recorder.commands[0][0] == "/opt/rust/bin/cargo"
