"""Unit tests for the parsed configuration values (gdcargo.options, gdcargo.host).

Tests cover:
- Template: default, blank, custom URLs and paths
- MachineType / BuildType / NodeType: keywords, case, fallback on unknown text
- Target: canonical names, aliases, fallback to the host target
- TARGET_SPECS table completeness and library naming
- get_current_platform rendering
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from gdcargo.host import get_current_platform
from gdcargo.options import (
    TARGET_SPECS,
    BuildType,
    CustomTemplate,
    DefaultTemplate,
    MachineType,
    NodeType,
    Target,
    Template,
)

pytestmark = pytest.mark.unit

UNKNOWN_TEXT = ["", "   ", "nonsense", "DEBUGGG", "linux", "🦀", "--release", None]


# ---------------------------------------------------------------------------
# Template
# ---------------------------------------------------------------------------


class TestTemplate:
    def test_default_keyword(self):
        assert Template.parse("default") == DefaultTemplate()

    def test_default_keyword_case_insensitive(self):
        assert Template.parse("  Default ") == DefaultTemplate()

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_blank_is_default(self, text):
        assert Template.parse(text) == DefaultTemplate()

    def test_git_url_is_custom(self):
        url = "https://github.com/me/template.git"
        assert Template.parse(url) == CustomTemplate(git_url=url)

    def test_local_path_is_custom(self):
        assert Template.parse("/path/to/custom/template") == CustomTemplate(
            git_url="/path/to/custom/template"
        )

    def test_any_other_text_is_custom(self):
        assert isinstance(Template.parse("nonsense"), CustomTemplate)

    def test_str(self):
        assert str(DefaultTemplate()) == "default"
        assert str(CustomTemplate(git_url="x")) == "x"


# ---------------------------------------------------------------------------
# MachineType / BuildType
# ---------------------------------------------------------------------------


class TestMachineType:
    def test_keywords(self):
        assert MachineType.parse("desktop") is MachineType.DESKTOP
        assert MachineType.parse("server") is MachineType.SERVER

    def test_case_insensitive(self):
        assert MachineType.parse("SERVER") is MachineType.SERVER

    @pytest.mark.parametrize("text", UNKNOWN_TEXT)
    def test_unknown_falls_back_to_desktop(self, text):
        assert MachineType.parse(text) is MachineType.DESKTOP

    def test_engine_flags(self):
        assert MachineType.DESKTOP.engine_flags == []
        assert MachineType.SERVER.engine_flags == ["--no-window"]


class TestBuildType:
    def test_keywords(self):
        assert BuildType.parse("debug") is BuildType.DEBUG
        assert BuildType.parse("release") is BuildType.RELEASE

    def test_case_insensitive(self):
        assert BuildType.parse(" Release ") is BuildType.RELEASE

    @pytest.mark.parametrize("text", UNKNOWN_TEXT)
    def test_unknown_falls_back_to_debug(self, text):
        assert BuildType.parse(text) is BuildType.DEBUG

    def test_cargo_flags(self):
        assert BuildType.DEBUG.cargo_flags == []
        assert BuildType.RELEASE.cargo_flags == ["--release"]

    def test_export_flag(self):
        assert BuildType.DEBUG.export_flag == "--export-debug"
        assert BuildType.RELEASE.export_flag == "--export"


# ---------------------------------------------------------------------------
# NodeType
# ---------------------------------------------------------------------------


class TestNodeType:
    def test_exact_name(self):
        assert NodeType.parse("Area2D") is NodeType.AREA2D

    def test_case_insensitive(self):
        assert NodeType.parse("kinematicbody2d") is NodeType.KINEMATIC_BODY2D

    @pytest.mark.parametrize("text", UNKNOWN_TEXT)
    def test_unknown_falls_back_to_node(self, text):
        assert NodeType.parse(text) is NodeType.NODE

    def test_every_member_round_trips_by_value(self):
        for member in NodeType:
            assert NodeType.parse(member.value) is member


# ---------------------------------------------------------------------------
# Target
# ---------------------------------------------------------------------------


class TestTarget:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("linux-x86_64", Target.LINUX_X86_64),
            ("windows-x86_64", Target.WINDOWS_X86_64),
            ("osx-x86_64", Target.OSX_X86_64),
            ("android", Target.ANDROID),
            ("ios", Target.IOS),
            ("html5", Target.HTML5),
        ],
    )
    def test_keywords(self, text, expected):
        assert Target.parse(text) is expected

    def test_aliases(self):
        assert Target.parse("macos-x86_64") is Target.OSX_X86_64
        assert Target.parse("web") is Target.HTML5

    def test_from_text_is_strict(self):
        assert Target.from_text("nonsense") is None

    @pytest.mark.parametrize("text", UNKNOWN_TEXT)
    def test_unknown_falls_back_to_host(self, text):
        assert Target.parse(text) is Target.host()

    def test_host_on_linux(self):
        with patch("gdcargo.options.get_current_platform", return_value="linux-x86_64"):
            assert Target.host() is Target.LINUX_X86_64

    def test_host_on_apple_silicon(self):
        with patch("gdcargo.options.get_current_platform", return_value="osx-aarch64"):
            assert Target.host() is Target.OSX_AARCH64

    def test_unsupported_host_falls_back_to_linux(self):
        with patch("gdcargo.options.get_current_platform", return_value="freebsd-riscv64"):
            assert Target.host() is Target.LINUX_X86_64
            assert Target.parse("nonsense") is Target.LINUX_X86_64


class TestTargetSpecs:
    def test_every_target_has_a_spec(self):
        assert set(TARGET_SPECS) == set(Target)

    def test_triples_are_unique(self):
        triples = [spec.triple for spec in TARGET_SPECS.values()]
        assert len(triples) == len(set(triples))

    def test_library_file_linux(self):
        assert Target.LINUX_X86_64.spec.library_file("my_game") == "libmy_game.so"

    def test_library_file_windows_has_no_prefix(self):
        assert Target.WINDOWS_X86_64.spec.library_file("my_game") == "my_game.dll"

    def test_library_file_osx(self):
        assert Target.OSX_X86_64.spec.library_file("my_game") == "libmy_game.dylib"


# ---------------------------------------------------------------------------
# Host platform
# ---------------------------------------------------------------------------


class TestGetCurrentPlatform:
    @pytest.mark.parametrize(
        "system, machine, expected",
        [
            ("Linux", "x86_64", "linux-x86_64"),
            ("Linux", "aarch64", "linux-aarch64"),
            ("Darwin", "arm64", "osx-aarch64"),
            ("Darwin", "x86_64", "osx-x86_64"),
            ("Windows", "AMD64", "windows-x86_64"),
        ],
    )
    def test_known_hosts(self, system, machine, expected):
        assert get_current_platform(system, machine) == expected

    def test_unknown_host_passes_through(self):
        assert get_current_platform("FreeBSD", "riscv64") == "freebsd-riscv64"

    def test_detects_real_host(self):
        with patch("platform.system", return_value="Linux"), patch(
            "platform.machine", return_value="x86_64"
        ):
            assert get_current_platform() == "linux-x86_64"

    def test_deterministic(self):
        assert get_current_platform() == get_current_platform()
