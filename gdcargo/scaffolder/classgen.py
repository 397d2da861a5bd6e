"""Class and singleton generation.

A generated class is a Rust ``NativeClass`` source file plus the Godot
``NativeScript`` resource that exposes it, registered in the crate root.
Plain classes also get a scene whose root node runs the script; singletons
instead get an entry in the ``[autoload]`` section of ``project.godot``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from gdcargo.config import ToolConfig
from gdcargo.errors import ConfigurationError, FileWriteError
from gdcargo.options import NodeType
from gdcargo.utils import is_valid_class_name, to_snake_case

from .templates import TemplateRenderer

_MODULE_RE = re.compile(r"^[a-z_][a-z0-9_]*$")
_INIT_FN_RE = re.compile(r"^\s*fn\s+init\s*\(\s*handle\s*:\s*InitHandle\s*\)\s*\{\s*$")
_ADD_CLASS_RE = re.compile(r"^\s*handle\s*\.\s*add_class\s*::")
_MOD_DECL_RE = re.compile(r"^\s*(pub\s+)?mod\s+[A-Za-z_][A-Za-z0-9_]*\s*;")
_SECTION_RE = re.compile(r"^\s*\[([^\]]+)\]\s*$")


@dataclass
class ClassSpec:
    """Where the files for one generated class go."""

    class_name: str
    modules: list[str]
    node_type: NodeType
    is_singleton: bool
    rust_file: Path
    gdns_file: Path
    scene_file: Path | None
    gdns_resource: str
    written: list[Path] = field(default_factory=list)

    @property
    def rust_path(self) -> str:
        """Fully qualified Rust path of the struct, e.g. ``enemies::iron_man::IronMan``."""
        return "::".join([*self.modules, self.class_name])


class ClassGenerator:
    """Generates classes and singletons inside an existing project."""

    def __init__(self, tool_config: ToolConfig, renderer: TemplateRenderer | None = None) -> None:
        self.tool_config = tool_config
        self.renderer = renderer or TemplateRenderer()

    async def generate_class(self, class_name: str, node_type: NodeType) -> ClassSpec:
        """Write the source, script and scene for *class_name* and register it."""
        return await self._generate(class_name, node_type, is_singleton=False)

    async def generate_singleton(self, class_name: str) -> ClassSpec:
        """Write the source and script for *class_name*, register it, and autoload it."""
        project_godot = self.tool_config.project_godot_path
        text = _read_config(project_godot)
        spec = await self._generate(class_name, NodeType.NODE, is_singleton=True)
        patched = add_autoload(text, spec.class_name, spec.gdns_resource)
        _write_text(project_godot, patched)
        return spec

    # -- Shared file generation ---------------------------------------------

    def resolve(self, class_name: str, node_type: NodeType, is_singleton: bool) -> ClassSpec:
        """Work out every path for *class_name* (``dir/sub/ClassName`` allowed).

        Raises:
            FileWriteError: If the name is not a valid class name.
        """
        parts = [p for p in PurePosixPath(class_name.replace("\\", "/")).parts if p not in ("", ".")]
        if not parts or not is_valid_class_name(parts[-1]):
            raise FileWriteError(f"Invalid class name: '{class_name}'")
        name = parts[-1]
        directories = [to_snake_case(d) for d in parts[:-1]]
        for directory in directories:
            if not _MODULE_RE.match(directory):
                raise FileWriteError(f"Invalid module directory '{directory}' in '{class_name}'")

        config = self.tool_config
        snake = to_snake_case(name)
        rust_dir = config.lib_rs_path.parent.joinpath(*directories)
        native_dir = config.native_dir.joinpath(*directories)
        scene_dir = config.scenes_dir.joinpath(*directories)
        resource = "/".join(["res://native", *directories, f"{name}.gdns"])

        return ClassSpec(
            class_name=name,
            modules=[*directories, snake],
            node_type=node_type,
            is_singleton=is_singleton,
            rust_file=rust_dir / f"{snake}.rs",
            gdns_file=native_dir / f"{name}.gdns",
            scene_file=None if is_singleton else scene_dir / f"{name}.tscn",
            gdns_resource=resource,
        )

    async def _generate(self, class_name: str, node_type: NodeType, is_singleton: bool) -> ClassSpec:
        spec = self.resolve(class_name, node_type, is_singleton)

        lib_rs = self.tool_config.lib_rs_path
        lib_text = _read_config(lib_rs)
        patched_lib = register_class(lib_text, spec.modules[0], spec.rust_path)

        targets = [p for p in (spec.rust_file, spec.gdns_file, spec.scene_file) if p is not None]
        for path in targets:
            if path.exists():
                raise FileWriteError(f"File already exists: {path}", path=str(path))

        context = {
            "class_name": spec.class_name,
            "node_type": spec.node_type.value,
            "is_singleton": spec.is_singleton,
            "gdns_resource": spec.gdns_resource,
        }
        renders = [("class/class.rs.j2", spec.rust_file), ("class/class.gdns.j2", spec.gdns_file)]
        if spec.scene_file is not None:
            renders.append(("class/class.tscn.j2", spec.scene_file))

        for template, path in renders:
            try:
                spec.written.append(
                    await self.renderer.render_to_file(template, path, context, overwrite=False)
                )
            except FileExistsError:
                raise FileWriteError(f"File already exists: {path}", path=str(path))
            except OSError as e:
                raise FileWriteError(f"Cannot write {path}: {e}", path=str(path))

        self._declare_submodules(spec)
        _write_text(lib_rs, patched_lib)
        return spec

    def _declare_submodules(self, spec: ClassSpec) -> None:
        """Make sure every ``mod.rs`` between the crate root and the class declares the next level."""
        base = self.tool_config.lib_rs_path.parent
        for depth in range(1, len(spec.modules)):
            mod_rs = base.joinpath(*spec.modules[:depth]) / "mod.rs"
            child = spec.modules[depth]
            text = mod_rs.read_text(encoding="utf-8") if mod_rs.exists() else ""
            if not _declares_module(text, child):
                if text and not text.endswith("\n"):
                    text += "\n"
                _write_text(mod_rs, f"{text}pub mod {child};\n")


# ---------------------------------------------------------------------------
# Text patching
# ---------------------------------------------------------------------------


def register_class(lib_text: str, module: str, rust_path: str) -> str:
    """Return *lib_text* with ``mod <module>;`` declared and *rust_path* registered.

    Raises:
        ConfigurationError: If the crate root has no ``fn init(handle: InitHandle)``.
    """
    lines = lib_text.splitlines()
    registration = f"handle.add_class::<{rust_path}>();"

    init_index = next((i for i, line in enumerate(lines) if _INIT_FN_RE.match(line)), None)
    if init_index is None:
        raise ConfigurationError("No `fn init(handle: InitHandle)` found in the crate root")

    if not any(line.strip() == registration for line in lines):
        last_add = max(
            (i for i, line in enumerate(lines) if _ADD_CLASS_RE.match(line)),
            default=init_index,
        )
        lines.insert(last_add + 1, f"    {registration}")

    if not _declares_module(lib_text, module):
        mod_lines = [i for i, line in enumerate(lines) if _MOD_DECL_RE.match(line)]
        if mod_lines:
            insert_at = mod_lines[-1] + 1
            lines.insert(insert_at, f"mod {module};")
        else:
            insert_at = _first_item_index(lines)
            block = ["", f"mod {module};"] if insert_at else [f"mod {module};", ""]
            lines[insert_at:insert_at] = block

    return "\n".join(lines) + "\n"


def add_autoload(config_text: str, class_name: str, resource: str) -> str:
    """Return *config_text* with *class_name* autoloaded from *resource*.

    An existing entry for the same name is replaced; a missing ``[autoload]``
    section is appended.
    """
    entry = f'{class_name}="*{resource}"'
    lines = config_text.splitlines()

    start = next(
        (i for i, line in enumerate(lines) if (m := _SECTION_RE.match(line)) and m.group(1) == "autoload"),
        None,
    )
    if start is None:
        while lines and not lines[-1].strip():
            lines.pop()
        lines.extend(["", "[autoload]", "", entry])
        return "\n".join(lines) + "\n"

    end = next(
        (i for i in range(start + 1, len(lines)) if _SECTION_RE.match(lines[i])),
        len(lines),
    )
    for i in range(start + 1, end):
        if lines[i].split("=", 1)[0].strip() == class_name:
            lines[i] = entry
            return "\n".join(lines) + "\n"

    insert_at = end
    while insert_at > start + 1 and not lines[insert_at - 1].strip():
        insert_at -= 1
    if insert_at == start + 1:
        lines[insert_at:insert_at] = ["", entry]
        insert_at += 1
    else:
        lines.insert(insert_at, entry)
    if insert_at + 1 < len(lines) and _SECTION_RE.match(lines[insert_at + 1]):
        lines.insert(insert_at + 1, "")
    return "\n".join(lines) + "\n"


def _declares_module(text: str, module: str) -> bool:
    return re.search(rf"^\s*(pub\s+)?mod\s+{re.escape(module)}\s*;", text, re.MULTILINE) is not None


def _first_item_index(lines: list[str]) -> int:
    """Index of the first line after the leading ``use`` block."""
    last_use = max((i for i, line in enumerate(lines) if line.startswith("use ")), default=-1)
    return last_use + 1


def _read_config(path: Path) -> str:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigurationError(f"{path} not found. Is this a gdcargo project?")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read {path}: {e}")
    if not text.strip():
        raise ConfigurationError(f"{path} is empty")
    return text


def _write_text(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise FileWriteError(f"Cannot write {path}: {e}", path=str(path))
