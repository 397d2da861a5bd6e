"""gdcargo scaffolder -- generates projects, classes and singletons.

Quick usage::

    from gdcargo.config import ToolConfig
    from gdcargo.options import DefaultTemplate, NodeType
    from gdcargo.scaffolder import ClassGenerator, ProjectGenerator

    config = ToolConfig(project_root=Path("."))
    project = await ProjectGenerator(config).generate("my-game", DefaultTemplate())
    await ClassGenerator(ToolConfig(project_root=project)).generate_class("Player", NodeType.AREA2D)
"""

from gdcargo.scaffolder.classgen import ClassGenerator, ClassSpec, add_autoload, register_class
from gdcargo.scaffolder.generator import ProjectGenerator
from gdcargo.scaffolder.templates import TemplateRenderer

__all__ = [
    "ClassGenerator",
    "ClassSpec",
    "ProjectGenerator",
    "TemplateRenderer",
    "add_autoload",
    "register_class",
]
