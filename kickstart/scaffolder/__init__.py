"""kickstart scaffolder -- turns a template into a project on disk.

Quick usage::

    from kickstart.scaffolder import DependencyInstaller, ProjectMaterializer, build_registry

    descriptor = build_registry().lookup("nodejs")
    materializer = ProjectMaterializer()
    root = await materializer.create_project_root("demo", Path.cwd())
    await materializer.apply_template(descriptor, root)

    installer = DependencyInstaller("npm")
    await installer.init_manifest(root)
    await installer.install_dependencies(root, descriptor.dependencies, descriptor.dev_dependencies)
    await installer.patch_manifest_scripts(root, descriptor.scripts)
"""

from kickstart.scaffolder.generator import ProjectMaterializer
from kickstart.scaffolder.installer import DependencyInstaller, InstallResult
from kickstart.scaffolder.registry import (
    PROJECT_DIRECTORIES,
    TemplateDescriptor,
    TemplateFile,
    TemplateRegistry,
    build_registry,
)
from kickstart.scaffolder.templates import TemplateRenderer

__all__ = [
    "PROJECT_DIRECTORIES",
    "DependencyInstaller",
    "InstallResult",
    "ProjectMaterializer",
    "TemplateDescriptor",
    "TemplateFile",
    "TemplateRegistry",
    "TemplateRenderer",
    "build_registry",
]
