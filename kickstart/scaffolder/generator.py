"""Project materializer.

Creates the project root, the fixed folder layout of a template and its
boilerplate files.  Steps run one at a time in declared order and the first
failure aborts the rest; whatever was created before the failure is left on
disk.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from kickstart.errors import DirectoryCreateError, DirectoryExistsError, FileWriteError
from kickstart.utils import print_step

from .registry import TemplateDescriptor
from .templates import TemplateRenderer


def _reason(exc: Exception) -> str:
    return getattr(exc, "strerror", None) or str(exc)


class ProjectMaterializer:
    """Writes a template's directory tree and files to disk.

    Given a :class:`TemplateDescriptor`, :meth:`apply_template` produces:
    - the template's folders (``models``, ``controllers``, ``routes``, ...)
    - every boilerplate file, rendered from the packaged Jinja2 templates
    """

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    async def create_project_root(self, name: str, cwd: str | Path) -> Path:
        """Create ``cwd / name`` and return it.

        Raises:
            DirectoryExistsError: Something already exists at that path.
            DirectoryCreateError: Any other OS-level failure (permissions,
                invalid name such as one containing a NUL byte, missing
                parent).
        """
        project_root = Path(cwd) / name
        try:
            await asyncio.to_thread(project_root.mkdir)
        except FileExistsError:
            raise DirectoryExistsError(project_root) from None
        except (OSError, ValueError) as exc:
            raise DirectoryCreateError(project_root, _reason(exc)) from exc

        print_step(f"Created folder: {name}")
        return project_root

    async def apply_template(
        self, descriptor: TemplateDescriptor, project_root: str | Path
    ) -> list[Path]:
        """Create the template's folders, then write its files.

        Args:
            descriptor: Template to apply.
            project_root: Existing, empty project directory.

        Returns:
            Paths of the written files, in declared order.

        Raises:
            DirectoryCreateError: A folder could not be created.  No later
                folder or file is attempted.
            FileWriteError: A file could not be written.  No later file is
                attempted.
        """
        root = Path(project_root)

        # 1. Folders, in declared order
        for directory in descriptor.directories:
            await self._create_directory(root, directory)

        # 2. Files, in declared order
        context = self._build_context(descriptor)
        written: list[Path] = []
        for template_file in descriptor.files:
            out = root / template_file.path
            try:
                await self.renderer.render_to_file(template_file.source, out, context)
            except OSError as exc:
                raise FileWriteError(out, _reason(exc)) from exc
            print_step(f"Created file: {template_file.path}")
            written.append(out)

        return written

    # -- Internals ---------------------------------------------------------

    async def _create_directory(self, root: Path, directory: str) -> None:
        path = root / directory
        try:
            await asyncio.to_thread(path.mkdir)
        except (OSError, ValueError) as exc:
            raise DirectoryCreateError(path, _reason(exc)) from exc
        print_step(f"Created folder: {directory}")

    @staticmethod
    def _build_context(descriptor: TemplateDescriptor) -> dict[str, Any]:
        """Build the Jinja2 context.  Only descriptor data, never user input."""
        return {
            "env_vars": list(descriptor.env_vars),
        }
