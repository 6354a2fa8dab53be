"""Dependency installer.

Drives the package manager for a freshly materialized project: creates the
default manifest, installs the template's runtime and development
dependencies and merges the template's scripts into ``package.json``.

Package-manager invocations never raise on failure.  Each returns an
:class:`InstallResult` and the caller decides whether a non-zero exit is
fatal (see :meth:`DependencyInstaller.check`).
"""

from __future__ import annotations

import asyncio
import json
import shutil
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from kickstart.errors import ExternalToolError, ManifestError
from kickstart.utils import load_json, run_command, save_json

MANIFEST_NAME = "package.json"


class InstallResult(BaseModel):
    """Outcome of one package-manager invocation."""

    command: list[str] = Field(default_factory=list)
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def describe(self) -> str:
        """One-line human summary, e.g. ``npm install -D nodemon exited with 1``."""
        cmd = " ".join(self.command)
        if self.returncode == 127:
            return f"{cmd}: package manager not found"
        if self.returncode == -1:
            return f"{cmd}: timed out"
        return f"{cmd} exited with {self.returncode}"


class DependencyInstaller:
    """Runs ``<package_manager> init`` / ``install`` inside a project root."""

    def __init__(self, package_manager: str = "npm", timeout: int = 300) -> None:
        self.package_manager = package_manager
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Package manager
    # ------------------------------------------------------------------

    async def init_manifest(self, project_root: str | Path) -> InstallResult:
        """Create a default manifest non-interactively (``npm init -y``)."""
        return await self._run(["init", "-y"], project_root)

    async def install_dependencies(
        self,
        project_root: str | Path,
        dependencies: Sequence[str],
        dev_dependencies: Sequence[str] = (),
    ) -> list[InstallResult]:
        """Install runtime dependencies, then development-only dependencies.

        An empty list skips its invocation.  Both invocations run even if the
        first one fails.
        """
        results: list[InstallResult] = []
        if dependencies:
            results.append(await self._run(["install", *dependencies], project_root))
        if dev_dependencies:
            results.append(
                await self._run(["install", *dev_dependencies, "-D"], project_root)
            )
        return results

    async def _run(self, args: list[str], project_root: str | Path) -> InstallResult:
        executable = shutil.which(self.package_manager)
        command = [self.package_manager, *args]
        if executable is None:
            return InstallResult(
                command=command,
                returncode=127,
                stderr=f"{self.package_manager!r} was not found on PATH",
            )

        returncode, stdout, stderr = await run_command(
            [executable, *args], cwd=project_root, timeout=self.timeout
        )
        return InstallResult(
            command=command, returncode=returncode, stdout=stdout, stderr=stderr
        )

    @staticmethod
    def check(result: InstallResult) -> InstallResult:
        """Return *result* unchanged, or raise if the invocation failed.

        Raises:
            ExternalToolError: If ``result.returncode`` is non-zero.
        """
        if not result.ok:
            raise ExternalToolError(result.describe(), result)
        return result

    # ------------------------------------------------------------------
    # Manifest
    # ------------------------------------------------------------------

    async def patch_manifest_scripts(
        self, project_root: str | Path, scripts: Mapping[str, str]
    ) -> dict[str, Any]:
        """Merge *scripts* into the manifest's ``scripts`` table.

        Entries with the same name are replaced; every other script and every
        other top-level field is kept in its original order.  The manifest is
        rewritten with a two-space indent and one trailing newline.

        Returns:
            The manifest as written.

        Raises:
            ManifestError: If the manifest is missing, unreadable or not a
                JSON object (or its ``scripts`` field is not an object).
        """
        manifest_path = Path(project_root) / MANIFEST_NAME
        try:
            manifest = await asyncio.to_thread(load_json, manifest_path)
        except FileNotFoundError:
            raise ManifestError(f"Manifest not found: {manifest_path}") from None
        except (OSError, json.JSONDecodeError) as exc:
            raise ManifestError(f"Could not read manifest {manifest_path}: {exc}") from exc

        if not isinstance(manifest, dict):
            raise ManifestError(f"Manifest is not a JSON object: {manifest_path}")

        existing = manifest.get("scripts")
        if existing is None:
            existing = {}
        if not isinstance(existing, dict):
            raise ManifestError(f"Manifest 'scripts' is not an object: {manifest_path}")

        manifest["scripts"] = {**existing, **scripts}
        try:
            await save_json(manifest, manifest_path)
        except OSError as exc:
            raise ManifestError(f"Could not write manifest {manifest_path}: {exc}") from exc
        return manifest
