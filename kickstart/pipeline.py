"""kickstart orchestrator.

Drives one scaffolding run through a strictly forward state machine:

IDLE -> TEMPLATE_SELECTED -> NAME_VALIDATED -> ROOT_CREATED
     -> TEMPLATE_APPLIED -> DEPENDENCIES_INSTALLED -> COMPLETE

Any failure moves the run to the absorbing FAILED state.  Nothing created
before the failure is cleaned up.
"""

from __future__ import annotations

import time
import traceback
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from kickstart.config import Config
from kickstart.errors import (
    ExternalToolError,
    InvalidTransitionError,
    KickstartError,
    PromptCancelled,
    ScaffoldError,
)
from kickstart.prompts import read_project_name, select_template
from kickstart.scaffolder.generator import ProjectMaterializer
from kickstart.scaffolder.installer import DependencyInstaller, InstallResult
from kickstart.scaffolder.registry import TemplateDescriptor, TemplateRegistry
from kickstart.utils import (
    print_banner,
    print_detail,
    print_error,
    print_step,
    print_summary_table,
    print_warning,
)


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class ScaffoldState(str, Enum):
    IDLE = "idle"
    TEMPLATE_SELECTED = "template_selected"
    NAME_VALIDATED = "name_validated"
    ROOT_CREATED = "root_created"
    TEMPLATE_APPLIED = "template_applied"
    DEPENDENCIES_INSTALLED = "dependencies_installed"
    COMPLETE = "complete"
    FAILED = "failed"


_FORWARD_ORDER: list[ScaffoldState] = [
    ScaffoldState.IDLE,
    ScaffoldState.TEMPLATE_SELECTED,
    ScaffoldState.NAME_VALIDATED,
    ScaffoldState.ROOT_CREATED,
    ScaffoldState.TEMPLATE_APPLIED,
    ScaffoldState.DEPENDENCIES_INSTALLED,
    ScaffoldState.COMPLETE,
]

_TERMINAL = {ScaffoldState.COMPLETE, ScaffoldState.FAILED}


class ScaffoldRequest(BaseModel):
    """What the user asked for, validated once and then only read."""

    model_config = ConfigDict(frozen=True)

    template_id: str
    project_name: str
    target_directory: Path


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class Scaffolder:
    """Runs the prompt -> materialize -> install flow for one project.

    Attributes:
        config: Package-manager settings.
        registry: Templates offered to the user.
        state: Current :class:`ScaffoldState`.
        history: Every state the run has been in, in order.
        install_results: Results of each package-manager invocation.
        install_problems: Tolerated install failures (non-strict mode).
    """

    def __init__(
        self,
        config: Config,
        registry: TemplateRegistry,
        *,
        materializer: ProjectMaterializer | None = None,
        installer: DependencyInstaller | None = None,
        choose_template: Callable[[TemplateRegistry], str] | None = None,
        ask_project_name: Callable[[Path], str] | None = None,
    ) -> None:
        self.config = config
        self.registry = registry
        self.materializer = materializer or ProjectMaterializer()
        self.installer = installer or DependencyInstaller(
            config.package_manager, timeout=config.install_timeout
        )
        self.choose_template = choose_template or select_template
        self.ask_project_name = ask_project_name or read_project_name
        self.state = ScaffoldState.IDLE
        self.history: list[ScaffoldState] = [ScaffoldState.IDLE]
        self.install_results: list[InstallResult] = []
        self.install_problems = 0
        self.request: ScaffoldRequest | None = None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def advance(self, target: ScaffoldState) -> None:
        """Move exactly one step forward.

        Raises:
            InvalidTransitionError: On a backwards move, a skipped state, or
                any move out of a terminal state.
        """
        if self.state in _TERMINAL or target is ScaffoldState.FAILED:
            raise InvalidTransitionError(self.state, target)
        if _FORWARD_ORDER.index(target) != _FORWARD_ORDER.index(self.state) + 1:
            raise InvalidTransitionError(self.state, target)
        self.state = target
        self.history.append(target)

    def fail(self) -> None:
        """Move to FAILED.  Repeated calls are no-ops; COMPLETE cannot fail."""
        if self.state is ScaffoldState.FAILED:
            return
        if self.state is ScaffoldState.COMPLETE:
            raise InvalidTransitionError(self.state, ScaffoldState.FAILED)
        self.state = ScaffoldState.FAILED
        self.history.append(ScaffoldState.FAILED)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run(self, cwd: str | Path) -> ScaffoldRequest:
        """Execute the whole flow in *cwd*.

        Returns:
            The validated :class:`ScaffoldRequest` of the completed run.

        Raises:
            PromptCancelled: The user aborted a prompt.
            ScaffoldError: Any other failure; ``.state`` is the state the run
                was in when the failing step started.
        """
        started = time.monotonic()
        cwd = Path(cwd).resolve()

        try:
            # 1. Template
            template_id = self.choose_template(self.registry)
            descriptor = self.registry.lookup(template_id)
            self.advance(ScaffoldState.TEMPLATE_SELECTED)

            # 2. Project name
            project_name = self.ask_project_name(cwd)
            self.request = ScaffoldRequest(
                template_id=descriptor.id,
                project_name=project_name,
                target_directory=cwd / project_name,
            )
            self.advance(ScaffoldState.NAME_VALIDATED)

            # 3. Project root
            project_root = await self.materializer.create_project_root(project_name, cwd)
            self.advance(ScaffoldState.ROOT_CREATED)

            # 4. Folders and files
            await self.materializer.apply_template(descriptor, project_root)
            self.advance(ScaffoldState.TEMPLATE_APPLIED)

            # 5. Package manager
            await self._install(descriptor, project_root)
            self.advance(ScaffoldState.DEPENDENCIES_INSTALLED)

            self.advance(ScaffoldState.COMPLETE)

        except PromptCancelled:
            self.fail()
            raise

        except KickstartError as exc:
            failed_in = self.state
            self.fail()
            print_error(f"Error: {exc}")
            if isinstance(exc, ExternalToolError) and exc.result is not None:
                print_detail(exc.result.stderr)
            raise ScaffoldError(failed_in, str(exc)) from exc

        except Exception as exc:
            failed_in = self.state
            self.fail()
            print_error(f"Error: {exc}")
            print_detail(traceback.format_exc())
            raise ScaffoldError(failed_in, str(exc)) from exc

        self._print_final_summary(descriptor, time.monotonic() - started)
        return self.request

    # ------------------------------------------------------------------
    # Dependency installation
    # ------------------------------------------------------------------

    async def _install(self, descriptor: TemplateDescriptor, project_root: Path) -> None:
        """Init the manifest, install dependencies and patch scripts.

        Failures are warnings unless ``config.strict_install`` is set, in
        which case the first one raises.
        """
        if self.config.skip_install:
            print_warning("Skipping dependency installation (KICKSTART_SKIP_INSTALL is set).")
            return

        pm = self.config.package_manager
        problems = 0

        result = await self.installer.init_manifest(project_root)
        problems += self._record(result)

        results = await self.installer.install_dependencies(
            project_root, descriptor.dependencies, descriptor.dev_dependencies
        )
        for result in results:
            problems += self._record(result)

        try:
            await self.installer.patch_manifest_scripts(project_root, descriptor.scripts)
        except ExternalToolError as exc:
            if self.config.strict_install:
                raise
            problems += 1
            print_warning(f"Warning: {exc}")
        else:
            print_step(f"Added scripts to package.json: {', '.join(descriptor.scripts)}")

        self.install_problems = problems
        if problems:
            print_warning(
                f"{pm} finished with {problems} problem(s); "
                f"run '{pm} install' inside the project to retry."
            )
        else:
            print_step(f"Initialized {pm} project and installed dependencies.")

    def _record(self, result: InstallResult) -> int:
        """Store *result*; return 1 if it failed (and failures are tolerated)."""
        self.install_results.append(result)
        if self.config.strict_install:
            self.installer.check(result)
            return 0
        if result.ok:
            return 0
        print_warning(f"Warning: {result.describe()}")
        print_detail(result.stderr)
        return 1

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def _print_final_summary(self, descriptor: TemplateDescriptor, elapsed: float) -> None:
        assert self.request is not None
        print_banner("Project setup complete!")
        if self.config.skip_install:
            installed = "skipped"
        elif self.install_problems == 0:
            installed = "ok"
        else:
            installed = "with warnings"
        print_summary_table(
            {
                "Template": descriptor.display_name,
                "Project": self.request.project_name,
                "Location": str(self.request.target_directory),
                "Dependencies": installed,
                "Duration": f"{elapsed:.1f}s",
            },
            title="Summary",
        )
