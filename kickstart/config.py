"""kickstart configuration.

The tool gathers everything about the project interactively; the settings here
only tune how it talks to the package manager. All settings are a Pydantic v2
model so they are validated at construction time and can be read from the
environment without boiler-plate.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field, field_validator

_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Global kickstart configuration.

    Created once by the CLI entry point (usually via :meth:`from_env`) and
    passed to the orchestrator.
    """

    package_manager: str = Field(
        default="npm", description="Package manager executable looked up on PATH"
    )
    install_timeout: int = Field(
        default=300, ge=10, description="Per-invocation timeout in seconds"
    )
    strict_install: bool = Field(
        default=False,
        description="Treat a failing package-manager invocation as fatal",
    )
    skip_install: bool = Field(
        default=False, description="Do not run the package manager at all"
    )

    @field_validator("package_manager")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("package_manager must not be empty")
        return value

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            KICKSTART_PACKAGE_MANAGER, KICKSTART_INSTALL_TIMEOUT,
            KICKSTART_STRICT_INSTALL, KICKSTART_SKIP_INSTALL.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("KICKSTART_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["KICKSTART_PACKAGE_MANAGER"]
        if os.environ.get("KICKSTART_INSTALL_TIMEOUT"):
            kwargs["install_timeout"] = os.environ["KICKSTART_INSTALL_TIMEOUT"]
        if "KICKSTART_STRICT_INSTALL" in os.environ:
            kwargs["strict_install"] = _env_flag("KICKSTART_STRICT_INSTALL")
        if "KICKSTART_SKIP_INSTALL" in os.environ:
            kwargs["skip_install"] = _env_flag("KICKSTART_SKIP_INSTALL")
        return cls(**kwargs)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY
