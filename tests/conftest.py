"""Shared pytest fixtures for the kickstart test suite.

Provides reusable fixtures for:
- The built-in template registry and the Node.js descriptor
- Test configurations
- A fake package manager executable placed first on ``PATH``
"""

from __future__ import annotations

import json
import os
import stat
import textwrap
from pathlib import Path
from typing import Any

import pytest

from kickstart.config import Config
from kickstart.scaffolder.registry import TemplateDescriptor, TemplateRegistry, build_registry


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

@pytest.fixture
def registry() -> TemplateRegistry:
    return build_registry()


@pytest.fixture
def nodejs_descriptor(registry: TemplateRegistry) -> TemplateDescriptor:
    return registry.lookup("nodejs")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def config() -> Config:
    """Default (non-strict) configuration using the fake package manager."""
    return Config(package_manager="fake-npm", install_timeout=30)


@pytest.fixture
def strict_config() -> Config:
    return Config(package_manager="fake-npm", install_timeout=30, strict_install=True)


@pytest.fixture(autouse=True)
def _clean_kickstart_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's KICKSTART_* variables out of the tests."""
    for name in list(os.environ):
        if name.startswith("KICKSTART_"):
            monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Fake package manager
# ---------------------------------------------------------------------------

DEFAULT_MANIFEST: dict[str, Any] = {
    "name": "fake-project",
    "version": "1.0.0",
    "description": "",
    "main": "index.js",
    "scripts": {"test": "echo \"Error: no test specified\" && exit 1"},
    "keywords": [],
    "author": "",
    "license": "ISC",
}


@pytest.fixture
def fake_package_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, Path]:
    """Install a ``fake-npm`` shell script first on PATH.

    The script appends its arguments to ``calls.log``, writes
    ``DEFAULT_MANIFEST`` on ``init`` and exits with ``$FAKE_NPM_EXIT``
    (default 0).  Returns the relevant paths.
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    log_path = tmp_path / "calls.log"

    script = bin_dir / "fake-npm"
    script.write_text(
        textwrap.dedent(
            """\
            #!/bin/sh
            echo "$@" >> "{log}"
            if [ "$1" = "init" ]; then
            cat > package.json <<'JSON'
            {manifest}
            JSON
            fi
            exit ${{FAKE_NPM_EXIT:-0}}
            """
        ).format(log=log_path, manifest=json.dumps(DEFAULT_MANIFEST, indent=2)),
        encoding="utf-8",
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    return {"bin": bin_dir, "script": script, "log": log_path}


@pytest.fixture
def package_manager_calls(fake_package_manager: dict[str, Path]):
    """Callable returning the argument lines the fake package manager saw."""

    def _calls() -> list[str]:
        log_path = fake_package_manager["log"]
        if not log_path.exists():
            return []
        return log_path.read_text(encoding="utf-8").splitlines()

    return _calls


# ---------------------------------------------------------------------------
# Workspace
# ---------------------------------------------------------------------------

@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Empty working directory projects are created in."""
    ws = tmp_path / "workspace"
    ws.mkdir()
    return ws
