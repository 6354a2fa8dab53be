"""Template registry.

Static table of the project templates kickstart can scaffold.  Each template
is a :class:`TemplateDescriptor` describing the folders to create, the
packaged boilerplate files to render, the dependencies to install and the
manifest scripts to add.  The registry is built once by
:func:`build_registry` and passed explicitly to whoever needs it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from kickstart.errors import UnknownTemplateError

# Every template lays its sources out in the same fixed set of folders.
PROJECT_DIRECTORIES: tuple[str, ...] = (
    "models",
    "controllers",
    "routes",
    "config",
    "utils",
    "services",
    "middleware",
)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class TemplateFile(BaseModel):
    """One boilerplate file: where it goes and which packaged template renders it."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Output path relative to the project root")
    source: str = Field(..., description="Jinja2 template path relative to the template dir")

    @field_validator("path")
    @classmethod
    def _relative(cls, value: str) -> str:
        if not value or value.startswith("/") or ".." in value.split("/"):
            raise ValueError(f"template file path must be relative: {value!r}")
        return value


class TemplateDescriptor(BaseModel):
    """Immutable description of a single project template."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    display_name: str
    description: str = ""
    directories: tuple[str, ...] = PROJECT_DIRECTORIES
    files: tuple[TemplateFile, ...] = Field(..., min_length=1)
    dependencies: tuple[str, ...] = ()
    dev_dependencies: tuple[str, ...] = ()
    scripts: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    env_vars: tuple[str, ...] = ()

    @field_validator("scripts", mode="after")
    @classmethod
    def _read_only_scripts(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        # Descriptors are shared by every registry; the table must not change.
        return MappingProxyType(dict(value))

    @model_validator(mode="after")
    def _files_inside_directories(self) -> "TemplateDescriptor":
        # Folders are created before any file, so every file must land in one.
        for template_file in self.files:
            parent = template_file.path.rpartition("/")[0]
            if parent and parent not in self.directories:
                raise ValueError(
                    f"{template_file.path!r} is outside the template directories"
                )
        return self

    @property
    def choice_label(self) -> str:
        """Label shown in the template selection list."""
        return f"{self.display_name} - {self.description}"

    @property
    def file_paths(self) -> list[str]:
        return [f.path for f in self.files]


class TemplateRegistry:
    """Read-only, ordered mapping of template id to :class:`TemplateDescriptor`."""

    def __init__(self, descriptors: Iterable[TemplateDescriptor]) -> None:
        entries: dict[str, TemplateDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.id in entries:
                raise ValueError(f"Duplicate template id: {descriptor.id!r}")
            entries[descriptor.id] = descriptor
        self._entries = entries

    def lookup(self, template_id: str) -> TemplateDescriptor:
        """Return the descriptor for *template_id*.

        Raises:
            UnknownTemplateError: If no template with that id is registered.
        """
        try:
            return self._entries[template_id]
        except KeyError:
            raise UnknownTemplateError(template_id) from None

    def descriptors(self) -> list[TemplateDescriptor]:
        """All descriptors in declaration order."""
        return list(self._entries.values())

    def ids(self) -> list[str]:
        return list(self._entries)

    def __iter__(self) -> Iterator[TemplateDescriptor]:
        return iter(self.descriptors())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._entries


# ---------------------------------------------------------------------------
# Built-in templates
# ---------------------------------------------------------------------------

NODEJS_TEMPLATE = TemplateDescriptor(
    id="nodejs",
    display_name="Node.js",
    description="A basic Node.js project with Express",
    files=(
        TemplateFile(path="index.js", source="nodejs/index.js.j2"),
        TemplateFile(path="server.js", source="nodejs/server.js.j2"),
        TemplateFile(path="utils/logger.js", source="nodejs/utils/logger.js.j2"),
        TemplateFile(path="utils/config.js", source="nodejs/utils/config.js.j2"),
    ),
    dependencies=(
        "express",
        "dotenv",
        "morgan",
        "cors",
        "cookie-parser",
        "express-session",
        "winston",
    ),
    dev_dependencies=("nodemon",),
    scripts={"dev": "nodemon index.js", "start": "node index.js"},
    env_vars=("PORT", "ALLOWED_ORIGINS", "NODE_ENV", "SESSION_SECRET"),
)


def build_registry() -> TemplateRegistry:
    """Construct the registry of built-in templates."""
    return TemplateRegistry([NODEJS_TEMPLATE])
