"""Module creator configuration.

Typed configuration for the creation pipeline.  ``ProjectConfig`` holds the
answers collected from the user for one run; ``CreatorConfig`` holds the
tool's own settings (commands to run, dependency groups, directory layout).
All settings use Pydantic v2 models so they are validated at construction
time and serialise to/from JSON without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modcreator.validation import (
    validate_folder_name,
    validate_icon_name,
    validate_module_name,
    validate_url,
)

DEFAULT_ACCOUNTS_DOMAIN = "https://accounts.dev.regal-soft.in/"
DEFAULT_API_URL = "https://dev.regal-soft.in/api"

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"

REQUIRED_DIRECTORIES: list[str] = [
    "src/assets",
    "src/components",
    "src/hooks",
    "src/lib",
    "src/pages",
    "src/services",
    "src/types",
    "src/components/ui",
]

DEPENDENCY_GROUPS: dict[str, list[str]] = {
    "ui": [
        "@radix-ui/react-slot",
        "@radix-ui/react-separator",
        "@radix-ui/react-tooltip",
        "@radix-ui/react-dialog",
        "@radix-ui/react-dropdown-menu",
        "@radix-ui/react-accordion",
        "@radix-ui/react-avatar",
        "@radix-ui/react-collapsible",
        "@radix-ui/react-label",
        "@radix-ui/react-popover",
        "@radix-ui/react-select",
        "lucide-react",
    ],
    "core": [
        "nuqs",
        "sonner",
        "next-themes",
        "tailwind-merge",
        "tailwindcss-animate",
        "class-variance-authority",
        "clsx",
    ],
    "state": ["@tanstack/react-query", "@tanstack/react-query-devtools", "zustand"],
    "routing": ["react-router-dom"],
    "utils": ["date-fns", "date-fns-tz", "react-day-picker", "cmdk", "axios", "zod"],
}

DEV_DEPENDENCIES: list[str] = ["tailwindcss@3", "postcss", "autoprefixer", "@types/node"]
DEV_GROUP_NAME = "dev dependencies"


# ---------------------------------------------------------------------------
# Per-run answers
# ---------------------------------------------------------------------------


class ProjectConfig(BaseModel):
    """The answers describing one module to create.

    Immutable once built; every pipeline step reads it and none writes it.
    Format checks run at construction, but whether the folder already exists
    is left to the prompt layer, which knows the working directory.
    """

    model_config = ConfigDict(frozen=True)

    folder_name: str = Field(..., description="Target folder slug, or '.' for the current directory")
    module_name: str = Field(..., description="PascalCase module display name")
    icon_name: str = Field(..., description="Icon identifier shown in the sidebar")
    accounts_domain: str = Field(default=DEFAULT_ACCOUNTS_DOMAIN)
    api_url: str = Field(default=DEFAULT_API_URL)

    @field_validator("folder_name")
    @classmethod
    def check_folder_name(cls, value: str) -> str:
        return _raise_on(validate_folder_name(value, check_exists=False), value)

    @field_validator("module_name")
    @classmethod
    def check_module_name(cls, value: str) -> str:
        return _raise_on(validate_module_name(value), value)

    @field_validator("icon_name")
    @classmethod
    def check_icon_name(cls, value: str) -> str:
        return _raise_on(validate_icon_name(value), value)

    @field_validator("accounts_domain", "api_url")
    @classmethod
    def check_url(cls, value: str) -> str:
        return _raise_on(validate_url(value), value)

    @property
    def uses_current_dir(self) -> bool:
        return self.folder_name == "."

    @property
    def tokens(self) -> dict[str, str]:
        """Template placeholders and the values they are replaced with."""
        return {
            "${moduleName}": self.module_name,
            "${iconName}": self.icon_name,
        }

    @property
    def env_context(self) -> dict[str, str]:
        return {"accounts_domain": self.accounts_domain, "api_url": self.api_url}

    def resolve_path(self, cwd: Path | None = None) -> Path:
        """Return the absolute project directory for this run."""
        base = (cwd or Path.cwd()).resolve()
        return base if self.uses_current_dir else base / self.folder_name


def _raise_on(error: str | None, value: str) -> str:
    if error is not None:
        raise ValueError(error)
    return value


# ---------------------------------------------------------------------------
# Tool settings
# ---------------------------------------------------------------------------


class ToolchainConfig(BaseModel):
    """External commands run by the pipeline, as argument lists."""

    git_init: list[str] = Field(default_factory=lambda: ["git", "init"])
    create_app: list[str] = Field(
        default_factory=lambda: ["npm", "create", "vite@latest", ".", "--", "--template", "react-ts"]
    )
    install: list[str] = Field(default_factory=lambda: ["npm", "install"])
    dev_flag: str = Field(default="-D", description="Flag added to 'install' for dev dependencies")
    tailwind_init: list[str] = Field(default_factory=lambda: ["npx", "tailwindcss", "init", "-p"])
    ui_init: list[str] = Field(default_factory=lambda: ["npx", "shadcn@latest", "init"])
    command_timeout: int = Field(default=600, ge=10, description="Per-command timeout in seconds")

    def install_command(self, packages: list[str], dev: bool = False) -> list[str]:
        """Build the install command for one dependency group."""
        flags = [self.dev_flag] if dev else []
        return [*self.install, *flags, *packages]


class DependencyConfig(BaseModel):
    """npm packages installed into the generated project, in install order."""

    groups: dict[str, list[str]] = Field(
        default_factory=lambda: {name: list(deps) for name, deps in DEPENDENCY_GROUPS.items()}
    )
    dev: list[str] = Field(default_factory=lambda: list(DEV_DEPENDENCIES))

    @field_validator("groups")
    @classmethod
    def check_group_names(cls, value: dict[str, list[str]]) -> dict[str, list[str]]:
        for name in value:
            if not name.strip():
                raise ValueError("Dependency group names cannot be empty")
            # Each group becomes the step "Installing <name>"
            if name == DEV_GROUP_NAME:
                raise ValueError(f"'{DEV_GROUP_NAME}' is reserved for the dev dependency install")
        return value


class CreatorConfig(BaseModel):
    """Global module creator configuration.

    Instances are typically created once by the CLI entry point and then
    passed to ``Pipeline``.
    """

    templates_dir: Path = Field(default=DEFAULT_TEMPLATES_DIR)
    required_directories: list[str] = Field(default_factory=lambda: list(REQUIRED_DIRECTORIES))
    default_accounts_domain: str = Field(default=DEFAULT_ACCOUNTS_DOMAIN)
    default_api_url: str = Field(default=DEFAULT_API_URL)
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    dependencies: DependencyConfig = Field(default_factory=DependencyConfig)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "CreatorConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "CreatorConfig":
        """Build a ``CreatorConfig`` from environment variables.

        Recognised variables (all optional):
            MODCREATOR_TEMPLATES_DIR, MODCREATOR_COMMAND_TIMEOUT,
            MODCREATOR_ACCOUNTS_DOMAIN, MODCREATOR_API_URL.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("MODCREATOR_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["MODCREATOR_TEMPLATES_DIR"])
        if os.environ.get("MODCREATOR_ACCOUNTS_DOMAIN"):
            kwargs["default_accounts_domain"] = os.environ["MODCREATOR_ACCOUNTS_DOMAIN"]
        if os.environ.get("MODCREATOR_API_URL"):
            kwargs["default_api_url"] = os.environ["MODCREATOR_API_URL"]

        toolchain_kwargs: dict[str, Any] = {}
        timeout = os.environ.get("MODCREATOR_COMMAND_TIMEOUT")
        if timeout:
            try:
                toolchain_kwargs["command_timeout"] = int(timeout)
            except ValueError:
                raise ValueError(
                    f"MODCREATOR_COMMAND_TIMEOUT must be an integer number of seconds, got {timeout!r}"
                ) from None

        return cls(toolchain=ToolchainConfig(**toolchain_kwargs), **kwargs)
