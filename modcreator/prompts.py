"""Interactive collection of the answers that describe a new module.

Values given on the command line are validated as-is; anything missing is
asked for with Rich prompts, re-asking until the validator accepts it.
"""

from __future__ import annotations

import platform
import sys
from collections.abc import Callable, Mapping
from pathlib import Path

from rich.prompt import Prompt

from modcreator.config import CreatorConfig, ProjectConfig
from modcreator.utils import console, print_error, print_hint, print_panel
from modcreator.validation import (
    validate_folder_name,
    validate_icon_name,
    validate_module_name,
    validate_url,
)

Validator = Callable[[str], "str | None"]


class InputError(ValueError):
    """Raised when a non-interactive answer is missing or invalid."""


def print_banner() -> None:
    """Print the welcome banner with basic system information."""
    console.clear()
    print_panel(
        "\n".join([
            "[bold blue]Welcome to Regal-Soft Module Creator![/bold blue]",
            "",
            "[dim]System Information:[/dim]",
            f"[dim]Python       : {platform.python_version()}[/dim]",
            f"[dim]Platform     : {sys.platform}[/dim]",
            f"[dim]Architecture : {platform.machine()}[/dim]",
        ]),
        title="Regal-Soft",
    )
    console.print()


def ask(message: str, validator: Validator, default: str | None = None) -> str:
    """Prompt until *validator* accepts the answer."""
    while True:
        if default is None:
            value = Prompt.ask(f"[cyan]{message}[/cyan]", console=console)
        else:
            value = Prompt.ask(f"[cyan]{message}[/cyan]", default=default, console=console)
        value = (value or "").strip()
        error = validator(value)
        if error is None:
            return value
        print_error(error)


def collect_project_config(
    answers: Mapping[str, str | None],
    settings: CreatorConfig,
    *,
    interactive: bool = True,
    cwd: Path | None = None,
) -> ProjectConfig:
    """Build a ``ProjectConfig`` from given answers, prompting for the rest.

    Args:
        answers: Values already known, keyed by ``ProjectConfig`` field name.
            ``None`` means "not given".
        settings: Supplies defaults for the two URLs.
        interactive: When ``False``, never prompt; missing required values
            raise ``InputError`` and missing URLs take their defaults.
        cwd: Directory the folder name is checked against.

    Raises:
        InputError: If a given value is invalid, or a required value is
            missing while *interactive* is ``False``.
    """
    base_dir = cwd or Path.cwd()

    fields: list[tuple[str, str, Validator, str | None]] = [
        (
            "folder_name",
            "Please provide the folder name (or '.' for current directory)",
            lambda value: validate_folder_name(value, base_dir),
            None,
        ),
        ("module_name", "Please provide the Module name", validate_module_name, None),
        ("icon_name", "Please provide the Icon name", validate_icon_name, None),
        (
            "accounts_domain",
            "Enter VITE_PUBLIC_ACCOUNTS_DOMAIN",
            validate_url,
            settings.default_accounts_domain,
        ),
        ("api_url", "Enter VITE_PUBLIC_API_URL", validate_url, settings.default_api_url),
    ]

    values: dict[str, str] = {}
    for field, message, validator, default in fields:
        given = answers.get(field)
        if given is None and interactive:
            values[field] = ask(message, validator, default)
            continue
        if given is None:
            if default is None:
                raise InputError(f"Missing required value '{field}' (prompting is disabled)")
            given = default
        error = validator(given)
        if error is not None:
            raise InputError(error)
        values[field] = given

    if interactive:
        print_hint(f"Creating module {values['module_name']} in {values['folder_name']}")
    return ProjectConfig(**values)
