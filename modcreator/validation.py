"""Pre-flight checks for the values a user supplies.

Each validator returns ``None`` when the value is acceptable, or a message
describing what is wrong.  The prompt layer shows the message and asks
again; the CLI aborts with it before any pipeline step runs.
"""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import urlparse

MAX_FOLDER_NAME_LENGTH = 214

_FOLDER_NAME_RE = re.compile(r"^[a-z0-9_-]+$")
_MODULE_NAME_RE = re.compile(r"^[A-Za-z0-9]+$")


def validate_folder_name(
    value: str,
    base_dir: str | Path | None = None,
    check_exists: bool = True,
) -> str | None:
    """Check a project folder name.

    ``"."`` (the current directory) is always accepted.  Anything else must
    be a lowercase slug of at most 214 characters.  With *check_exists* it
    must also not already exist under *base_dir* (the current directory
    when omitted).
    """
    if value == ".":
        return None
    if not value:
        return "Folder name cannot be empty"
    if not _FOLDER_NAME_RE.match(value):
        return "Folder name must contain only lowercase letters, numbers, dashes, or underscores"
    if len(value) > MAX_FOLDER_NAME_LENGTH:
        return f"Folder name is too long (max {MAX_FOLDER_NAME_LENGTH} characters)"
    if not check_exists:
        return None
    base = Path(base_dir) if base_dir is not None else Path.cwd()
    if (base / value).exists():
        return f'Folder "{value}" already exists. Please choose a different name.'
    return None


def validate_module_name(value: str) -> str | None:
    """Check a module display name (PascalCase, letters and digits only)."""
    if not value:
        return "Module name cannot be empty"
    if not value[0].isascii() or not value[0].isupper():
        return "Module name must start with a capital letter"
    if not _MODULE_NAME_RE.match(value):
        return "Module name must contain only letters and numbers"
    return None


def validate_icon_name(value: str) -> str | None:
    if not value:
        return "Icon name cannot be empty"
    return None


def validate_url(value: str) -> str | None:
    """Check that *value* is an absolute http(s) URL with a host."""
    if not value:
        return "URL cannot be empty"
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return f"Not a valid http(s) URL: {value}"
    return None
