"""Template tree copying with literal token substitution.

Mirrors a template directory into a project directory and replaces
placeholder tokens such as ``${moduleName}`` in every copied file.  This is
deliberately not a templating language: tokens are matched literally,
replaced in a single pass, and replacement values are never re-scanned.
"""

from __future__ import annotations

import asyncio
import re
import shutil
from collections.abc import Mapping
from pathlib import Path

from rich.markup import escape

from modcreator.utils import ensure_dir, print_warning


class TemplateError(ValueError):
    """Raised when a template file cannot be processed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Template {path}: {reason}")


# ---------------------------------------------------------------------------
# Token substitution
# ---------------------------------------------------------------------------


def compile_tokens(tokens: Mapping[str, str]) -> re.Pattern[str] | None:
    """Build a single alternation matching every token literally.

    Longer tokens are tried first so that when one token is a prefix of
    another (``${name}`` vs ``${name}Suffix}``) the longer one wins.

    Returns:
        The compiled pattern, or ``None`` for an empty token map.

    Raises:
        ValueError: If any token is the empty string.
    """
    if not tokens:
        return None
    if any(not token for token in tokens):
        raise ValueError("Template tokens must be non-empty strings")
    ordered = sorted(tokens, key=len, reverse=True)
    return re.compile("|".join(re.escape(token) for token in ordered))


def substitute_tokens(
    content: str,
    tokens: Mapping[str, str],
    pattern: re.Pattern[str] | None = None,
) -> str:
    """Replace every occurrence of each token in *content*.

    Matching is exact and global, scanning left to right without overlaps.
    A replacement that itself contains token text is left as written.

    Examples::

        substitute_tokens("<${moduleName}/>", {"${moduleName}": "Demo"})
        -> "<Demo/>"
        substitute_tokens("${moduleNameX}", {"${moduleName}": "Demo"})
        -> "${moduleNameX}"
    """
    if pattern is None:
        pattern = compile_tokens(tokens)
    if pattern is None:
        return content
    return pattern.sub(lambda match: tokens[match.group(0)], content)


# ---------------------------------------------------------------------------
# TemplateEngine
# ---------------------------------------------------------------------------


class TemplateEngine:
    """Copies a template tree into a destination, substituting tokens.

    Sibling entries inside one directory are copied concurrently; the copy
    finishes only when every entry at every depth has finished.  There is no
    cap on how many siblings are in flight at once, so very wide template
    directories open many files simultaneously.

    Every file is decoded as UTF-8 text for substitution, binary files
    included.  A file that is not valid UTF-8 fails the copy with a
    ``TemplateError`` naming the file.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    @staticmethod
    def exists(source_root: str | Path) -> bool:
        """Return ``True`` if *source_root* is an existing directory."""
        return Path(source_root).is_dir()

    async def copy_dir(
        self,
        source_root: str | Path,
        dest_root: str | Path,
        tokens: Mapping[str, str],
    ) -> list[Path]:
        """Mirror *source_root* into *dest_root*.

        A missing *source_root* is not an error: a warning is printed and
        nothing is copied.  Files already copied before a failure are left
        in place; removing them is the caller's responsibility.

        Args:
            source_root: Template directory to read.
            dest_root: Directory to write into (created if missing).
            tokens: Mapping of literal token to replacement text.

        Returns:
            Destination paths of every file written, in directory order.
        """
        source = Path(source_root)
        if not self.exists(source):
            print_warning(f"No templates found at {escape(str(source))}, skipping")
            return []

        pattern = compile_tokens(tokens)
        dest = await ensure_dir(dest_root)
        return await self._copy_tree(source, dest, tokens, pattern)

    async def _copy_tree(
        self,
        source: Path,
        dest: Path,
        tokens: Mapping[str, str],
        pattern: re.Pattern[str] | None,
    ) -> list[Path]:
        entries = await asyncio.to_thread(_list_entries, source)
        results = await asyncio.gather(
            *(
                self._copy_entry(entry, dest / entry.name, tokens, pattern)
                for entry in entries
            )
        )
        return [path for written in results for path in written]

    async def _copy_entry(
        self,
        entry: Path,
        target: Path,
        tokens: Mapping[str, str],
        pattern: re.Pattern[str] | None,
    ) -> list[Path]:
        if entry.is_dir():
            await ensure_dir(target)
            return await self._copy_tree(entry, target, tokens, pattern)

        await asyncio.to_thread(
            _copy_and_substitute, entry, target, tokens, pattern, self.encoding
        )
        return [target]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _list_entries(directory: Path) -> list[Path]:
    return sorted(directory.iterdir())


def _copy_and_substitute(
    source: Path,
    target: Path,
    tokens: Mapping[str, str],
    pattern: re.Pattern[str] | None,
    encoding: str,
) -> None:
    """Synchronous helper: copy bytes verbatim, then rewrite with tokens replaced."""
    shutil.copyfile(source, target)
    # newline="" keeps CRLF templates byte-identical outside the tokens
    try:
        with open(target, encoding=encoding, newline="") as fh:
            content = fh.read()
    except UnicodeDecodeError as exc:
        reason = f"not valid {encoding} text ({exc.reason} at byte {exc.start})"
        raise TemplateError(source, reason) from exc
    with open(target, "w", encoding=encoding, newline="") as fh:
        fh.write(substitute_tokens(content, tokens, pattern))
