"""Jinja2 rendering of the generated project's ``.env`` file."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined

# No trailing newline: the file holds exactly two KEY=value lines.
ENV_TEMPLATE = (
    "VITE_PUBLIC_ACCOUNTS_DOMAIN={{ accounts_domain }}\n"
    "VITE_PUBLIC_API_URL={{ api_url }}"
)


class EnvFileRenderer:
    """Renders environment files from an inline Jinja2 template."""

    def __init__(self, template: str = ENV_TEMPLATE) -> None:
        self.env = Environment(
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.template = self.env.from_string(template)

    def render(self, context: dict[str, Any]) -> str:
        return self.template.render(**context)

    async def render_to_file(self, output_path: str | Path, context: dict[str, Any]) -> Path:
        """Render the template and write it to *output_path*, replacing any existing file."""
        content = self.render(context)
        out = Path(output_path)
        await asyncio.to_thread(out.write_text, content, encoding="utf-8")
        return out
