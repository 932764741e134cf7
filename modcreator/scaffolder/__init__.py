"""File generation for new front-end modules.

Two pieces live here: the template engine, which mirrors the bundled
``templates/`` tree into a project and replaces ``${token}`` placeholders,
and the Jinja2 renderer for the project's ``.env`` file.

Quick usage::

    from modcreator.scaffolder import TemplateEngine

    engine = TemplateEngine()
    written = await engine.copy_dir(
        "templates", "/tmp/demo", {"${moduleName}": "Demo", "${iconName}": "star"}
    )
"""

from modcreator.scaffolder.env import EnvFileRenderer
from modcreator.scaffolder.templates import TemplateEngine, TemplateError, substitute_tokens

__all__ = [
    "EnvFileRenderer",
    "TemplateEngine",
    "TemplateError",
    "substitute_tokens",
]
