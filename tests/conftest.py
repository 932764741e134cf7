"""Shared pytest fixtures for the module creator test suite.

Provides reusable fixtures for:
- A recording fake ``CommandRunner`` that never spawns processes
- Sample project answers and tool settings pointing at temp directories
- A small template tree containing substitution tokens
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from modcreator.config import CreatorConfig, ProjectConfig
from modcreator.process import CommandError, CommandOutput


# ---------------------------------------------------------------------------
# Fake command runner
# ---------------------------------------------------------------------------


class FakeCommandRunner:
    """Records every command instead of running it.

    Args:
        fail_when: Optional predicate; when it returns ``True`` for a command,
            ``CommandError`` is raised instead of succeeding.
        on_run: Optional side effect called with ``(command, cwd)`` before
            the command "succeeds" (e.g. to create files a tool would write).
    """

    def __init__(
        self,
        fail_when: Callable[[list[str]], bool] | None = None,
        on_run: Callable[[list[str], Path], None] | None = None,
    ) -> None:
        self.fail_when = fail_when
        self.on_run = on_run
        self.calls: list[tuple[list[str], Path]] = []

    async def run(self, command: list[str], cwd: Path) -> CommandOutput:
        self.calls.append((list(command), Path(cwd)))
        if self.fail_when is not None and self.fail_when(command):
            raise CommandError(command, 1, "forced failure")
        if self.on_run is not None:
            self.on_run(command, Path(cwd))
        return CommandOutput(command=list(command))

    @property
    def commands(self) -> list[list[str]]:
        return [command for command, _ in self.calls]


def fails_on_install(command: list[str]) -> bool:
    return command[:2] == ["npm", "install"]


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_runner() -> FakeCommandRunner:
    return FakeCommandRunner()


@pytest.fixture
def demo_project() -> ProjectConfig:
    """The ``demo`` project used by the end-to-end scenarios."""
    return ProjectConfig(
        folder_name="demo",
        module_name="Demo",
        icon_name="star",
        accounts_domain="https://a.test/",
        api_url="https://a.test/api",
    )


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """A small template tree with nested directories and tokens."""
    root = tmp_path / "templates"
    (root / "src" / "components").mkdir(parents=True)
    (root / "src" / "App.tsx").write_text(
        "export const title = '${moduleName}';\n", encoding="utf-8"
    )
    (root / "src" / "components" / "nav-home.tsx").write_text(
        "<img src={`/icons/${iconName}.png`} alt='${moduleName}' />\n"
        "<span>${moduleName}</span>\n",
        encoding="utf-8",
    )
    (root / "README.md").write_text("# ${moduleName}\n", encoding="utf-8")
    return root


@pytest.fixture
def settings(tmp_path: Path, template_root: Path) -> CreatorConfig:
    """Tool settings using the temp template tree."""
    return CreatorConfig(templates_dir=template_root)


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Empty directory acting as the process working directory."""
    cwd = tmp_path / "work"
    cwd.mkdir()
    return cwd


@pytest.fixture
def fake_runner_factory() -> Callable[..., FakeCommandRunner]:
    return FakeCommandRunner


@pytest.fixture
def install_failure() -> Callable[[list[str]], bool]:
    return fails_on_install
