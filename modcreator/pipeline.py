"""Module creator pipeline orchestrator.

Runs the fixed, ordered list of setup steps that turn an empty folder into a
ready-to-develop front-end module:

 1. Directory Creation      -- create the project folder
 2. Git Initialization      -- ``git init``
 3. Vite Setup              -- scaffold a React + TypeScript Vite app
 4. Directory Structure     -- create the required ``src/`` layout
 5. Environment Setup       -- write ``.env``
 6. Installing <group>      -- one npm install per dependency group,
                               then dev dependencies and Tailwind init
 7. Template Setup          -- copy bundled templates, substituting tokens
 8. Shadcn Setup            -- initialise the component library

Each step starts only after the previous one has finished.  The first
failure stops the run; if this run created the project folder, the folder
is removed before the error is passed on.

Usage::

    python -m modcreator my-module --module Orders --icon cart
"""

from __future__ import annotations

import argparse
import asyncio
import shutil
import sys
import time
import traceback
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from functools import partial
from pathlib import Path

from rich.markup import escape

from modcreator.config import DEV_GROUP_NAME, CreatorConfig, ProjectConfig
from modcreator.process import CommandRunner, SubprocessRunner
from modcreator.prompts import InputError, collect_project_config, print_banner
from modcreator.runner import StepStatus, TaskRunner
from modcreator.scaffolder import EnvFileRenderer, TemplateEngine
from modcreator.timing import TimingLedger
from modcreator.utils import (
    console,
    ensure_dir,
    format_duration,
    format_ms,
    print_error,
    print_hint,
    print_panel,
    print_section,
    print_success,
    print_summary_table,
    print_warning,
)

StepAction = Callable[[Path, ProjectConfig], Awaitable["StepStatus | None"]]

TROUBLESHOOTING_STEPS: list[str] = [
    "Ensure you have Node.js 20 or higher installed",
    "Check your internet connection",
    "Make sure you have write permissions in the target directory",
    "Try clearing npm cache: npm cache clean --force",
    "Check if the specified folder name is valid",
]


# ---------------------------------------------------------------------------
# Exceptions and state
# ---------------------------------------------------------------------------


class PipelineError(Exception):
    """Raised when the pipeline itself is misused (not when a step fails)."""


class PipelineState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class PipelineStep:
    """One named unit of setup work.

    Attributes:
        name: Ledger key and failure label (e.g. ``"Git Initialization"``).
        action: Coroutine function taking ``(project_path, project)``.
        label: Text shown while the step runs.
        done: Text shown when the step succeeds.
    """

    name: str
    action: StepAction
    label: str = ""
    done: str = ""


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Creates one module project by running every setup step in order.

    A pipeline instance runs at most once.  Step failures are re-raised
    unchanged after cleanup so the caller decides how to report them and
    which exit status to use.

    Attributes:
        project: The answers describing the module to create.
        settings: Commands, dependency groups and layout to use.
        project_path: Absolute destination directory.
        ledger: Durations of every step that completed, in execution order.
        state: Current ``PipelineState``.
        step_index: Index of the step running (or that failed), if any.
        error: The exception that failed the run, if any.
    """

    def __init__(
        self,
        project: ProjectConfig,
        settings: CreatorConfig | None = None,
        *,
        command_runner: CommandRunner | None = None,
        cwd: Path | None = None,
        show_spinner: bool = True,
    ) -> None:
        self.project = project
        self.settings = settings or CreatorConfig()
        self.commands: CommandRunner = command_runner or SubprocessRunner(
            timeout=self.settings.toolchain.command_timeout
        )
        self.cwd = (cwd or Path.cwd()).resolve()
        self.project_path = project.resolve_path(self.cwd)

        self.ledger = TimingLedger()
        self.runner = TaskRunner(self.ledger, show_spinner=show_spinner)
        self.templates = TemplateEngine()
        self.env_renderer = EnvFileRenderer()

        self.state = PipelineState.NOT_STARTED
        self.step_index: int | None = None
        self.error: Exception | None = None
        self.elapsed: float = 0.0
        self.cleaned_up = False
        self._owns_directory = False

        self.steps = self.build_steps()

    # ------------------------------------------------------------------
    # Step list
    # ------------------------------------------------------------------

    def build_steps(self) -> list[PipelineStep]:
        """Return the ordered step list for this run."""
        steps = [
            PipelineStep(
                "Directory Creation",
                self._create_directory,
                "Creating project directory...",
                "Project directory created",
            ),
            PipelineStep(
                "Git Initialization",
                self._init_git,
                "Initializing Git repository...",
                "Git repository initialized",
            ),
            PipelineStep(
                "Vite Setup",
                self._create_app,
                "Creating Vite application...",
                "Vite application created",
            ),
            PipelineStep(
                "Directory Structure",
                self._create_structure,
                "Setting up project structure...",
                "Project structure created",
            ),
            PipelineStep(
                "Environment Setup",
                self._write_env,
                "Creating environment configuration...",
                "Environment file created",
            ),
        ]

        for group, packages in self.settings.dependencies.groups.items():
            steps.append(
                PipelineStep(
                    f"Installing {group}",
                    partial(self._install_group, packages=packages, dev=False),
                    f"Installing {group} dependencies...",
                    f"{group} dependencies installed",
                )
            )
        if self.settings.dependencies.dev:
            steps.append(
                PipelineStep(
                    f"Installing {DEV_GROUP_NAME}",
                    partial(self._install_group, packages=self.settings.dependencies.dev, dev=True),
                    f"Installing {DEV_GROUP_NAME}...",
                    f"{DEV_GROUP_NAME} installed",
                )
            )

        steps.extend([
            PipelineStep(
                "Tailwind Configuration",
                self._configure_tailwind,
                "Configuring Tailwind...",
                "Tailwind configured",
            ),
            PipelineStep(
                "Template Setup",
                self._copy_templates,
                "Copying project templates...",
                "Templates copied",
            ),
            PipelineStep(
                "Shadcn Setup",
                self._init_ui_library,
                "Configuring shadcn/ui components...",
                "shadcn/ui configured",
            ),
        ])
        return steps

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def run(self) -> TimingLedger:
        """Run every step in order.

        Returns:
            The timing ledger, one entry per step.

        Raises:
            PipelineError: If this pipeline has already been run.
            Exception: The first step failure, unchanged, after cleanup.
        """
        if self.state is not PipelineState.NOT_STARTED:
            raise PipelineError(f"Pipeline already {self.state.value}; create a new one to run again")

        # Decided before anything touches the disk.
        self._owns_directory = self._may_remove_on_failure()
        started = time.monotonic()
        self.state = PipelineState.RUNNING

        try:
            for index, step in enumerate(self.steps):
                self.step_index = index
                await self.runner.run(
                    step.name,
                    partial(step.action, self.project_path, self.project),
                    label=step.label,
                    done=step.done,
                )
        except Exception as exc:
            self.elapsed = time.monotonic() - started
            self.state = PipelineState.FAILED
            self.error = exc
            console.print()
            print_error("Project creation failed:")
            console.print(str(exc), style="red", markup=False)
            await self._cleanup()
            raise

        self.elapsed = time.monotonic() - started
        self.state = PipelineState.COMPLETED
        self.step_index = None
        self._print_final_summary()
        return self.ledger

    def _may_remove_on_failure(self) -> bool:
        """Only a folder this run is about to create may be deleted."""
        if self.project_path == self.cwd:
            return False
        return not self.project_path.exists()

    async def _cleanup(self) -> None:
        """Remove the partially created project folder, at most once."""
        if self.cleaned_up:
            return
        self.cleaned_up = True

        if not self._owns_directory:
            print_hint(f"Leaving {escape(str(self.project_path))} in place (not created by this run)")
            return
        if not self.project_path.exists():
            return

        console.print()
        console.print("[yellow]Cleaning up...[/yellow]")
        try:
            await asyncio.to_thread(shutil.rmtree, self.project_path)
        except OSError as exc:
            print_error("Failed to clean up the project directory.")
            console.print(str(exc), style="red", markup=False)
        else:
            print_success("Cleanup successful.")

    # ------------------------------------------------------------------
    # Step actions
    # ------------------------------------------------------------------

    async def _create_directory(self, project_path: Path, project: ProjectConfig) -> None:
        if project_path != self.cwd:
            await ensure_dir(project_path)

    async def _init_git(self, project_path: Path, project: ProjectConfig) -> None:
        await self.commands.run(self.settings.toolchain.git_init, project_path)

    async def _create_app(self, project_path: Path, project: ProjectConfig) -> None:
        await self.commands.run(self.settings.toolchain.create_app, project_path)

    async def _create_structure(self, project_path: Path, project: ProjectConfig) -> None:
        await asyncio.gather(
            *(ensure_dir(project_path / rel) for rel in self.settings.required_directories)
        )

    async def _write_env(self, project_path: Path, project: ProjectConfig) -> None:
        await self.env_renderer.render_to_file(project_path / ".env", project.env_context)

    async def _install_group(
        self,
        project_path: Path,
        project: ProjectConfig,
        *,
        packages: list[str],
        dev: bool,
    ) -> None:
        command = self.settings.toolchain.install_command(packages, dev=dev)
        await self.commands.run(command, project_path)

    async def _configure_tailwind(self, project_path: Path, project: ProjectConfig) -> None:
        await self.commands.run(self.settings.toolchain.tailwind_init, project_path)

    async def _copy_templates(self, project_path: Path, project: ProjectConfig) -> StepStatus:
        templates_dir = self.settings.templates_dir
        if not self.templates.exists(templates_dir):
            print_warning(f"No templates found at {escape(str(templates_dir))}, skipping...")
            return StepStatus.SKIPPED
        await self.templates.copy_dir(templates_dir, project_path, project.tokens)
        return StepStatus.COMPLETED

    async def _init_ui_library(self, project_path: Path, project: ProjectConfig) -> None:
        await self.commands.run(self.settings.toolchain.ui_init, project_path)

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def _print_final_summary(self) -> None:
        """Print the success panel, per-task timings and next steps."""
        console.print()
        print_panel(
            "\n".join([
                f"[bold green]Project created successfully! ({format_duration(self.elapsed)})[/bold green]",
                "",
                f"Project Path : {escape(str(self.project_path))}",
                f"Module Name  : {escape(self.project.module_name)}",
                f"Environment  : {escape(self.project.accounts_domain)}",
            ]),
            title="Project Information",
            border_style="bold green",
        )
        print_summary_table(
            {escape(name): format_ms(duration) for name, duration in self.ledger.as_dict().items()},
            title="Task Timings",
            columns=("Task", "Duration"),
        )

        print_section("Next steps:")
        step_no = 1
        if not self.project.uses_current_dir:
            console.print(f"  {step_no}. cd [cyan]{escape(self.project.folder_name)}[/cyan]")
            step_no += 1
        console.print(f"  {step_no}. npm run dev")
        print_hint("Happy coding!")


# ---------------------------------------------------------------------------
# Top-level run
# ---------------------------------------------------------------------------


async def run_pipeline(
    project: ProjectConfig,
    settings: CreatorConfig | None = None,
    *,
    command_runner: CommandRunner | None = None,
    cwd: Path | None = None,
    verbose: bool = False,
    show_spinner: bool = True,
) -> int:
    """Create the project and return the process exit status.

    This is the only place where a step failure is turned into terminal
    output and an exit code.

    Returns:
        ``0`` when every step completed, ``1`` otherwise.
    """
    pipeline = Pipeline(
        project,
        settings,
        command_runner=command_runner,
        cwd=cwd,
        show_spinner=show_spinner,
    )
    print_section("Starting project creation...")
    console.print()

    try:
        await pipeline.run()
    except Exception:
        if verbose:
            console.print(traceback.format_exc(), style="dim", markup=False)
        _print_troubleshooting()
        return 1
    return 0


def _print_troubleshooting() -> None:
    print_section("Troubleshooting steps:")
    for number, hint in enumerate(TROUBLESHOOTING_STEPS, start=1):
        print_hint(f"{number}. {hint}")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modcreator",
        description="Create a new front-end module project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  modcreator\n"
            "  modcreator orders --module Orders --icon cart\n"
            "  modcreator . --module Orders --icon cart --yes\n"
        ),
    )
    parser.add_argument(
        "folder",
        nargs="?",
        default=None,
        help="Folder to create, or '.' for the current directory (prompted if omitted)",
    )
    parser.add_argument("--module", dest="module_name", default=None, help="Module name (PascalCase)")
    parser.add_argument("--icon", dest="icon_name", default=None, help="Icon name")
    parser.add_argument(
        "--accounts-domain",
        dest="accounts_domain",
        default=None,
        help="Value for VITE_PUBLIC_ACCOUNTS_DOMAIN",
    )
    parser.add_argument("--api-url", dest="api_url", default=None, help="Value for VITE_PUBLIC_API_URL")
    parser.add_argument(
        "--templates",
        type=Path,
        default=None,
        help="Template directory to copy (default: bundled templates)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON settings file (commands, dependency groups, layout)",
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Do not prompt; use defaults for anything optional that was not given",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show the full traceback when a step fails",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``modcreator`` and ``python -m modcreator``."""
    args = build_parser().parse_args(argv)

    if args.config is not None and not args.config.is_file():
        console.print(f"[bold red]Error:[/bold red] Config file not found: {escape(str(args.config))}")
        sys.exit(1)
    try:
        settings = CreatorConfig.load(args.config) if args.config is not None else CreatorConfig.from_env()
    except (ValueError, OSError) as exc:
        console.print(f"[bold red]Error:[/bold red] Invalid settings: {escape(str(exc))}")
        sys.exit(1)
    if args.templates is not None:
        settings = settings.model_copy(update={"templates_dir": args.templates})

    answers = {
        "folder_name": args.folder,
        "module_name": args.module_name,
        "icon_name": args.icon_name,
        "accounts_domain": args.accounts_domain,
        "api_url": args.api_url,
    }

    try:
        if not args.yes:
            print_banner()
        project = collect_project_config(answers, settings, interactive=not args.yes)
        exit_code = asyncio.run(run_pipeline(project, settings, verbose=args.verbose))
    except InputError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print()
        print_warning("Aborted.")
        sys.exit(130)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
