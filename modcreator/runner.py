"""Task runner: wraps one async unit of work with timing and reporting.

The runner adds observability only.  It never swallows an error: whatever
the action raises is reported and then re-raised unchanged, so the pipeline
can apply a single failure policy to every step.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum

from rich.markup import escape

from modcreator.timing import Timer, TimingLedger
from modcreator.utils import console, create_progress, format_ms


class StepStatus(str, Enum):
    """Outcome a task action may return.  ``None`` means ``COMPLETED``."""

    COMPLETED = "completed"
    SKIPPED = "skipped"


TaskAction = Callable[[], Awaitable["StepStatus | None"]]


class TaskRunner:
    """Runs actions one at a time, timing each into a shared ledger."""

    def __init__(self, ledger: TimingLedger, show_spinner: bool = True) -> None:
        self.ledger = ledger
        self.show_spinner = show_spinner

    async def run(
        self,
        name: str,
        action: TaskAction,
        *,
        label: str | None = None,
        done: str | None = None,
    ) -> StepStatus:
        """Run *action* as the task *name*.

        Args:
            name: Ledger key for the task (e.g. ``"Git Initialization"``).
            action: Zero-argument coroutine function performing the work.
            label: Text shown while the task runs.
            done: Text shown when the task succeeds.

        Returns:
            The status the action reported.

        Raises:
            Exception: Whatever *action* raised, unchanged.
        """
        timer = Timer(name, self.ledger)
        description = escape(label or f"{name}...")

        timer.start()
        try:
            if self.show_spinner:
                with create_progress() as progress:
                    progress.add_task(description, total=None)
                    result = await action()
            else:
                console.print(f"[blue]>[/blue] {description}")
                result = await action()
        except Exception as exc:
            console.print(f"[bold red]x {escape(name)} failed:[/bold red] [red]{escape(str(exc))}[/red]")
            raise

        status = result or StepStatus.COMPLETED
        elapsed_ms = timer.stop()

        if status is StepStatus.SKIPPED:
            console.print(
                f"[yellow]! {escape(name)} skipped ({format_ms(elapsed_ms)})[/yellow]"
            )
        else:
            console.print(f"[green]+ {escape(done or name)} ({format_ms(elapsed_ms)})[/green]")
        return status
