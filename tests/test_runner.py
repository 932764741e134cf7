"""Unit tests for the task runner (modcreator.runner).

Tests cover:
- Successful actions are timed into the ledger
- SKIPPED actions are still timed
- Failures are re-raised unchanged and not timed
- Spinner and plain output modes
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from modcreator.runner import StepStatus, TaskRunner
from modcreator.timing import TimingLedger


pytestmark = pytest.mark.unit


class TestTaskRunner:
    @pytest.mark.asyncio
    async def test_success_records_duration(self):
        ledger = TimingLedger()
        runner = TaskRunner(ledger, show_spinner=False)
        action = AsyncMock(return_value=None)

        status = await runner.run("Git Initialization", action)

        action.assert_awaited_once()
        assert status is StepStatus.COMPLETED
        assert "Git Initialization" in ledger
        assert ledger["Git Initialization"] >= 0

    @pytest.mark.asyncio
    async def test_skipped_is_reported_and_timed(self):
        ledger = TimingLedger()
        runner = TaskRunner(ledger, show_spinner=False)

        status = await runner.run("Template Setup", AsyncMock(return_value=StepStatus.SKIPPED))

        assert status is StepStatus.SKIPPED
        assert "Template Setup" in ledger

    @pytest.mark.asyncio
    async def test_failure_reraises_same_exception(self):
        ledger = TimingLedger()
        runner = TaskRunner(ledger, show_spinner=False)
        error = OSError("disk full")

        with pytest.raises(OSError) as exc_info:
            await runner.run("Environment Setup", AsyncMock(side_effect=error))

        assert exc_info.value is error
        assert "Environment Setup" not in ledger

    @pytest.mark.asyncio
    async def test_with_spinner(self):
        ledger = TimingLedger()
        runner = TaskRunner(ledger, show_spinner=True)

        await runner.run("Vite Setup", AsyncMock(), label="Creating Vite application...", done="Vite created")

        assert list(ledger) == ["Vite Setup"]

    @pytest.mark.asyncio
    async def test_sequential_runs_keep_order(self):
        ledger = TimingLedger()
        runner = TaskRunner(ledger, show_spinner=False)
        for name in ("one", "two", "three"):
            await runner.run(name, AsyncMock())

        entries = ledger.entries()
        assert [e.name for e in entries] == ["one", "two", "three"]
        for earlier, later in zip(entries, entries[1:]):
            assert earlier.finished_at <= later.started_at
