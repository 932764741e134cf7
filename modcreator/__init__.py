"""Regal-Soft module creator -- scaffolds new front-end module projects.

Quick usage::

    from modcreator import CreatorConfig, Pipeline, ProjectConfig

    project = ProjectConfig(folder_name="orders", module_name="Orders", icon_name="cart")
    ledger = await Pipeline(project, CreatorConfig()).run()
"""

from modcreator.config import CreatorConfig, ProjectConfig
from modcreator.pipeline import Pipeline, PipelineError, PipelineState, run_pipeline
from modcreator.timing import Timer, TimingLedger

__version__ = "0.1.0"

__all__ = [
    "CreatorConfig",
    "Pipeline",
    "PipelineError",
    "PipelineState",
    "ProjectConfig",
    "Timer",
    "TimingLedger",
    "run_pipeline",
]
