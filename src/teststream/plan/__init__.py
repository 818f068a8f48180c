"""Run plan loader and replay."""

from .loader import load_plan
from .models import PlannedTest, PlanOptions, RunPlan
from .runner import run_plan, tally

__all__ = [
    "PlanOptions",
    "PlannedTest",
    "RunPlan",
    "load_plan",
    "run_plan",
    "tally",
]
