"""Deployment tasks."""

from .base import Criticality, Outcome, Phase, Task, Verdict, judge
from .maintenance import MaintenanceModeTask
from .release import DeployReleaseTask

__all__ = [
    "Criticality",
    "DeployReleaseTask",
    "MaintenanceModeTask",
    "Outcome",
    "Phase",
    "Task",
    "Verdict",
    "judge",
]
