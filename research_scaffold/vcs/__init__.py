"""Version control for new projects.

Key pieces:
    GitRepository  - init / commit / branch rename / remote / push
    STEP_POLICIES  - which external steps are fatal and which best-effort
"""

from .git import GitRepository
from .policy import STEP_POLICIES, StepPolicy, run_step

__all__ = [
    "GitRepository",
    "STEP_POLICIES",
    "StepPolicy",
    "run_step",
]
