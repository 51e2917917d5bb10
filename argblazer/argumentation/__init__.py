"""Argumentation core — Dung's AAF semantics, ranks and step decomposition."""
from .engine import SemanticsEngine, compute_extensions
from .errors import (
    ArgumentationError,
    FrameworkTooLarge,
    InvalidDocument,
    InvalidFramework,
)
from .models import (
    Attack,
    AttackGraph,
    Extension,
    ExtensionsResult,
    RankMap,
    Semantics,
    StepResult,
)
from .rank import RankEngine, compute_rank
from .steps import StepDecomposer, StepPlan

__all__ = [
    "SemanticsEngine",
    "compute_extensions",
    "RankEngine",
    "compute_rank",
    "StepDecomposer",
    "StepPlan",
    "ArgumentationError",
    "FrameworkTooLarge",
    "InvalidDocument",
    "InvalidFramework",
    "Attack",
    "AttackGraph",
    "Extension",
    "ExtensionsResult",
    "RankMap",
    "Semantics",
    "StepResult",
]
