"""
Stepwise: execution plan engine.

Turns a goal into dependency-ordered steps, tracks them through the plan
lifecycle, and computes the graph properties needed to reason about order
and risk before anything runs.
"""

from stepwise.engine import PlanEngine, NoActivePlanError
from stepwise.lib.config import EngineOptions, load_engine_options
from stepwise.lib.types import (
    ActionType,
    ExecutionPlan,
    PlanAnalysis,
    PlanPhase,
    PlanStep,
    Priority,
    RiskLevel,
    StepAction,
    StepDraft,
    StepStatus,
)
from stepwise.lib.validate import PlanValidationResult, ValidationError

__all__ = [
    "PlanEngine",
    "NoActivePlanError",
    "EngineOptions",
    "load_engine_options",
    "ActionType",
    "ExecutionPlan",
    "PlanAnalysis",
    "PlanPhase",
    "PlanStep",
    "Priority",
    "RiskLevel",
    "StepAction",
    "StepDraft",
    "StepStatus",
    "PlanValidationResult",
    "ValidationError",
]
