"""
Shared data types for the plan engine.

This module contains the enums and dataclasses used across multiple modules
to avoid circular imports.
"""

import secrets
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class PlanPhase(Enum):
    """Lifecycle phases of a plan.

    Values match FSM state strings.
    """

    ANALYSIS = "analysis"
    STRATEGY = "strategy"
    PRESENTATION = "presentation"
    APPROVAL = "approval"
    EXECUTION = "execution"

    # Terminal phases
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class StepStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"


class Priority(Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RiskLevel(Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        """Position in the ordering none < low < medium < high."""
        return _RISK_RANK[self]


_RISK_RANK = {
    RiskLevel.NONE: 0,
    RiskLevel.LOW: 1,
    RiskLevel.MEDIUM: 2,
    RiskLevel.HIGH: 3,
}


class ActionType(Enum):
    """Kinds of operation a step performs."""

    CREATE_FILE = "create_file"
    MODIFY_FILE = "modify_file"
    DELETE_FILE = "delete_file"
    RENAME_FILE = "rename_file"
    MOVE_FILE = "move_file"
    ADD_DEPENDENCY = "add_dependency"
    REMOVE_DEPENDENCY = "remove_dependency"
    RUN_COMMAND = "run_command"
    RUN_TESTS = "run_tests"
    REFACTOR = "refactor"
    DOCUMENT = "document"
    REVIEW = "review"


COMPLEXITY_RANGE = (1, 5)


def generate_id(prefix: str) -> str:
    """Generate a unique id like ``step-1718000000000-a1b2c3d4``."""
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.token_hex(4)}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _unique(values) -> list[str]:
    """Collapse duplicates, keeping first-seen order."""
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def _parse_enum(enum_cls, value, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"Invalid {field_name} '{value}' (expected one of: {allowed})") from None


@dataclass
class StepAction:
    """A single typed operation within a step."""
    type: ActionType
    target: str
    description: str
    details: Optional[dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: dict) -> "StepAction":
        return cls(
            type=_parse_enum(ActionType, data.get("type"), "action type"),
            target=str(data.get("target", "")),
            description=str(data.get("description", "")),
            details=data.get("details"),
        )


@dataclass
class StepDraft:
    """A proposed step before the engine assigns an id and status.

    Drafts usually come from the language-model layer. Dependencies and
    affected files behave as sets: duplicates collapse, first-seen order is
    kept for display.
    """
    title: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    risk: RiskLevel = RiskLevel.NONE
    estimated_complexity: int = 1
    dependencies: list[str] = field(default_factory=list)
    affected_files: list[str] = field(default_factory=list)
    actions: list[StepAction] = field(default_factory=list)

    def __post_init__(self):
        self.priority = _parse_enum(Priority, self.priority, "priority")
        self.risk = _parse_enum(RiskLevel, self.risk, "risk")
        low, high = COMPLEXITY_RANGE
        if not low <= self.estimated_complexity <= high:
            raise ValueError(
                f"Invalid complexity '{self.estimated_complexity}' for step '{self.title}' (expected {low}-{high})"
            )
        self.dependencies = _unique(self.dependencies)
        self.affected_files = _unique(self.affected_files)

    @classmethod
    def from_dict(cls, data: dict) -> "StepDraft":
        """Build a draft from wire-format keys.

        Raises:
            ValueError: if the title is missing, an enum value is unknown, or
                the complexity is not an integer from 1 to 5.
        """
        title = str(data.get("title", "")).strip()
        if not title:
            raise ValueError("Step draft is missing a title")

        complexity = data.get("estimatedComplexity", data.get("estimated_complexity", 1))
        if isinstance(complexity, bool) or not isinstance(complexity, int):
            raise ValueError(f"Invalid complexity '{complexity}' for step '{title}'")

        return cls(
            title=title,
            description=str(data.get("description", "")),
            priority=data.get("priority", Priority.MEDIUM.value),
            risk=data.get("risk", RiskLevel.NONE.value),
            estimated_complexity=complexity,
            dependencies=[str(d) for d in data.get("dependencies", [])],
            affected_files=[str(f) for f in data.get("affectedFiles", data.get("affected_files", []))],
            actions=[StepAction.from_dict(a) for a in data.get("actions", [])],
        )


@dataclass
class PlanStep:
    """One schedulable unit of work inside a plan."""
    id: str
    title: str
    description: str
    priority: Priority
    risk: RiskLevel
    estimated_complexity: int
    dependencies: list[str] = field(default_factory=list)
    affected_files: list[str] = field(default_factory=list)
    actions: list[StepAction] = field(default_factory=list)
    status: StepStatus = StepStatus.PENDING
    notes: Optional[str] = None

    @classmethod
    def from_draft(cls, step_id: str, draft: StepDraft) -> "PlanStep":
        return cls(
            id=step_id,
            title=draft.title,
            description=draft.description,
            priority=draft.priority,
            risk=draft.risk,
            estimated_complexity=draft.estimated_complexity,
            dependencies=list(draft.dependencies),
            affected_files=list(draft.affected_files),
            actions=list(draft.actions),
        )


@dataclass
class PlanMetadata:
    version: int = 1
    author: str = "stepwise"
    tags: list[str] = field(default_factory=list)
    context: dict[str, Any] = field(default_factory=dict)


@dataclass
class PlanAnalysis:
    """Derived view of a plan's steps. Recomputed after every structural change."""
    total_steps: int = 0
    total_files: int = 0
    estimated_complexity: int = 0
    risk_assessment: RiskLevel = RiskLevel.NONE
    critical_path: list[str] = field(default_factory=list)
    parallelizable_groups: list[list[str]] = field(default_factory=list)
    rollback_points: list[str] = field(default_factory=list)


@dataclass
class ExecutionPlan:
    """The aggregate root: a goal broken into ordered, dependent steps."""
    id: str
    title: str
    description: str
    goal: str
    phase: PlanPhase = PlanPhase.ANALYSIS
    steps: list[PlanStep] = field(default_factory=list)
    metadata: PlanMetadata = field(default_factory=PlanMetadata)
    analysis: PlanAnalysis = field(default_factory=PlanAnalysis)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    approved_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def find_step(self, step_id: str) -> Optional[PlanStep]:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    def touch(self) -> None:
        self.updated_at = utcnow()
