"""
Plan engine.

Owns one current ExecutionPlan and exposes every operation on it: building
the step list, moving through phases, reporting step outcomes, and asking
which steps are ready to run. The engine never runs a step itself.

There is no shared instance. Callers construct an engine per plan they want
to work on and pass it where it is needed. An engine is not thread-safe; a
host sharing one across threads must serialize access.

Error conventions:
- No current plan for a mutating call: NoActivePlanError is raised.
- Unknown step id or illegal phase edge: False is returned.
- Structural defects (cycles, dangling deps, ...): reported by validate().
- Malformed plan JSON on load: ValidationError is raised.
"""

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from stepwise.lib import render, serialize
from stepwise.lib.analysis import refresh_analysis
from stepwise.lib.config import EngineOptions
from stepwise.lib.types import (
    ExecutionPlan,
    PlanMetadata,
    PlanPhase,
    PlanStep,
    StepDraft,
    StepStatus,
    generate_id,
)
from stepwise.lib.validate import PlanValidationResult, ValidationError, validate_document, validate_plan
from stepwise.workflow.state_machine import transition_phase

logger = logging.getLogger(__name__)

DraftLike = Union[StepDraft, dict]


class NoActivePlanError(Exception):
    """Raised when an operation needs a current plan and there is none."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"No active plan for {operation}. Call create_plan first.")


class PlanEngine:
    """Builds, tracks and queries a single execution plan."""

    def __init__(
        self,
        options: Optional[EngineOptions] = None,
        on_transition: Callable[[str, str, str], None] | None = None,
    ):
        """
        Args:
            options: Engine tunables (defaults if None)
            on_transition: Optional observer called as (from_phase, to_phase, trigger)
                after every successful phase change
        """
        self.options = options or EngineOptions()
        self.on_transition = on_transition
        self._plan: Optional[ExecutionPlan] = None

    # -- plan lifecycle -----------------------------------------------------

    def create_plan(self, title: str, goal: str, description: str = "") -> ExecutionPlan:
        """Start a new plan in the analysis phase. Replaces any current plan."""
        plan = ExecutionPlan(
            id=generate_id("plan"),
            title=title,
            description=description,
            goal=goal,
            metadata=PlanMetadata(author=self.options.author),
        )
        if self._plan is not None:
            logger.info(f"[PLAN] Replacing current plan {self._plan.id} with {plan.id}")
        self._plan = plan
        logger.info(f"[PLAN] {plan.id}: created '{title}'")
        return plan

    def get_plan(self) -> Optional[ExecutionPlan]:
        return self._plan

    @property
    def plan(self) -> Optional[ExecutionPlan]:
        return self._plan

    def _require_plan(self, operation: str) -> ExecutionPlan:
        if self._plan is None:
            raise NoActivePlanError(operation)
        return self._plan

    def _structure_changed(self, plan: ExecutionPlan) -> None:
        refresh_analysis(plan)
        plan.touch()

    # -- building -----------------------------------------------------------

    def add_step(self, draft: DraftLike) -> PlanStep:
        """
        Append a step to the plan.

        The engine assigns the id and sets status to pending. Dependencies are
        not checked here, so steps may reference ids added later; validate()
        reports any that never appear.

        Args:
            draft: StepDraft, or a dict in draft wire format

        Raises:
            NoActivePlanError: If no plan exists
            ValueError: If a dict draft has invalid fields
        """
        plan = self._require_plan("add_step")
        if isinstance(draft, dict):
            ignored = sorted(k for k in ("id", "status") if k in draft)
            if ignored:
                logger.warning(f"[PLAN] {plan.id}: ignoring caller-supplied {', '.join(ignored)} on step draft")
            try:
                validate_document(draft, "step_draft")
            except ValidationError as e:
                raise ValueError(str(e)) from None
            draft = StepDraft.from_dict(draft)

        step = PlanStep.from_draft(generate_id("step"), draft)
        plan.steps.append(step)
        self._structure_changed(plan)
        logger.debug(f"[PLAN] {plan.id}: added step {step.id} '{step.title}'")
        return step

    def add_steps(self, drafts: Iterable[DraftLike]) -> list[PlanStep]:
        """Add several steps, returned in call order."""
        self._require_plan("add_steps")
        return [self.add_step(d) for d in drafts]

    def add_draft_batch(self, drafts: Iterable[DraftLike]) -> list[PlanStep]:
        """
        Add drafts whose dependencies may name steps by title.

        After the steps are added, every dependency that is not a step id but
        matches exactly one step title (new or existing) is rewritten to that
        step's id. Anything else stays as written for validate() to report.
        """
        plan = self._require_plan("add_draft_batch")
        added = self.add_steps(drafts)

        ids = {s.id for s in plan.steps}
        by_title: dict[str, list[str]] = {}
        for step in plan.steps:
            by_title.setdefault(step.title, []).append(step.id)

        rewired = False
        for step in added:
            resolved = []
            for dep in step.dependencies:
                matches = by_title.get(dep, [])
                if dep not in ids and len(matches) == 1:
                    dep = matches[0]
                    rewired = True
                if dep not in resolved:
                    resolved.append(dep)
            step.dependencies = resolved

        if rewired:
            self._structure_changed(plan)
        return added

    def remove_step(self, step_id: str) -> bool:
        """
        Delete a step and strip it from every other step's dependencies.

        Dependents are kept, never cascaded.

        Returns:
            False if the id is unknown, True otherwise.
        """
        plan = self._require_plan("remove_step")
        step = plan.find_step(step_id)
        if step is None:
            return False

        for other in plan.steps:
            if step_id in other.dependencies:
                other.dependencies = [d for d in other.dependencies if d != step_id]

        plan.steps.remove(step)
        self._structure_changed(plan)
        logger.debug(f"[PLAN] {plan.id}: removed step {step_id}")
        return True

    def reorder_steps(self, step_ids: list[str]) -> bool:
        """
        Move the named steps to the front in the given order.

        Unnamed steps follow in their previous relative order; unknown ids are
        ignored. Display order only: dependencies are unaffected.
        """
        plan = self._require_plan("reorder_steps")
        front: list[PlanStep] = []
        for step_id in step_ids:
            step = plan.find_step(step_id)
            if step is not None and step not in front:
                front.append(step)
        rest = [s for s in plan.steps if s not in front]

        plan.steps = front + rest
        self._structure_changed(plan)
        return True

    # -- lifecycle ----------------------------------------------------------

    def transition_phase(self, phase: Union[PlanPhase, str]) -> bool:
        """Move the plan to another phase. False if the edge is not allowed."""
        plan = self._require_plan("transition_phase")
        return transition_phase(plan, phase, on_transition=self.on_transition)

    # -- execution ----------------------------------------------------------

    def get_step(self, step_id: str) -> Optional[PlanStep]:
        if self._plan is None:
            return None
        return self._plan.find_step(step_id)

    def update_step_status(
        self,
        step_id: str,
        status: Union[StepStatus, str],
        notes: Optional[str] = None,
    ) -> bool:
        """
        Record a step outcome. The only way a step's status changes.

        Returns:
            False if the step id is unknown, True otherwise.

        Raises:
            NoActivePlanError: If no plan exists
            ValueError: If status is not a known StepStatus value
        """
        plan = self._require_plan("update_step_status")
        status = StepStatus(status)
        step = plan.find_step(step_id)
        if step is None:
            return False

        previous = step.status
        step.status = status
        if notes:
            step.notes = notes
        plan.touch()
        logger.info(f"[PLAN] {plan.id}: step {step_id} {previous.value} -> {status.value}")
        return True

    def _is_ready(self, step: PlanStep) -> bool:
        if step.status != StepStatus.PENDING:
            return False
        for dep_id in step.dependencies:
            dep = self._plan.find_step(dep_id)
            if dep is None or dep.status != StepStatus.COMPLETED:
                return False
        return True

    def get_next_step(self) -> Optional[PlanStep]:
        """First pending step, in stored order, whose dependencies are all completed."""
        if self._plan is None:
            return None
        for step in self._plan.steps:
            if self._is_ready(step):
                return step
        return None

    def get_parallel_steps(self) -> list[PlanStep]:
        """Every pending step whose dependencies are all completed.

        These may be dispatched at the same time: none of them can depend on
        another, since each of their dependencies is already completed.
        """
        if self._plan is None:
            return []
        return [s for s in self._plan.steps if self._is_ready(s)]

    def progress(self) -> dict[StepStatus, int]:
        """Number of steps in each status."""
        counts = {status: 0 for status in StepStatus}
        if self._plan is not None:
            for step in self._plan.steps:
                counts[step.status] += 1
        return counts

    # -- validation ---------------------------------------------------------

    def validate(self) -> PlanValidationResult:
        """Check the plan for structural defects. Advisory; never raises."""
        if self._plan is None:
            return PlanValidationResult(valid=False, issues=["No active plan"])
        return validate_plan(self._plan, self.options)

    # -- import / export ----------------------------------------------------

    def export_plan(self) -> str:
        """Serialize the current plan to JSON."""
        plan = self._require_plan("export_plan")
        return serialize.dump_plan(plan)

    def load_plan(self, text: str) -> ExecutionPlan:
        """
        Replace the current plan with one parsed from JSON.

        Raises:
            ValidationError: If the JSON is malformed or not a valid plan
        """
        plan = serialize.parse_plan(text)
        self._plan = plan
        logger.info(f"[PLAN] {plan.id}: loaded '{plan.title}' ({len(plan.steps)} steps)")
        return plan

    def save_plan(self, path: Path) -> None:
        """Write the current plan to a JSON file, creating parent directories."""
        text = self.export_plan()
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n")

    def load_plan_from_file(self, path: Path) -> ExecutionPlan:
        """
        Load a plan from a JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValidationError: If the file is not a valid plan
        """
        return self.load_plan(Path(path).read_text())

    # -- reporting ----------------------------------------------------------

    def generate_summary(self) -> str:
        if self._plan is None:
            return "No active plan"
        return render.render_summary(self._plan)

    def generate_markdown(self) -> str:
        if self._plan is None:
            return "No active plan"
        return render.render_markdown(self._plan)
