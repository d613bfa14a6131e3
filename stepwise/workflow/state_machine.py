"""Destination-based phase transitions for plans.

Thin layer over the FSM in fsm.py. Callers name the phase they want rather
than a trigger; illegal edges are reported with a False return instead of an
exception so a caller can simply try another target.

Usage:
    from stepwise.workflow.state_machine import transition_phase

    if not transition_phase(plan, "approval"):
        ...
"""

import logging
from typing import Callable

from transitions import MachineError

from stepwise.lib.types import ExecutionPlan, PlanPhase
from stepwise.workflow.fsm import PlanFSM, TRIGGER_FOR

logger = logging.getLogger(__name__)

TERMINAL_PHASES = frozenset({PlanPhase.COMPLETED, PlanPhase.CANCELLED})


def parse_phase(phase: str | PlanPhase | None) -> PlanPhase | None:
    """Parse a phase string into PlanPhase.

    Returns None if the phase is unknown.
    """
    if phase is None:
        return None
    if isinstance(phase, PlanPhase):
        return phase
    for candidate in PlanPhase:
        if candidate.value == phase:
            return candidate
    return None


def is_terminal(phase: PlanPhase) -> bool:
    return phase in TERMINAL_PHASES


def can_transition(plan: ExecutionPlan, target: str | PlanPhase) -> bool:
    """Check if the plan may move to the target phase."""
    to_phase = parse_phase(target)
    if to_phase is None:
        return False
    return (plan.phase.value, to_phase.value) in TRIGGER_FOR


def available_phases(plan: ExecutionPlan) -> list[PlanPhase]:
    """Phases reachable from the plan's current phase in one step."""
    return [
        PlanPhase(dest) for (source, dest) in TRIGGER_FOR
        if source == plan.phase.value
    ]


def transition_phase(
    plan: ExecutionPlan,
    target: str | PlanPhase,
    on_transition: Callable[[str, str, str], None] | None = None,
) -> bool:
    """Move the plan to a new phase if the edge is legal.

    Args:
        plan: Plan to transition
        target: Destination phase (enum or its string value)
        on_transition: Optional observer called as (from_phase, to_phase, trigger)

    Returns:
        True if the phase changed, False (plan untouched) otherwise.
    """
    to_phase = parse_phase(target)
    if to_phase is None:
        logger.warning(f"[STATE] {plan.id}: unknown phase '{target}'")
        return False

    trigger = TRIGGER_FOR.get((plan.phase.value, to_phase.value))
    if trigger is None:
        logger.debug(f"[STATE] {plan.id}: {plan.phase.value} -> {to_phase.value} not allowed")
        return False

    fsm = PlanFSM(plan, on_transition=on_transition)
    try:
        getattr(fsm, trigger)()
    except MachineError as e:
        logger.warning(f"[STATE] {plan.id}: transition rejected: {e}")
        return False
    return True
