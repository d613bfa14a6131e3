"""Plan phase state machine using the transitions library.

Each legal phase edge is a named trigger. The FSM wraps one plan: the plan's
phase is the source of truth when the FSM is built, and every transition
writes the new phase and timestamps back onto the plan.

Usage:
    from stepwise.workflow.fsm import PlanFSM

    fsm = PlanFSM(plan)
    fsm.define_strategy()   # analysis -> strategy
    fsm.present()           # strategy -> presentation
    fsm.request_approval()  # presentation -> approval (stamps approved_at)
"""

import logging
from typing import Callable

from transitions import Machine

from stepwise.lib.types import ExecutionPlan, PlanPhase, utcnow

logger = logging.getLogger(__name__)


# State values must match PlanPhase enum values
STATES = [
    "analysis",
    "strategy",
    "presentation",
    "approval",
    "execution",
    "completed",
    "cancelled",
]

# completed and cancelled have no outgoing transitions
TRANSITIONS = [
    # Forward path
    {"trigger": "define_strategy", "source": "analysis", "dest": "strategy"},
    {"trigger": "present", "source": "strategy", "dest": "presentation"},
    {"trigger": "request_approval", "source": "presentation", "dest": "approval"},
    {"trigger": "start_execution", "source": "approval", "dest": "execution"},
    {"trigger": "finish", "source": "execution", "dest": "completed"},

    # Going back for rework
    {"trigger": "reanalyze", "source": "strategy", "dest": "analysis"},
    {"trigger": "revise_strategy", "source": "presentation", "dest": "strategy"},
    {"trigger": "revise_strategy", "source": "approval", "dest": "strategy"},

    # Abandon from any live phase
    {"trigger": "cancel", "source": "analysis", "dest": "cancelled"},
    {"trigger": "cancel", "source": "strategy", "dest": "cancelled"},
    {"trigger": "cancel", "source": "presentation", "dest": "cancelled"},
    {"trigger": "cancel", "source": "approval", "dest": "cancelled"},
    {"trigger": "cancel", "source": "execution", "dest": "cancelled"},
]


def _build_trigger_lookup() -> dict[tuple[str, str], str]:
    """Build lookup from (source, dest) -> trigger name."""
    lookup: dict[tuple[str, str], str] = {}
    for t in TRANSITIONS:
        key = (t["source"], t["dest"])
        if key not in lookup:
            lookup[key] = t["trigger"]
    return lookup


TRIGGER_FOR = _build_trigger_lookup()


class PlanFSM:
    """State machine for one plan's phase.

    Wraps the transitions library with plan-specific logic:
    - Starts from the plan's current phase
    - Writes phase, updated_at, approved_at and completed_at back to the plan
    - Logs all transitions and notifies an optional observer
    """

    def __init__(
        self,
        plan: ExecutionPlan,
        on_transition: Callable[[str, str, str], None] | None = None,
    ):
        """Initialize FSM for a plan.

        Args:
            plan: Plan whose phase this machine governs
            on_transition: Optional callback(from_phase, to_phase, trigger) called after transitions
        """
        self.plan = plan
        self.on_transition = on_transition

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial=plan.phase.value,
            auto_transitions=False,  # Only explicit transitions
            send_event=True,  # Pass EventData to callbacks
            after_state_change="on_state_change",
        )

    def on_state_change(self, event) -> None:
        """Callback after any transition: sync the plan and notify."""
        from_phase = event.transition.source
        to_phase = event.transition.dest
        trigger = event.event.name

        now = utcnow()
        self.plan.phase = PlanPhase(to_phase)
        self.plan.updated_at = now
        if to_phase == "approval":
            self.plan.approved_at = now
        elif to_phase == "completed":
            self.plan.completed_at = now

        logger.info(f"[FSM] {self.plan.id}: {from_phase} -> {to_phase} ({trigger})")

        if self.on_transition:
            self.on_transition(from_phase, to_phase, trigger)

    def can(self, trigger: str) -> bool:
        """Check if a trigger can be executed in current state."""
        return trigger in self.machine.get_triggers(self.state)

    def get_available_triggers(self) -> list[str]:
        """Get list of triggers available in current state."""
        return self.machine.get_triggers(self.state)
