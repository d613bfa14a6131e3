"""
stepwise next - Show steps ready to run.
"""

from pathlib import Path

from stepwise.engine import PlanEngine
from stepwise.lib.types import StepStatus


def cmd_next(args, engine: PlanEngine, plan_path: Path):
    if args.all:
        ready = engine.get_parallel_steps()
    else:
        step = engine.get_next_step()
        ready = [step] if step else []

    if not ready:
        counts = engine.progress()
        total = sum(counts.values())
        pending = counts[StepStatus.PENDING]
        print(f"No runnable steps ({pending} pending, {counts[StepStatus.COMPLETED]}/{total} completed)")
        return 0

    for step in ready:
        print(f"{step.id}: {step.title}")
    return 0
