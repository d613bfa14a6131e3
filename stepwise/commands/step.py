"""
stepwise add/remove/reorder/status - Edit steps and record outcomes.
"""

import sys
from pathlib import Path

from stepwise.engine import PlanEngine
from stepwise.lib.drafts import parse_step_drafts
from stepwise.lib.types import StepDraft, StepStatus


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text()


def cmd_add(args, engine: PlanEngine, plan_path: Path):
    """Add one step from flags, or a batch of drafts from JSON."""
    if args.from_json:
        try:
            text = _read_source(args.from_json)
        except OSError as e:
            print(f"ERROR: Cannot read {args.from_json}: {e}")
            return 1
        drafts = parse_step_drafts(text)
        if not drafts:
            print("ERROR: No valid step drafts found")
            return 1
        added = engine.add_draft_batch(drafts)
    else:
        if not args.title:
            print("ERROR: Step title required (or use --from-json)")
            return 2
        try:
            draft = StepDraft(
                title=args.title,
                description=args.description or "",
                priority=args.priority,
                risk=args.risk,
                estimated_complexity=args.complexity,
                dependencies=args.depends or [],
                affected_files=args.files or [],
            )
        except ValueError as e:
            print(f"ERROR: {e}")
            return 2
        added = [engine.add_step(draft)]

    engine.save_plan(plan_path)
    for step in added:
        print(f"Added {step.id}: {step.title}")
    return 0


def cmd_remove(args, engine: PlanEngine, plan_path: Path):
    if not engine.remove_step(args.step_id):
        print(f"ERROR: Step '{args.step_id}' not found")
        return 1
    engine.save_plan(plan_path)
    print(f"Removed {args.step_id}")
    return 0


def cmd_reorder(args, engine: PlanEngine, plan_path: Path):
    plan = engine.get_plan()
    unknown = [s for s in args.step_ids if plan.find_step(s) is None]
    for step_id in unknown:
        print(f"WARNING: Ignoring unknown step '{step_id}'")

    engine.reorder_steps(args.step_ids)
    engine.save_plan(plan_path)
    for i, step in enumerate(plan.steps, 1):
        print(f"  {i}. {step.id}: {step.title}")
    return 0


def cmd_status(args, engine: PlanEngine, plan_path: Path):
    """Record a step outcome reported by the execution layer."""
    try:
        status = StepStatus(args.status)
    except ValueError:
        valid = ", ".join(s.value for s in StepStatus)
        print(f"ERROR: Unknown status '{args.status}' (expected one of: {valid})")
        return 2

    if not engine.update_step_status(args.step_id, status, notes=args.notes):
        print(f"ERROR: Step '{args.step_id}' not found")
        return 1

    engine.save_plan(plan_path)
    print(f"{args.step_id}: {status.value}")
    return 0
