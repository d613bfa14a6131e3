"""
stepwise show - Render the plan.
"""

from pathlib import Path

from stepwise.engine import PlanEngine


def cmd_show(args, engine: PlanEngine, plan_path: Path):
    """Print the plan as a text summary, Markdown, or JSON."""
    if args.json:
        print(engine.export_plan())
    elif args.markdown:
        print(engine.generate_markdown())
    else:
        print(engine.generate_summary())
    return 0
