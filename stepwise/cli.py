#!/usr/bin/env python3
"""Stepwise CLI entrypoint."""

import sys
import argparse
import logging
from pathlib import Path

from stepwise.engine import PlanEngine
from stepwise.lib.config import CONFIG_FILENAME, load_engine_options
from stepwise.lib.types import Priority, RiskLevel
from stepwise.lib.validate import ValidationError
from stepwise.commands import new as cmd_new_module
from stepwise.commands import step as cmd_step_module
from stepwise.commands import phase as cmd_phase_module
from stepwise.commands import next as cmd_next_module
from stepwise.commands import validate as cmd_validate_module
from stepwise.commands import show as cmd_show_module


def get_engine(args) -> PlanEngine:
    """Build an engine from --config, or stepwise.yaml in the working directory."""
    config_path = Path(args.config) if args.config else Path.cwd() / CONFIG_FILENAME
    return PlanEngine(load_engine_options(config_path))


def open_plan(args) -> tuple[PlanEngine, Path]:
    """Load the plan file named by --file or exit."""
    engine = get_engine(args)
    plan_path = Path(args.file)
    if not plan_path.exists():
        print(f"ERROR: No plan at {plan_path}. Create one with 'stepwise new <title>'.")
        sys.exit(2)

    try:
        engine.load_plan_from_file(plan_path)
    except (ValidationError, OSError, UnicodeDecodeError) as e:
        print(f"ERROR: Cannot load {plan_path}: {e}")
        sys.exit(2)

    return engine, plan_path


def cmd_new(args):
    return cmd_new_module.cmd_new(args, get_engine(args), Path(args.file))


def cmd_add(args):
    engine, plan_path = open_plan(args)
    return cmd_step_module.cmd_add(args, engine, plan_path)


def cmd_remove(args):
    engine, plan_path = open_plan(args)
    return cmd_step_module.cmd_remove(args, engine, plan_path)


def cmd_reorder(args):
    engine, plan_path = open_plan(args)
    return cmd_step_module.cmd_reorder(args, engine, plan_path)


def cmd_status(args):
    engine, plan_path = open_plan(args)
    return cmd_step_module.cmd_status(args, engine, plan_path)


def cmd_phase(args):
    engine, plan_path = open_plan(args)
    return cmd_phase_module.cmd_phase(args, engine, plan_path)


def cmd_next(args):
    engine, plan_path = open_plan(args)
    return cmd_next_module.cmd_next(args, engine, plan_path)


def cmd_validate(args):
    engine, plan_path = open_plan(args)
    return cmd_validate_module.cmd_validate(args, engine, plan_path)


def cmd_show(args):
    engine, plan_path = open_plan(args)
    return cmd_show_module.cmd_show(args, engine, plan_path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='stepwise', description='Execution plan engine')
    parser.add_argument('--file', '-f', default='plan.json', help='Plan JSON file (default: plan.json)')
    parser.add_argument('--config', '-c', help=f'Config file (default: ./{CONFIG_FILENAME})')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log engine activity to stderr')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # stepwise new
    p_new = subparsers.add_parser('new', help='Create a plan')
    p_new.add_argument('title', help='Plan title')
    p_new.add_argument('--goal', '-g', help='Goal (defaults to the title)')
    p_new.add_argument('--description', '-d', help='Longer description')
    p_new.add_argument('--tag', action='append', help='Tag (repeatable)')
    p_new.add_argument('--force', action='store_true', help='Replace an existing plan file')
    p_new.set_defaults(func=cmd_new)

    # stepwise add
    p_add = subparsers.add_parser('add', help='Add a step')
    p_add.add_argument('title', nargs='?', help='Step title (omit with --from-json)')
    p_add.add_argument('--description', '-d', help='Step description')
    p_add.add_argument('--priority', choices=[p.value for p in Priority], default='medium')
    p_add.add_argument('--risk', choices=[r.value for r in RiskLevel], default='none')
    p_add.add_argument('--complexity', type=int, default=1, help='Estimated complexity 1-5')
    p_add.add_argument('--depends', action='append', help='Step id this depends on (repeatable)')
    p_add.add_argument('--files', action='append', help='Affected file (repeatable)')
    p_add.add_argument('--from-json', help="Add step drafts from a JSON file ('-' for stdin)")
    p_add.set_defaults(func=cmd_add)

    # stepwise remove
    p_remove = subparsers.add_parser('remove', help='Remove a step')
    p_remove.add_argument('step_id', help='Step ID')
    p_remove.set_defaults(func=cmd_remove)

    # stepwise reorder
    p_reorder = subparsers.add_parser('reorder', help='Move steps to the front in the given order')
    p_reorder.add_argument('step_ids', nargs='+', help='Step IDs in desired order')
    p_reorder.set_defaults(func=cmd_reorder)

    # stepwise status
    p_status = subparsers.add_parser('status', help='Record a step outcome')
    p_status.add_argument('step_id', help='Step ID')
    p_status.add_argument('status', help='pending, in_progress, completed, skipped or failed')
    p_status.add_argument('--notes', '-n', help='Note to attach to the step')
    p_status.set_defaults(func=cmd_status)

    # stepwise phase
    p_phase = subparsers.add_parser('phase', help='Show or change the plan phase')
    p_phase.add_argument('target', nargs='?', help='Phase to move to')
    p_phase.add_argument('--force', action='store_true', help='Enter approval even if validation fails')
    p_phase.set_defaults(func=cmd_phase)

    # stepwise next
    p_next = subparsers.add_parser('next', help='Show the next runnable step')
    p_next.add_argument('--all', '-a', action='store_true', help='Show every step that can run now')
    p_next.set_defaults(func=cmd_next)

    # stepwise validate
    p_validate = subparsers.add_parser('validate', help='Check the plan for problems')
    p_validate.set_defaults(func=cmd_validate)

    # stepwise show
    p_show = subparsers.add_parser('show', help='Render the plan')
    p_show.add_argument('--markdown', '-m', action='store_true', help='Render as Markdown')
    p_show.add_argument('--json', action='store_true', help='Print the plan JSON')
    p_show.set_defaults(func=cmd_show)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
