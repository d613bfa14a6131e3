"""
Validation for plans.

Two kinds of checking live here:
- Schema validation at data boundaries (plan files, step drafts). Fails hard
  with a ValidationError naming the schema and the offending path.
- Structural plan validation. Never raises: defects such as cycles or
  dangling dependencies come back as a list of human-readable issues and the
  caller decides whether to warn, block, or ignore.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import jsonschema

from stepwise.lib import graph
from stepwise.lib.config import EngineOptions
from stepwise.lib.risk import high_risk_steps
from stepwise.lib.types import ExecutionPlan


class ValidationError(Exception):
    """Schema validation failed, or a document could not be parsed."""

    def __init__(self, schema_name: str, message: str, path: str = None):
        self.schema_name = schema_name
        self.path = path
        super().__init__(f"[{schema_name}] {message}" + (f" at {path}" if path else ""))


# Cache loaded schemas
_schema_cache: dict[str, dict] = {}


def _get_schemas_dir() -> Path:
    """Get path to schemas directory."""
    return Path(__file__).parent.parent / "schemas"


def _load_schema(schema_name: str) -> dict:
    """Load schema by name, with caching."""
    if schema_name not in _schema_cache:
        schema_path = _get_schemas_dir() / f"{schema_name}.schema.json"
        if not schema_path.exists():
            raise ValidationError(schema_name, f"Schema file not found: {schema_path}")
        _schema_cache[schema_name] = json.loads(schema_path.read_text())
    return _schema_cache[schema_name]


def validate_document(data, schema_name: str) -> None:
    """
    Validate data against named schema.

    Args:
        data: Parsed JSON value to validate
        schema_name: Schema name (e.g., "plan", "step_draft")

    Raises:
        ValidationError: If validation fails
    """
    schema = _load_schema(schema_name)

    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        path = ".".join(str(p) for p in e.absolute_path) if e.absolute_path else "(root)"
        raise ValidationError(schema_name, e.message, path) from None


def load_json(text: str, schema_name: str):
    """
    Parse JSON text and validate it against a schema.

    Raises:
        ValidationError: If the text is not JSON or doesn't match the schema
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(schema_name, f"Invalid JSON: {e}") from None

    validate_document(data, schema_name)
    return data


@dataclass
class PlanValidationResult:
    valid: bool
    issues: list[str] = field(default_factory=list)


def validate_plan(plan: ExecutionPlan, options: Optional[EngineOptions] = None) -> PlanValidationResult:
    """
    Check a plan for structural defects.

    Checks run in a fixed order so repeated calls on an unchanged plan give
    identical issue lists:
    1. dependency cycles (one issue per step closing a cycle)
    2. dangling dependencies (one issue per reference)
    3. empty plan
    4. high-risk steps with no rollback point
    5. step count above options.max_steps
    6. step complexity outside [options.min_complexity, options.max_complexity]

    Args:
        plan: Plan to check
        options: Engine options for the limit checks (defaults if None)

    Returns:
        PlanValidationResult; valid is True only when there are no issues.
    """
    options = options or EngineOptions()
    steps = plan.steps
    issues: list[str] = []

    issues.extend(graph.detect_cycles(steps))

    for step, dep_id in graph.find_missing_dependencies(steps):
        issues.append(f'Step "{step.title}" has missing dependency: {dep_id}')

    if not steps:
        issues.append("Plan has no steps")

    if high_risk_steps(steps) and not plan.analysis.rollback_points:
        issues.append("Plan contains high-risk steps but no rollback points are defined")

    if len(steps) > options.max_steps:
        issues.append(f"Plan has {len(steps)} steps, more than the maximum of {options.max_steps}")

    for step in steps:
        if not options.min_complexity <= step.estimated_complexity <= options.max_complexity:
            issues.append(
                f'Step "{step.title}" has complexity {step.estimated_complexity}, '
                f"outside {options.min_complexity}-{options.max_complexity}"
            )

    return PlanValidationResult(valid=not issues, issues=issues)
