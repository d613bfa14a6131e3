"""
JSON import/export for plans.

Wire format uses camelCase field names and ISO-8601 strings for every date.
In memory dates are timezone-aware datetimes and enum fields are enums.
"""

import json
from datetime import datetime
from typing import Any, Optional

from stepwise.lib.analysis import analyze
from stepwise.lib.types import (
    ActionType,
    ExecutionPlan,
    PlanAnalysis,
    PlanMetadata,
    PlanPhase,
    PlanStep,
    Priority,
    RiskLevel,
    StepAction,
    StepStatus,
    _unique,
)
from stepwise.lib.validate import ValidationError, load_json

SCHEMA = "plan"


def _format_date(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_date(value: Optional[str], field_name: str) -> Optional[datetime]:
    if value is None:
        return None
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(SCHEMA, f"Invalid ISO-8601 date '{value}'", field_name) from None


def action_to_dict(action: StepAction) -> dict:
    data: dict[str, Any] = {
        "type": action.type.value,
        "target": action.target,
        "description": action.description,
    }
    if action.details is not None:
        data["details"] = action.details
    return data


def step_to_dict(step: PlanStep) -> dict:
    data: dict[str, Any] = {
        "id": step.id,
        "title": step.title,
        "description": step.description,
        "priority": step.priority.value,
        "risk": step.risk.value,
        "estimatedComplexity": step.estimated_complexity,
        "dependencies": list(step.dependencies),
        "affectedFiles": list(step.affected_files),
        "actions": [action_to_dict(a) for a in step.actions],
        "status": step.status.value,
    }
    if step.notes is not None:
        data["notes"] = step.notes
    return data


def analysis_to_dict(analysis: PlanAnalysis) -> dict:
    return {
        "totalSteps": analysis.total_steps,
        "totalFiles": analysis.total_files,
        "estimatedComplexity": analysis.estimated_complexity,
        "riskAssessment": analysis.risk_assessment.value,
        "criticalPath": list(analysis.critical_path),
        "parallelizableGroups": [list(g) for g in analysis.parallelizable_groups],
        "rollbackPoints": list(analysis.rollback_points),
    }


def plan_to_dict(plan: ExecutionPlan) -> dict:
    """Convert a plan to its JSON document form."""
    data: dict[str, Any] = {
        "id": plan.id,
        "title": plan.title,
        "description": plan.description,
        "goal": plan.goal,
        "phase": plan.phase.value,
        "steps": [step_to_dict(s) for s in plan.steps],
        "metadata": {
            "version": plan.metadata.version,
            "author": plan.metadata.author,
            "tags": list(plan.metadata.tags),
            "context": dict(plan.metadata.context),
        },
        "analysis": analysis_to_dict(plan.analysis),
        "createdAt": _format_date(plan.created_at),
        "updatedAt": _format_date(plan.updated_at),
    }
    if plan.approved_at is not None:
        data["approvedAt"] = _format_date(plan.approved_at)
    if plan.completed_at is not None:
        data["completedAt"] = _format_date(plan.completed_at)
    return data


def step_from_dict(data: dict) -> PlanStep:
    return PlanStep(
        id=data["id"],
        title=data["title"],
        description=data["description"],
        priority=Priority(data["priority"]),
        risk=RiskLevel(data["risk"]),
        estimated_complexity=data["estimatedComplexity"],
        dependencies=_unique(data["dependencies"]),
        affected_files=_unique(data["affectedFiles"]),
        actions=[
            StepAction(
                type=ActionType(a["type"]),
                target=a["target"],
                description=a["description"],
                details=a.get("details"),
            )
            for a in data["actions"]
        ],
        status=StepStatus(data["status"]),
        notes=data.get("notes"),
    )


def plan_from_dict(data: dict) -> ExecutionPlan:
    """Rebuild a plan from a schema-valid document.

    The stored analysis is not trusted: it is recomputed from the steps so a
    hand-edited file cannot carry a stale analysis into memory.
    """
    meta = data["metadata"]
    steps = [step_from_dict(s) for s in data["steps"]]
    return ExecutionPlan(
        id=data["id"],
        title=data["title"],
        description=data["description"],
        goal=data["goal"],
        phase=PlanPhase(data["phase"]),
        steps=steps,
        metadata=PlanMetadata(
            version=meta["version"],
            author=meta.get("author", PlanMetadata.author),
            tags=list(meta.get("tags", [])),
            context=dict(meta.get("context", {})),
        ),
        analysis=analyze(steps),
        created_at=_parse_date(data["createdAt"], "createdAt"),
        updated_at=_parse_date(data["updatedAt"], "updatedAt"),
        approved_at=_parse_date(data.get("approvedAt"), "approvedAt"),
        completed_at=_parse_date(data.get("completedAt"), "completedAt"),
    )


def dump_plan(plan: ExecutionPlan) -> str:
    """Serialize a plan to pretty-printed JSON."""
    return json.dumps(plan_to_dict(plan), indent=2)


def parse_plan(text: str) -> ExecutionPlan:
    """
    Parse a plan JSON document.

    Raises:
        ValidationError: If the text is not JSON, doesn't match the plan
            schema, or carries an unparseable date
    """
    return plan_from_dict(load_json(text, SCHEMA))
