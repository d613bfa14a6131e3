"""
Human-readable plan renderings.

Both renderers are pure functions of the plan: no clock, no filesystem.
"""

from stepwise.lib.types import ExecutionPlan, RiskLevel, StepStatus

STATUS_SYMBOLS = {
    StepStatus.PENDING: "[ ]",
    StepStatus.IN_PROGRESS: "[~]",
    StepStatus.COMPLETED: "[x]",
    StepStatus.SKIPPED: "[-]",
    StepStatus.FAILED: "[!]",
}

WIDTH = 60
SECTION_WIDTH = 40


def _title_for(plan: ExecutionPlan, step_id: str) -> str:
    """Resolve a step id to its title, falling back to the raw id."""
    step = plan.find_step(step_id)
    return step.title if step else step_id


def _section(lines: list[str], name: str) -> None:
    lines.append("-" * SECTION_WIDTH)
    lines.append(name)
    lines.append("-" * SECTION_WIDTH)


def render_summary(plan: ExecutionPlan) -> str:
    """Fixed-width text block for terminals and logs."""
    analysis = plan.analysis
    lines = [
        "=" * WIDTH,
        f"EXECUTION PLAN: {plan.title}",
        "=" * WIDTH,
        "",
        f"Goal:    {plan.goal}",
        f"Phase:   {plan.phase.value.upper()}",
        f"Created: {plan.created_at.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}",
        "",
    ]

    _section(lines, "ANALYSIS")
    lines.append(f"Total Steps:          {analysis.total_steps}")
    lines.append(f"Total Files Affected: {analysis.total_files}")
    lines.append(f"Estimated Complexity: {analysis.estimated_complexity}")
    lines.append(f"Risk Assessment:      {analysis.risk_assessment.value.upper()}")
    lines.append("")

    _section(lines, "STEPS")
    for i, step in enumerate(plan.steps, 1):
        badge = f" [{step.risk.value.upper()} RISK]" if step.risk != RiskLevel.NONE else ""
        lines.append(f"{i}. {STATUS_SYMBOLS[step.status]} {step.title}{badge}")
        lines.append(f"   Priority: {step.priority.value} | Complexity: {step.estimated_complexity}")
        if step.description:
            lines.append(f"   {step.description}")
        if step.affected_files:
            lines.append(f"   Files: {', '.join(step.affected_files)}")
        if step.dependencies:
            names = ", ".join(_title_for(plan, d) for d in step.dependencies)
            lines.append(f"   Depends on: {names}")
        if step.notes:
            lines.append(f"   Notes: {step.notes}")
        lines.append("")

    if analysis.critical_path:
        _section(lines, "CRITICAL PATH")
        lines.append(" -> ".join(_title_for(plan, s) for s in analysis.critical_path))
        lines.append("")

    lines.append("=" * WIDTH)
    return "\n".join(lines)


def render_markdown(plan: ExecutionPlan) -> str:
    """Markdown document with a metrics table and one subsection per step."""
    analysis = plan.analysis
    lines = [f"# {plan.title}", ""]
    if plan.description:
        lines.extend([f"> {plan.description}", ""])
    lines.extend([
        f"**Goal:** {plan.goal}",
        f"**Phase:** {plan.phase.value}",
        f"**Created:** {plan.created_at.isoformat()}",
        "",
        "## Analysis",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| Total Steps | {analysis.total_steps} |",
        f"| Files Affected | {analysis.total_files} |",
        f"| Complexity | {analysis.estimated_complexity} |",
        f"| Risk | {analysis.risk_assessment.value} |",
        "",
        "## Steps",
        "",
    ])

    for i, step in enumerate(plan.steps, 1):
        checkbox = "[x]" if step.status == StepStatus.COMPLETED else "[ ]"
        lines.append(f"### {i}. {checkbox} {step.title}")
        lines.append("")
        if step.description:
            lines.append(step.description)
            lines.append("")
        lines.append(f"- **Priority:** {step.priority.value}")
        lines.append(f"- **Complexity:** {step.estimated_complexity}/5")
        lines.append(f"- **Risk:** {step.risk.value}")
        lines.append(f"- **Status:** {step.status.value}")
        if step.affected_files:
            files = "`, `".join(step.affected_files)
            lines.append(f"- **Files:** `{files}`")
        if step.dependencies:
            names = ", ".join(_title_for(plan, d) for d in step.dependencies)
            lines.append(f"- **Depends on:** {names}")

        if step.actions:
            lines.append("")
            lines.append("**Actions:**")
            for action in step.actions:
                lines.append(f"- {action.type.value}: {action.target} - {action.description}")

        lines.append("")

    return "\n".join(lines)
