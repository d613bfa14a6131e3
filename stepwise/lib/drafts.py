"""
Step drafts proposed by the language-model layer.

The model answers with a JSON array of steps (sometimes wrapped in markdown
fences, sometimes as {"steps": [...]}). Invalid entries are skipped with a
warning rather than failing the whole batch.
"""

import json
import logging

from stepwise.lib.types import StepDraft
from stepwise.lib.validate import ValidationError, validate_document

logger = logging.getLogger(__name__)

SCHEMA = "step_draft"


def strip_markdown_fences(text: str) -> str:
    """Strip markdown code fences from text if present."""
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        if lines and lines[0].strip().startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        text = "\n".join(lines)
    return text


def parse_step_drafts(text: str) -> list[StepDraft]:
    """
    Parse a model response into step drafts.

    Args:
        text: Raw response, a JSON array or an object with a "steps" array

    Returns:
        Valid drafts in response order. Empty list if nothing usable.
    """
    try:
        data = json.loads(strip_markdown_fences(text))
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse step drafts as JSON: {e}")
        return []

    if isinstance(data, dict):
        data = data.get("steps")
    if not isinstance(data, list):
        logger.error("Step draft response is not a list")
        return []

    drafts = []
    for i, item in enumerate(data):
        try:
            validate_document(item, SCHEMA)
            drafts.append(StepDraft.from_dict(item))
        except (ValidationError, ValueError) as e:
            logger.warning(f"Skipping step draft {i}: {e}")

    return drafts
