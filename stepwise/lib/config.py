"""
Engine configuration.

Loads stepwise.yaml to tune the plan engine. If no config file exists,
returns defaults. Only the `engine:` mapping is read:

    engine:
      max_steps: 50        # validator flags plans with more steps
      min_complexity: 1    # validator flags steps rated below this
      max_complexity: 5    # ... or above this
      author: stepwise     # metadata.author for new plans
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from stepwise.lib.types import COMPLEXITY_RANGE

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "stepwise.yaml"


@dataclass
class EngineOptions:
    """Tunables for PlanEngine and the plan validator."""
    max_steps: int = 50
    min_complexity: int = COMPLEXITY_RANGE[0]
    max_complexity: int = COMPLEXITY_RANGE[1]
    author: str = "stepwise"


def _coerce(name: str, value, default):
    """Convert a raw YAML value to the type of its default, or fall back."""
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            logger.warning(f"Invalid {name} '{value}', using {default}")
            return default
        return value
    if value is None or str(value).strip() == "":
        logger.warning(f"Empty {name}, using '{default}'")
        return default
    return str(value)


def load_engine_options(config_path: Optional[Path]) -> EngineOptions:
    """Load stepwise.yaml and return EngineOptions.

    If config_path is None or the file doesn't exist, returns defaults.
    Unparseable files and invalid values log a warning and fall back to the
    defaults for whatever could not be read.
    """
    defaults = EngineOptions()
    if config_path is None or not config_path.exists():
        return defaults

    try:
        data = yaml.safe_load(config_path.read_text())
    except yaml.YAMLError as e:
        logger.warning(f"Failed to parse {config_path}: {e}")
        return defaults

    engine = (data or {}).get("engine") if isinstance(data, dict) else None
    if not engine:
        return defaults
    if not isinstance(engine, dict):
        logger.warning(f"Ignoring 'engine' in {config_path}: expected a mapping")
        return defaults

    values = {}
    for f in fields(EngineOptions):
        default = getattr(defaults, f.name)
        if f.name in engine:
            values[f.name] = _coerce(f.name, engine[f.name], default)
        else:
            values[f.name] = default

    unknown = set(engine) - set(values)
    for key in sorted(unknown):
        logger.warning(f"Unknown engine option '{key}' in {config_path}")

    if values["min_complexity"] > values["max_complexity"]:
        logger.warning(
            f"min_complexity {values['min_complexity']} exceeds max_complexity "
            f"{values['max_complexity']}, using defaults"
        )
        values["min_complexity"] = defaults.min_complexity
        values["max_complexity"] = defaults.max_complexity

    return EngineOptions(**values)
