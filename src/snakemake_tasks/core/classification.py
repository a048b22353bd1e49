"""Name-based grouping of discovered tasks."""

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .models import GroupRule, TaskGroup

logger = logging.getLogger(__name__)

DEFAULT_RULES_FILE = (
    Path(__file__).parent.parent / "providers" / "snakemake" / "rules" / "task_groups.yaml"
)


def load_group_rules(path: Optional[Path] = None) -> list[GroupRule]:
    """
    Load ordered group rules from YAML.

    The file holds a top-level ``groups`` list; order is significant because
    the first matching rule wins.

    Args:
        path: Rules file to read (defaults to the packaged rules)

    Returns:
        List of GroupRule objects, empty if the file could not be loaded
    """
    rules_file = Path(path) if path is not None else DEFAULT_RULES_FILE

    try:
        with open(rules_file, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        rules = [GroupRule(**rule_data) for rule_data in data.get("groups", [])]
        logger.info(f"Loaded {len(rules)} task group rules from {rules_file}")
        return rules

    except (OSError, yaml.YAMLError, ValidationError, TypeError, AttributeError) as e:
        logger.error(f"Failed to load task group rules from {rules_file}: {e}")
        return []


def classify(name: str, rules: list[GroupRule]) -> TaskGroup:
    """
    Assign a task name to a group.

    Matching is a case-sensitive substring test anywhere in the name. Rules
    are tried in order, so "buildtest" lands in build when build comes first.

    Args:
        name: Task name to classify
        rules: Ordered group rules

    Returns:
        Group of the first matching rule, TaskGroup.NONE otherwise
    """
    for rule in rules:
        for keyword in rule.keywords:
            if keyword in name:
                return rule.group
    return TaskGroup.NONE
