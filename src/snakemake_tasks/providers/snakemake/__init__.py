"""Snakemake task provider extension."""

from .discovery import discover, parse_task_lines
from .provider import SnakemakeExtension, SnakemakeTaskProvider, activate, deactivate

__all__ = [
    "SnakemakeExtension",
    "SnakemakeTaskProvider",
    "activate",
    "deactivate",
    "discover",
    "parse_task_lines",
]
