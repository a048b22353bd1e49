"""Core data models for Snakemake task detection."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class TaskGroup(str, Enum):
    """Semantic groups a discovered task can be filed under."""

    BUILD = "build"  # build, compile, watch
    TEST = "test"
    NONE = "none"  # no heuristic matched


@dataclass
class ExecResult:
    """
    Captured output of a command that exited successfully.

    A non-empty stderr does not make a run a failure.

    Attributes:
        stdout: Decoded standard output
        stderr: Decoded standard error
    """

    stdout: str
    stderr: str


@dataclass
class ExecError:
    """
    Captured output of a command that failed to start or exited nonzero.

    Attributes:
        stdout: Whatever standard output was captured (may be empty)
        stderr: Whatever standard error was captured (may be empty)
        cause: Underlying failure (CalledProcessError or the spawn OSError)
    """

    stdout: str
    stderr: str
    cause: Exception


class TaskDefinition(BaseModel):
    """Identifies a task to the host, independent of how it is displayed."""

    type: str = Field("snakemake", description="Task type the provider registers under")
    task: str = Field(..., description="The task name")
    file: Optional[str] = Field(None, description="Definition file containing the task")


class TaskDescriptor(BaseModel):
    """
    A task discovered from the workflow tool's listing.

    Descriptors are created fresh on every discovery pass and never mutated.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Task name exactly as the tool printed it")
    classification: TaskGroup = Field(
        TaskGroup.NONE, description="Group assigned by the name heuristic"
    )
    definition: TaskDefinition = Field(..., description="Host task definition")
    source: str = Field("snakemake", description="Provider that discovered the task")
    command: str = Field(..., description="Shell command the host runs for this task")


class GroupRule(BaseModel):
    """
    Classification rule loaded from YAML.

    A task name belongs to ``group`` when any keyword occurs in it.
    """

    group: TaskGroup = Field(..., description="Group assigned on match")
    keywords: list[str] = Field(..., description="Case-sensitive substrings")

    @field_validator("keywords")
    @classmethod
    def validate_keywords(cls, v):
        """Reject empty keyword lists and empty keywords."""
        if not v:
            raise ValueError("Group rule must define at least one keyword")
        if any(not keyword for keyword in v):
            raise ValueError("Group rule keywords must be non-empty strings")
        return v


class TaskListing(BaseModel):
    """
    Aggregated tasks from every provider asked during one request.
    """

    workspace_root: Optional[Path] = Field(None, description="Workspace that was listed")
    tasks: list[TaskDescriptor] = Field(
        default_factory=list, description="Tasks from all providers, in provider order"
    )
    providers_run: list[str] = Field(
        default_factory=list, description="Task types whose providers answered"
    )
    duration_seconds: float = Field(0.0, description="Total time spent waiting")
    summary: dict[str, int] = Field(
        default_factory=dict, description="Counts per group and total"
    )

    @field_serializer("workspace_root")
    def serialize_path(self, path: Optional[Path]) -> Optional[str]:
        """Serialize Path to string for JSON output."""
        return str(path) if path is not None else None

    @field_validator("workspace_root", mode="before")
    @classmethod
    def validate_path(cls, v):
        """Convert string to Path if needed."""
        if isinstance(v, str):
            return Path(v)
        return v

    def calculate_summary(self) -> dict[str, int]:
        """
        Count tasks per group.

        Returns:
            Dictionary with one count per TaskGroup value plus total
        """
        summary = {group.value: 0 for group in TaskGroup}
        summary["total"] = len(self.tasks)

        for task in self.tasks:
            summary[task.classification.value] += 1

        return summary
