"""Discovery of Snakemake rules through ``snakemake --list``."""

import asyncio
import logging
import os
import re
from pathlib import Path
from typing import Optional

from ...core.classification import classify, load_group_rules
from ...core.models import ExecError, GroupRule, TaskDefinition, TaskDescriptor
from ...core.output import OutputChannel
from ...core.process import Invoker, run_command

logger = logging.getLogger(__name__)

TOOL = "snakemake"
TASK_TYPE = "snakemake"
DEFINITION_FILE = "Snakefile"
LIST_COMMAND = f"{TOOL} --list"
FAILURE_MESSAGE = "Auto detecting Snakemake tasks failed."

# Bare or carriage-return-prefixed line endings
_LINE_BREAK = re.compile(r"\r?\n")


def build_task(name: str, rules: list[GroupRule]) -> TaskDescriptor:
    """Build the descriptor for one listed rule name."""
    return TaskDescriptor(
        name=name,
        classification=classify(name, rules),
        definition=TaskDefinition(type=TASK_TYPE, task=name),
        source=TASK_TYPE,
        command=f"{TOOL} {name}",
    )


def parse_task_lines(stdout: str, rules: list[GroupRule]) -> list[TaskDescriptor]:
    """
    Turn ``snakemake --list`` output into task descriptors.

    Every non-empty line is a task name taken verbatim; surrounding
    whitespace is kept. Output order is preserved and duplicates pass
    through.

    Args:
        stdout: Tool output
        rules: Ordered group rules used for classification

    Returns:
        List of TaskDescriptor objects
    """
    tasks = []
    if not stdout:
        return tasks

    for line in _LINE_BREAK.split(stdout):
        if len(line) == 0:
            continue
        tasks.append(build_task(line, rules))

    return tasks


async def discover(
    working_directory: Path,
    definition_file_name: str = DEFINITION_FILE,
    *,
    channel: OutputChannel,
    invoker: Invoker = run_command,
    rules: Optional[list[GroupRule]] = None,
) -> list[TaskDescriptor]:
    """
    Run one discovery pass in working_directory.

    Tool failures never propagate: they are written to the channel, which is
    revealed, and the pass yields no tasks. Errors from the existence check
    itself are not caught.

    Args:
        working_directory: Workspace root to list
        definition_file_name: File whose existence gates the tool invocation
        channel: Sink for tool diagnostics
        invoker: Command runner (run_command unless replaced)
        rules: Group rules (packaged rules if None)

    Returns:
        Discovered tasks in the order the tool printed them
    """
    definition_file = os.path.join(working_directory, definition_file_name)
    if not await asyncio.to_thread(os.path.exists, definition_file):
        logger.debug(f"No {definition_file_name} in {working_directory}")
        return []

    if rules is None:
        rules = load_group_rules()

    outcome = await invoker(LIST_COMMAND, Path(working_directory))

    if isinstance(outcome, ExecError):
        logger.warning(f"'{LIST_COMMAND}' failed in {working_directory}: {outcome.cause}")
        if outcome.stderr:
            channel.append_line(outcome.stderr)
        if outcome.stdout:
            channel.append_line(outcome.stdout)
        channel.append_line(FAILURE_MESSAGE)
        channel.show(True)
        return []

    if outcome.stderr:
        channel.append_line(outcome.stderr)
        channel.show(True)

    tasks = parse_task_lines(outcome.stdout, rules)
    logger.info(f"Discovered {len(tasks)} Snakemake task(s) in {working_directory}")
    return tasks
