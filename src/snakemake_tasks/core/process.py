"""Child-process invocation of external command-line tools."""

import asyncio
import logging
import subprocess
from pathlib import Path
from typing import Awaitable, Callable, Union

from .models import ExecError, ExecResult

logger = logging.getLogger(__name__)

CommandOutcome = Union[ExecResult, ExecError]

# Signature shared by run_command and any replacement injected into discovery
Invoker = Callable[[str, Path], Awaitable[CommandOutcome]]


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


async def run_command(command: str, cwd: Path) -> CommandOutcome:
    """
    Run a shell command in cwd and capture both output streams.

    Exactly one child process is spawned. There is no retry and no timeout:
    a tool that never exits keeps the caller waiting.

    Args:
        command: Complete shell command line
        cwd: Working directory (not validated here)

    Returns:
        ExecResult on exit status 0, otherwise ExecError carrying the
        captured streams and the underlying cause
    """
    logger.debug(f"Running '{command}' in {cwd}")

    try:
        process = await asyncio.create_subprocess_shell(
            command,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        logger.info(f"Could not start '{command}': {e}")
        return ExecError(stdout="", stderr="", cause=e)

    raw_stdout, raw_stderr = await process.communicate()
    stdout = _decode(raw_stdout)
    stderr = _decode(raw_stderr)

    if process.returncode != 0:
        logger.info(f"'{command}' exited with status {process.returncode}")
        return ExecError(
            stdout=stdout,
            stderr=stderr,
            cause=subprocess.CalledProcessError(
                process.returncode, command, output=stdout, stderr=stderr
            ),
        )

    return ExecResult(stdout=stdout, stderr=stderr)
