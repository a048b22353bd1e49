"""Shared pytest fixtures for Snakemake Task Detector tests."""

import asyncio
import io
from pathlib import Path

import pytest
from rich.console import Console

from snakemake_tasks.core.models import ExecResult
from snakemake_tasks.core.output import OutputChannel


class FakeInvoker:
    """
    Stand-in for run_command that records calls.

    Outcomes are handed out in call order (the last one repeats). When a gate
    is set the call blocks on it after recording, which keeps a discovery
    pass in flight until the test releases it.
    """

    def __init__(self, *outcomes, gate: asyncio.Event | None = None):
        self.outcomes = list(outcomes) or [ExecResult(stdout="", stderr="")]
        self.gate = gate
        self.calls = []
        self.entered = None

    async def __call__(self, command: str, cwd: Path):
        index = min(len(self.calls), len(self.outcomes) - 1)
        outcome = self.outcomes[index]
        self.calls.append((command, cwd))
        if self.entered is not None:
            self.entered.set()
        if self.gate is not None:
            await self.gate.wait()
        return outcome


@pytest.fixture
def quiet_console():
    """Rich console writing to an in-memory buffer."""
    return Console(file=io.StringIO(), width=200)


@pytest.fixture
def channel(quiet_console):
    """Output channel that renders into quiet_console."""
    return OutputChannel("Snakemake Auto Detection", console=quiet_console)


@pytest.fixture
def snakemake_workspace(tmp_path):
    """Workspace with a minimal Snakefile."""
    (tmp_path / "Snakefile").write_text(
        'rule build_all:\n    output: "out.txt"\n    shell: "touch {output}"\n'
    )
    return tmp_path


@pytest.fixture
def empty_workspace(tmp_path):
    """Workspace without a Snakefile."""
    return tmp_path


@pytest.fixture
def group_rules_file(tmp_path):
    """Custom rules file that only knows about 'lint'."""
    rules = tmp_path / "groups.yaml"
    rules.write_text(
        "groups:\n"
        "  - group: test\n"
        "    keywords: [lint]\n"
    )
    return rules


@pytest.fixture
def make_invoker():
    """Factory for FakeInvoker instances."""
    return FakeInvoker
