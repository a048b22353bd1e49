"""Snakemake task provider: cached discovery invalidated by Snakefile changes."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from ...core.classification import load_group_rules
from ...core.host import Host, Registration
from ...core.models import GroupRule, TaskDescriptor
from ...core.output import OutputChannel
from ...core.process import Invoker, run_command
from ...core.provider import TaskProvider
from ...core.watcher import FileSystemWatcher
from .discovery import DEFINITION_FILE, TASK_TYPE, discover

logger = logging.getLogger(__name__)

CHANNEL_NAME = "Snakemake Auto Detection"
GROUP_RULES_SETTING = "snakemake.groupRulesFile"


class SnakemakeTaskProvider(TaskProvider):
    """
    Provides the rules of the workspace Snakefile as tasks.

    The provider holds a single cache slot containing the asyncio.Task of
    the current discovery pass. The slot is filled before the pass first
    suspends, so every request made while it runs awaits the same pass and
    only one ``snakemake --list`` is ever in flight per slot. ``invalidate``
    empties the slot without cancelling a running pass; callers already
    awaiting it still get its result.
    """

    def __init__(
        self,
        workspace_root: Path,
        channel: OutputChannel,
        invoker: Invoker = run_command,
        rules: Optional[list[GroupRule]] = None,
    ):
        """Initialize provider for workspace_root."""
        self.workspace_root = Path(workspace_root)
        self.channel = channel
        self.invoker = invoker
        self.rules = rules if rules is not None else load_group_rules()
        self._pending: Optional[asyncio.Task] = None

    @property
    def cached(self) -> bool:
        """Whether a discovery pass is pending or resolved in the slot."""
        return self._pending is not None

    def provide_tasks(self) -> asyncio.Task:
        """
        Return the current discovery pass, starting one if the slot is empty.

        Must be called from a running event loop.
        """
        if self._pending is None:
            logger.debug(f"Starting Snakemake discovery in {self.workspace_root}")
            loop = asyncio.get_running_loop()
            self._pending = loop.create_task(
                discover(
                    self.workspace_root,
                    DEFINITION_FILE,
                    channel=self.channel,
                    invoker=self.invoker,
                    rules=self.rules,
                )
            )
        return self._pending

    def resolve_task(self, task: TaskDescriptor) -> Optional[TaskDescriptor]:
        """Individual tasks cannot be resolved; only bulk discovery is supported."""
        return None

    def invalidate(self) -> None:
        """Empty the cache slot so the next request rediscovers."""
        if self._pending is not None:
            logger.info(f"{DEFINITION_FILE} changed, dropping cached tasks")
        self._pending = None

    def get_metadata(self) -> dict:
        """Return provider metadata."""
        return {
            "name": TASK_TYPE,
            "version": "0.1.0",
            "description": "Detects Snakemake rules in the workspace Snakefile",
        }


class SnakemakeExtension:
    """Everything one activation created; dispose releases it."""

    def __init__(
        self,
        provider: SnakemakeTaskProvider,
        watcher: FileSystemWatcher,
        registration: Registration,
    ):
        self.provider = provider
        self.watcher = watcher
        self.registration = registration

    def dispose(self) -> None:
        self.registration.dispose()
        self.watcher.dispose()


def activate(host: Host, invoker: Invoker = run_command) -> Optional[SnakemakeExtension]:
    """
    Register the Snakemake provider with host.

    Args:
        host: Host to register with
        invoker: Command runner handed to the provider

    Returns:
        SnakemakeExtension handle, or None when host has no workspace root
    """
    if host.root_path is None:
        return None

    rules_file = host.configuration.get(GROUP_RULES_SETTING)
    rules = load_group_rules(Path(rules_file) if rules_file else None)

    watcher = host.create_file_system_watcher(host.root_path / DEFINITION_FILE)
    channel = host.create_output_channel(CHANNEL_NAME)
    provider = SnakemakeTaskProvider(host.root_path, channel, invoker=invoker, rules=rules)

    watcher.on_did_change(provider.invalidate)
    watcher.on_did_create(provider.invalidate)
    watcher.on_did_delete(provider.invalidate)

    registration = host.register_task_provider(TASK_TYPE, provider)
    return SnakemakeExtension(provider, watcher, registration)


def deactivate(extension: Optional[SnakemakeExtension]) -> None:
    """Release an activation returned by activate."""
    if extension is not None:
        extension.dispose()
