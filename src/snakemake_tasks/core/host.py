"""Host for task-provider extensions: registration, watching and listing."""

import asyncio
import importlib
import logging
import time
from pathlib import Path
from typing import Any, Optional

from rich.console import Console

from .models import TaskListing
from .output import OutputChannel
from .provider import TaskProvider
from .watcher import FileSystemWatcher

logger = logging.getLogger(__name__)


class Registration:
    """Handle returned by register_task_provider; dispose to unregister."""

    def __init__(self, host: "Host", task_type: str, provider: TaskProvider):
        self.host = host
        self.task_type = task_type
        self.provider = provider
        self.disposed = False

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        if self.host.providers.get(self.task_type) is self.provider:
            del self.host.providers[self.task_type]
            logger.info(f"Unregistered task provider: {self.task_type}")


class Host:
    """
    Owns the workspace and everything extensions register against it.

    Extensions are activated from EXTENSION_REGISTRY. Each extension module
    must expose ``activate(host)`` returning a disposable handle (or None
    when it has nothing to contribute to this workspace).
    """

    # Extension registry (hardcoded)
    EXTENSION_REGISTRY = {
        "snakemake": "snakemake_tasks.providers.snakemake",
    }

    def __init__(
        self,
        root_path: Optional[Path],
        configuration: Optional[dict[str, Any]] = None,
        console: Console | None = None,
    ):
        """Initialize host for a workspace root (None for no open folder)."""
        self.root_path = Path(root_path) if root_path is not None else None
        self.configuration = dict(configuration or {})
        self.console = console
        self.providers: dict[str, TaskProvider] = {}
        self.watchers: list[FileSystemWatcher] = []
        self.output_channels: dict[str, OutputChannel] = {}
        self.extensions: dict[str, Any] = {}
        self.loop: Optional[asyncio.AbstractEventLoop] = None
        self._changed = asyncio.Event()

    def attach_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Deliver file events of all current and future watchers on loop."""
        self.loop = loop
        for watcher in self.watchers:
            watcher.loop = loop

    def create_file_system_watcher(self, path: Path) -> FileSystemWatcher:
        """Create a watcher whose events also wake wait_for_change."""
        watcher = FileSystemWatcher(path, loop=self.loop)
        if self.loop is None and watcher.loop is not None:
            self.attach_loop(watcher.loop)

        watcher.on_did_change(self._changed.set)
        watcher.on_did_create(self._changed.set)
        watcher.on_did_delete(self._changed.set)
        self.watchers.append(watcher)
        return watcher

    def create_output_channel(self, name: str) -> OutputChannel:
        """Create a named output channel on the host console."""
        channel = OutputChannel(name, console=self.console)
        self.output_channels[name] = channel
        return channel

    def register_task_provider(self, task_type: str, provider: TaskProvider) -> Registration:
        """
        Register provider for task_type, replacing any previous one.

        Returns:
            Registration whose dispose() removes the provider again
        """
        if task_type in self.providers:
            logger.warning(f"Replacing task provider for '{task_type}'")
        self.providers[task_type] = provider
        logger.info(f"Registered task provider: {task_type}")
        return Registration(self, task_type, provider)

    def activate_extensions(self, names: list[str] | None = None) -> None:
        """
        Activate registered extensions.

        A failing extension is logged and skipped so the others still load.

        Args:
            names: Optional list of extension names to activate (None = all)
        """
        for name, module_path in self.EXTENSION_REGISTRY.items():
            if names is not None and name not in names:
                continue
            try:
                module = importlib.import_module(module_path)
                handle = getattr(module, "activate")(self)
                if handle is None:
                    logger.info(f"Extension {name} has nothing to activate")
                    continue
                self.extensions[name] = handle
                logger.info(f"Activated extension: {name}")
            except Exception as e:
                logger.error(f"Failed to activate extension {name}: {e}")

        if names:
            for name in names:
                if name not in self.EXTENSION_REGISTRY:
                    logger.warning(f"Extension '{name}' not found, skipping")

    async def fetch_tasks(self, type_filter: list[str] | None = None) -> TaskListing:
        """
        Ask every (or every filtered) provider for its tasks.

        Args:
            type_filter: Optional list of task types to ask (None = all)

        Returns:
            Aggregated TaskListing
        """
        start_time = time.time()
        all_tasks = []
        providers_run = []

        if type_filter:
            providers_to_run = {
                task_type: provider
                for task_type, provider in self.providers.items()
                if task_type in type_filter
            }
            for task_type in type_filter:
                if task_type not in self.providers:
                    logger.warning(f"No provider for task type '{task_type}', skipping")
        else:
            providers_to_run = dict(self.providers)

        for task_type, provider in providers_to_run.items():
            try:
                logger.info(f"Requesting tasks from provider: {task_type}")
                tasks = await provider.provide_tasks()
                all_tasks.extend(tasks)
                providers_run.append(task_type)
                logger.info(f"Provider {task_type} returned {len(tasks)} task(s)")
            except Exception as e:
                logger.error(f"Provider {task_type} failed: {e}")

        listing = TaskListing(
            workspace_root=self.root_path,
            tasks=all_tasks,
            providers_run=providers_run,
            duration_seconds=round(time.time() - start_time, 2),
        )
        listing.summary = listing.calculate_summary()
        return listing

    async def wait_for_change(self, settle: float = 0.0) -> None:
        """
        Wait until any watcher reports an event.

        Editors often write a file in several steps, so after the first
        event the host waits ``settle`` seconds and folds every event seen
        meanwhile into this one.

        Args:
            settle: Seconds to wait after the first event
        """
        if self.loop is None:
            self.attach_loop(asyncio.get_running_loop())

        await self._changed.wait()
        if settle > 0:
            await asyncio.sleep(settle)
        self._changed.clear()

    def list_providers(self) -> list[dict]:
        """
        Get metadata for all registered providers.

        Returns:
            List of provider metadata dictionaries
        """
        return [provider.get_metadata() for provider in self.providers.values()]

    def dispose(self) -> None:
        """Deactivate all extensions and stop all watchers."""
        for name, handle in list(self.extensions.items()):
            try:
                handle.dispose()
            except Exception as e:
                logger.error(f"Failed to deactivate extension {name}: {e}")
        self.extensions.clear()

        for watcher in self.watchers:
            watcher.dispose()
        self.watchers.clear()
