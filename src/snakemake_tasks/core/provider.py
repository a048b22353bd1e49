"""Base interface for task providers."""

from abc import ABC, abstractmethod
from typing import Awaitable, Optional

from .models import TaskDescriptor


class TaskProvider(ABC):
    """
    Abstract base class for all task providers.

    A provider answers the host's request for the tasks available in the
    workspace. The host registers providers by task type and awaits
    ``provide_tasks`` whenever it needs a task list.
    """

    @abstractmethod
    def provide_tasks(self) -> Awaitable[list[TaskDescriptor]]:
        """
        Return an awaitable producing the currently available tasks.

        Providers that cache should hand back the same awaitable to every
        caller until the cache is invalidated, so concurrent requests share
        one discovery.

        Returns:
            Awaitable resolving to a list of TaskDescriptor objects (may be
            empty if no tasks were found)

        Example:
            ```python
            def provide_tasks(self) -> Awaitable[list[TaskDescriptor]]:
                if self._pending is None:
                    self._pending = asyncio.get_running_loop().create_task(self._discover())
                return self._pending
            ```
        """
        ...

    @abstractmethod
    def resolve_task(self, task: TaskDescriptor) -> Optional[TaskDescriptor]:
        """
        Fill in a task the host knows only partially.

        Args:
            task: Partial task, e.g. restored from the host's task history

        Returns:
            Completed TaskDescriptor, or None if the provider cannot resolve
            individual tasks
        """
        ...

    @abstractmethod
    def get_metadata(self) -> dict:
        """
        Return provider metadata.

        Returns:
            Dictionary with keys:
            - name (str): Provider name (e.g., "snakemake")
            - version (str): Provider version (e.g., "0.1.0")
            - description (str): What the provider discovers
        """
        ...
