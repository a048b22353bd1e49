"""File watcher for a single path, built on watchdog."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler, FileSystemMovedEvent
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

Listener = Callable[[], None]

CHANGE = "change"
CREATE = "create"
DELETE = "delete"


def _normalize(path) -> str:
    return os.path.normcase(os.path.abspath(os.fsdecode(path)))


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class _PathEventHandler(FileSystemEventHandler):
    """Translates directory events into events about one file."""

    def __init__(self, watcher: "FileSystemWatcher"):
        super().__init__()
        self.watcher = watcher

    def _matches(self, event: FileSystemEvent, path) -> bool:
        return not event.is_directory and _normalize(path) == self.watcher.target

    def on_modified(self, event: FileSystemEvent) -> None:
        if self._matches(event, event.src_path):
            self.watcher.dispatch(CHANGE)

    def on_created(self, event: FileSystemEvent) -> None:
        if self._matches(event, event.src_path):
            self.watcher.dispatch(CREATE)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if self._matches(event, event.src_path):
            self.watcher.dispatch(DELETE)

    def on_moved(self, event: FileSystemMovedEvent) -> None:
        # Renaming over the file (atomic save) counts as a create
        if self._matches(event, event.src_path):
            self.watcher.dispatch(DELETE)
        if self._matches(event, event.dest_path):
            self.watcher.dispatch(CREATE)


class FileSystemWatcher:
    """
    Watches one file and notifies listeners when it is changed, created or
    deleted.

    A watchdog observer watches the file's parent directory (not recursive)
    and events for other entries are ignored. Events arrive on the observer
    thread; when the watcher is bound to an event loop they are handed to it
    with ``call_soon_threadsafe`` so listeners always run on the loop.
    Without a loop, listeners run on the observer thread.
    """

    def __init__(self, path: Path, loop: Optional[asyncio.AbstractEventLoop] = None):
        """Start watching path, binding to loop (or the running loop, if any)."""
        self.path = Path(path)
        self.target = _normalize(self.path)
        self.loop = loop or _running_loop()
        self.disposed = False
        self.active = False
        self._listeners: dict[str, list[Listener]] = {CHANGE: [], CREATE: [], DELETE: []}

        self.handler = _PathEventHandler(self)
        self._observer = Observer()
        try:
            self._observer.schedule(self.handler, str(self.path.parent), recursive=False)
            self._observer.start()
            self.active = True
        except OSError as e:
            logger.warning(f"Cannot watch {self.path}: {e}")

    def on_did_change(self, listener: Listener) -> None:
        self._listeners[CHANGE].append(listener)

    def on_did_create(self, listener: Listener) -> None:
        self._listeners[CREATE].append(listener)

    def on_did_delete(self, listener: Listener) -> None:
        self._listeners[DELETE].append(listener)

    def dispatch(self, kind: str) -> None:
        """Deliver an event of kind to listeners on the bound loop."""
        if self.disposed:
            return

        logger.info(f"{self.path} {kind}d")
        loop = self.loop
        if loop is None:
            self._fire(kind)
            return

        try:
            loop.call_soon_threadsafe(self._fire, kind)
        except RuntimeError:
            logger.debug(f"Event loop closed, dropping {kind} event for {self.path}")

    def _fire(self, kind: str) -> None:
        if self.disposed:
            return
        for listener in list(self._listeners[kind]):
            listener()

    def dispose(self) -> None:
        """Stop the observer and drop all listeners."""
        if self.disposed:
            return
        self.disposed = True
        for listeners in self._listeners.values():
            listeners.clear()

        if self.active:
            self._observer.stop()
            self._observer.join()
            self.active = False
