"""
Zowekit File Watcher

A watch handle on a single file. A daemon thread polls the file's stat
signature and notifies listeners with ``"change"`` whenever it moves.
"""

import os
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from zowekit.logging import get_logger

logger = get_logger(__name__)

FileListener = Callable[[str, Path], None]

_Signature = Optional[Tuple[int, int, int]]


def _signature(path: Path) -> _Signature:
    try:
        st = os.stat(path)
    except FileNotFoundError:
        return None
    return (st.st_mtime_ns, st.st_size, st.st_ino)


class FileWatcher:
    """
    Watch handle for one file.

    Example:
        watcher = FileWatcher(path, interval=0.25)
        watcher.on("change", lambda kind, p: print(kind, p))
        watcher.start()
        ...
        watcher.close()
    """

    def __init__(self, path: Path, *, interval: float = 0.25) -> None:
        self.path = Path(path)
        self.interval = interval
        self._listeners: Dict[str, List[FileListener]] = {}
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._last = _signature(self.path)

    @property
    def closed(self) -> bool:
        return self._stop.is_set()

    def on(self, event: str, listener: FileListener) -> "FileWatcher":
        with self._lock:
            self._listeners.setdefault(event, []).append(listener)
        return self

    def remove_all_listeners(self, event: Optional[str] = None) -> "FileWatcher":
        with self._lock:
            if event is None:
                self._listeners.clear()
            else:
                self._listeners.pop(event, None)
        return self

    def listener_count(self, event: str) -> int:
        with self._lock:
            return len(self._listeners.get(event, []))

    def start(self) -> "FileWatcher":
        if self._thread is None and not self.closed:
            self._thread = threading.Thread(
                target=self._run,
                name=f"zowekit-watch-{self.path.name}",
                daemon=True,
            )
            self._thread.start()
        return self

    def close(self) -> None:
        """Stop polling and drop every listener."""
        self._stop.set()
        self.remove_all_listeners()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=max(self.interval * 4, 1.0))
        self._thread = None

    def poll(self) -> bool:
        """Check the file once; returns True if listeners were notified."""
        current = _signature(self.path)
        if current == self._last:
            return False
        self._last = current
        kind = "rename" if current is None else "change"
        self._emit(kind)
        return True

    def _emit(self, kind: str) -> None:
        with self._lock:
            listeners = list(self._listeners.get(kind, []))
        for listener in listeners:
            try:
                listener(kind, self.path)
            except Exception as e:
                logger.error(
                    f"Error in file listener: {e}",
                    extra={"path": str(self.path), "error": str(e)},
                )

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.poll()
