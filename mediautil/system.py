"""Filesystem, signal and process helpers."""

from __future__ import annotations

import inspect
import logging
import os
import signal
import sys
import threading
import time
from pathlib import Path
from typing import IO, Callable

FATAL_LOG_ENV = "MEDIAUTIL_FATAL_LOG"
_TERM_SIGNALS = (signal.SIGINT, signal.SIGTERM)

log = logging.getLogger(__name__)


def exists(filename: str | os.PathLike[str]) -> bool:
    """Whether a file or directory exists at ``filename``."""
    return os.path.exists(filename)


def bit1(value: int, index: int) -> bool:
    """Whether bit ``index`` of a byte is set, counting 0 as the most significant."""
    if not 0 <= index <= 7:
        raise ValueError(f"bit index must be between 0 and 7: {index}")
    return value & (1 << (7 - index)) != 0


def is_subdir(base_dir: str | os.PathLike[str], joined_dir: str | os.PathLike[str]) -> bool:
    """Whether ``joined_dir`` lies at or below ``base_dir``."""
    base, joined = os.fspath(base_dir), os.fspath(joined_dir)
    if os.path.isabs(base) != os.path.isabs(joined):
        return False
    try:
        rel = os.path.relpath(joined, base)
    except ValueError:
        return False
    return not rel.startswith("..") and not rel.startswith("/")


def current_dir(*args: str) -> str:
    """Directory of the calling source file, joined with ``args`` if given."""
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    try:
        filename = caller.f_code.co_filename if caller is not None else sys.argv[0]
    finally:
        del frame, caller
    directory = os.path.dirname(os.path.abspath(filename))
    return os.path.join(directory, *args) if args else directory


def wait_term(cancel: Callable[[], object]) -> int:
    """Block until SIGINT or SIGTERM arrives, then call ``cancel``.

    Must run in the main thread. Returns the signal number received; the
    previous handlers are restored before ``cancel`` runs.
    """
    received = threading.Event()
    caught: list[int] = []

    def handler(signum: int, _frame: object) -> None:
        caught.append(signum)
        received.set()

    previous = {sig: signal.signal(sig, handler) for sig in _TERM_SIGNALS}
    try:
        while not received.wait(0.1):
            pass
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old)
    cancel()
    return caught[0]


def init_fatal_log() -> IO[str] | None:
    """Open ``latest.log`` in the fatal-log directory for appending.

    A non-empty previous ``latest.log`` is first renamed after its
    modification time. Returns None if the file cannot be opened.
    """
    log_dir = Path(os.environ.get(FATAL_LOG_ENV) or "./fatal")
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass
    latest = log_dir / "latest.log"
    try:
        info = latest.stat()
    except OSError:
        info = None
    if info is not None and info.st_size != 0:
        stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(info.st_mtime))
        try:
            latest.rename(log_dir / f"{stamp}.log")
        except OSError:
            pass
    try:
        return open(latest, "a+", encoding="utf-8")
    except OSError as exc:
        log.error("cannot open fatal log file %s: %s", latest, exc)
        return None


def create_shutdown_script() -> Path:
    """Write a script in the working directory that kills this process."""
    pid = os.getpid()
    if os.name == "nt":
        path = Path("shutdown.bat")
        content = f"taskkill /pid {pid}  -t  -f"
    else:
        path = Path("shutdown.sh")
        content = f"kill -9 {pid}"
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o777)
    with os.fdopen(fd, "w", encoding="utf-8") as script:
        script.write(content)
    return path