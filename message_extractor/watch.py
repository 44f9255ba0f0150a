"""
Debounced file change notifications.

`Debouncer` is the clock-driven core; `debounce()` drives it from any
async iterable and `watch_paths()` turns a watchdog observer into one.
"""
import asyncio
import logging
import os
import time
from dataclasses import dataclass

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer


log = logging.getLogger(__name__)

DEFAULT_DELAY = 0.3


@dataclass
class Pending:
    deadline: float
    event: object


class Debouncer:
    """
    Per-key debounce state: a key without an entry is idle, a pushed key is
    pending until `delay` passes without another push, then it fires once.
    """

    def __init__(self, delay=DEFAULT_DELAY, clock=time.monotonic):
        self.delay = delay
        self.clock = clock
        self.pending = dict()

    def push(self, key, event):
        self.pending[key] = Pending(self.clock() + self.delay, event)

    def next_deadline(self):
        if not self.pending:
            return None
        return min(p.deadline for p in self.pending.values())

    def pop_due(self):
        """Events whose quiet period is over, earliest deadline first."""
        now = self.clock()
        due = sorted(((p.deadline, key) for key, p in self.pending.items()
                      if p.deadline <= now), key=lambda d: d[0])
        return [self.pending.pop(key).event for _, key in due]

    def clear(self):
        self.pending.clear()


async def debounce(source, key=lambda event: event, delay=DEFAULT_DELAY,
                   clock=time.monotonic):
    """
    Yield events from `source` once no newer event with the same key has
    arrived for `delay` seconds.
    """
    debouncer = Debouncer(delay, clock)
    wakeup = asyncio.Event()
    finished = False

    async def pump():
        nonlocal finished
        try:
            async for event in source:
                debouncer.push(key(event), event)
                wakeup.set()
        finally:
            finished = True
            wakeup.set()

    task = asyncio.ensure_future(pump())
    try:
        while True:
            for event in debouncer.pop_due():
                yield event
            deadline = debouncer.next_deadline()
            if deadline is None and finished:
                break
            wakeup.clear()
            timeout = None if deadline is None \
                else max(0, deadline - clock())
            try:
                await asyncio.wait_for(wakeup.wait(), timeout)
            except asyncio.TimeoutError:
                pass
        if task.done() and not task.cancelled() and task.exception():
            raise task.exception()
    finally:
        task.cancel()
        debouncer.clear()


class QueueHandler(FileSystemEventHandler):
    """Forward changed file paths from the observer thread to a loop."""

    def __init__(self, loop, queue):
        self.loop = loop
        self.queue = queue

    def on_any_event(self, event):
        if event.is_directory:
            return
        paths = [event.src_path]
        if getattr(event, "dest_path", None):
            paths.append(event.dest_path)
        for path in paths:
            self.loop.call_soon_threadsafe(self.queue.put_nowait,
                                           os.fsdecode(path))


async def watch_paths(path):
    """Changed file paths under `path`, recursively."""
    loop = asyncio.get_running_loop()
    queue = asyncio.Queue()
    observer = Observer()
    observer.schedule(QueueHandler(loop, queue), os.fspath(path),
                      recursive=True)
    observer.start()
    log.debug(f"Watching {path}")
    try:
        while True:
            yield await queue.get()
    finally:
        observer.stop()
        observer.join()
