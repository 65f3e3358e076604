# -*- coding:utf-8 -*-

#  ************************** Copyrights and license ***************************
#
# This file is part of covreport 1.0+main, a coverage data model and merge core.
#
# _____________________________________________________________________________
#
# Copyright (c) 2024-2026 the covreport authors
#
# This software is distributed under the 3-clause BSD License.
# For more information, see the README.rst file.
#
# ****************************************************************************

"""A small thread pool for the jobs which may run in parallel."""

import logging
from sys import exc_info
from threading import Thread, RLock
from traceback import format_exception
from queue import Queue, Empty
from typing import Any, Callable, Optional

from .exceptions import SanityCheckError

LOGGER = logging.getLogger("covreport")

QueueContent = Optional[tuple[Callable[..., None], tuple[Any, ...], dict[str, Any]]]


def worker(
    queue: "Queue[QueueContent]", context: dict[str, Any], pool: "Workers"
) -> None:
    """
    Run work items from the queue until the sentinel
    None value is hit
    """
    while True:
        entry: QueueContent = queue.get(True)
        if entry is None:
            break
        work, args, kwargs = entry
        kwargs.update(context)
        try:
            work(*args, **kwargs)
        except Exception:  # pylint: disable=broad-exception-caught
            pool.stop_with_exception()
            break


class Workers:
    """
    Create a thread-pool which can be given work via an
    add method and will run until work is complete.

    Every thread gets its own context, the items of the context
    are passed as keyword arguments to each work item run by the thread.
    This is the place to collect results without locking.
    """

    def __init__(self, number: int, context: Callable[[], dict[str, Any]]) -> None:
        if number < 1:
            raise SanityCheckError("At least one executer is needed.")
        self.q: "Queue[QueueContent]" = Queue()
        self.lock = RLock()
        self.exceptions = list[str]()
        self.contexts = [context() for _ in range(0, number)]
        self.workers = [
            Thread(
                target=worker,
                args=(self.q, c, self),
                name=f"covreport-worker-{index}",
                daemon=True,
            )
            for index, c in enumerate(self.contexts, 1)
        ]
        for w in self.workers:
            w.start()

    def add(self, work: Callable[..., None], *args: Any, **kwargs: Any) -> None:
        """
        Add in a method and the arguments to be used
        when running it
        """
        with self.lock:
            # Do not push additional items if there is already an exception
            if self.exceptions:  # pragma: no cover
                return
            self.q.put((work, args, kwargs))

    def add_sentinels(self) -> None:
        """
        Add the sentinels to the end of the queue so
        the threads know to stop
        """
        with self.lock:
            for _ in self.workers:
                self.q.put(None)

    def drain(self) -> None:
        """
        Drain the queue
        """
        with self.lock:
            while True:
                try:
                    self.q.get(False)
                except Empty:
                    break
            self.add_sentinels()

    def stop_with_exception(self) -> None:
        """
        A thread has failed and needs to raise an exception.
        """
        with self.lock:
            self.drain()
            self.exceptions.append("".join(format_exception(*exc_info())))

    def size(self) -> int:
        """
        Run the size of the thread pool
        """
        return len(self.workers)

    def wait(self) -> list[dict[str, Any]]:
        """
        Wait until all work is complete and return the contexts
        """
        self.add_sentinels()
        for w in self.workers:
            # Allow interrupts in Thread.join
            while w.is_alive():
                w.join(timeout=1)
        self.workers = []

        for traceback in self.exceptions:
            LOGGER.error(traceback)

        if self.exceptions:
            raise RuntimeError(
                "Worker thread raised exception, workers canceled."
            ) from None
        return self.contexts

    def __enter__(self) -> "Workers":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.size() == 0:
            return
        # Stop the threads, queued work is dropped
        self.drain()
        self.workers = []
        if exc_type is None:
            raise SanityCheckError(
                "You must call wait on the contextmanager to get the context of the workers."
            )
