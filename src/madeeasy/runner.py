"""
Cancellable task boundary around the DSP engines.

The engines are synchronous and can take a while for large N (the direct
transforms are O(N^2)). ``TransformTask`` runs one registered operation in
a separate worker process and hands the result back through a queue, so an
interactive caller can wait with a timeout or cancel. Cancelling terminates
the worker; the engines themselves are not modified.

Usage:
    >>> with TransformTask('dft', x='1, 2, 3, 4') as task:
    ...     records = task.result(timeout=10)
"""

import multiprocessing as mp
import pickle
import queue
import time
from typing import Optional

from .dsp_core.errors import DSPError
from .operations import get_operation, run_operation
from .utils.logging import get_logger

logger = get_logger(__name__)

# How often result() wakes up to check for cancellation / a dead worker
_POLL_INTERVAL = 0.05


class TaskError(DSPError):
    """The worker failed without producing a result."""


class TaskCancelledError(TaskError):
    """The task was cancelled before it produced a result."""


class TaskTimeoutError(TaskError):
    """No result arrived within the requested timeout."""


def _worker(result_queue, op_id: str, kwargs: dict) -> None:
    """Process entry point: run one operation and report the outcome."""
    try:
        payload = ('ok', run_operation(op_id, **kwargs))
    except Exception as exc:
        payload = ('error', exc)

    try:
        pickle.dumps(payload)
    except Exception as exc:
        payload = ('error', TaskError(f"{type(payload[1]).__name__}: {payload[1]} ({exc})"))
    result_queue.put(payload)


class TransformTask:
    """
    One engine call running in a worker process.

    Args:
        op_id: Operation id from :data:`madeeasy.operations.OPERATIONS`
        **kwargs: Arguments for :func:`madeeasy.operations.run_operation`
            (``x``, ``h``, ``N``, ``k``, ``n``, ``inverse``)

    The worker is started lazily by :meth:`start` or :meth:`result`.
    """

    def __init__(self, op_id: str, **kwargs):
        # unknown ids raise here, in the calling process
        self.operation = get_operation(op_id)
        self.kwargs = kwargs

        self._ctx = mp.get_context('spawn')
        self._queue = self._ctx.Queue()
        self._process = None
        self._outcome = None
        self._cancelled = False
        self._started_at: Optional[float] = None

    def start(self) -> 'TransformTask':
        if self._cancelled:
            raise TaskCancelledError(f"{self.operation.name} task was cancelled")
        if self._process is None:
            self._process = self._ctx.Process(
                target=_worker,
                args=(self._queue, self.operation.id, self.kwargs),
                daemon=True,
            )
            self._process.start()
            self._started_at = time.monotonic()
            logger.info(f"Started {self.operation.name} task (pid {self._process.pid})")
        return self

    def done(self) -> bool:
        return self._outcome is not None or self._cancelled

    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> bool:
        """Stop the worker. Returns False if the task already finished."""
        if self._outcome is not None:
            return False
        if not self._cancelled:
            self._cancelled = True
            if self._process is not None and self._process.is_alive():
                self._process.terminate()
                self._process.join()
            self._close_queue()
            logger.info(f"Cancelled {self.operation.name} task")
        return True

    def result(self, timeout: Optional[float] = None):
        """
        Wait for the operation and return its result.

        Raises:
            TaskCancelledError: the task was cancelled
            TaskTimeoutError: ``timeout`` seconds passed without a result;
                the worker keeps running until cancelled
            TaskError: the worker died without reporting
            DSPError: whatever the engine raised, re-raised unchanged
        """
        if self._outcome is None:
            self._wait(timeout)

        status, payload = self._outcome
        if status == 'error':
            raise payload
        return payload

    def _wait(self, timeout: Optional[float]) -> None:
        self.start()
        deadline = None if timeout is None else time.monotonic() + timeout

        while True:
            if self._cancelled:
                raise TaskCancelledError(f"{self.operation.name} task was cancelled")

            wait = _POLL_INTERVAL
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise TaskTimeoutError(
                        f"{self.operation.name} did not finish within {timeout}s"
                    )
                wait = min(wait, remaining)

            try:
                self._outcome = self._queue.get(timeout=wait)
                break
            except queue.Empty:
                if self._cancelled:
                    continue
                if not self._process.is_alive():
                    try:
                        self._outcome = self._queue.get(timeout=_POLL_INTERVAL)
                        break
                    except queue.Empty:
                        raise TaskError(
                            f"{self.operation.name} worker exited with code "
                            f"{self._process.exitcode} and no result"
                        ) from None

        self._process.join()
        self._close_queue()
        elapsed = time.monotonic() - self._started_at
        logger.info(f"{self.operation.name} task finished ({self._outcome[0]}) in {elapsed:.3f}s")

    def _close_queue(self) -> None:
        self._queue.close()
        self._queue.join_thread()

    def __enter__(self) -> 'TransformTask':
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()


def run_with_timeout(op_id: str, timeout: Optional[float] = None, **kwargs):
    """Run an operation in a worker, cancelling it if ``timeout`` expires."""
    task = TransformTask(op_id, **kwargs)
    try:
        return task.result(timeout=timeout)
    finally:
        task.cancel()
