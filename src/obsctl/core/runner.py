import logging
import sys
import threading
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any

from rich.console import Console

from obsctl.core.config import DEFAULT_MAX_WORKERS
from obsctl.core.errors import ObsCtlError
from obsctl.core.models import BatchReport, TaskKind, TaskOutcome, TransferTask

logger = logging.getLogger(__name__)

console_err = Console(stderr=True)

ProgressCallback = Callable[[int, int], None]


def setup_logging(verbose: bool):
    log_level = logging.DEBUG if verbose else logging.ERROR
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def build_upload_tasks(bucket: str, paths: Iterable[str]) -> list[TransferTask]:
    return [TransferTask.upload(bucket, path) for path in paths]


def build_delete_object_tasks(bucket: str, keys: Iterable[str]) -> list[TransferTask]:
    return [TransferTask.delete_object(bucket, key) for key in keys]


def build_delete_bucket_tasks(buckets: Iterable[str]) -> list[TransferTask]:
    return [TransferTask.delete_bucket(bucket) for bucket in buckets]


def execute_task(client: Any, task: TransferTask) -> None:
    if task.kind == TaskKind.UPLOAD:
        client.upload_object(task.bucket, task.local_path, task.remote_key)
    elif task.kind == TaskKind.DELETE_OBJECT:
        client.delete_object(task.bucket, task.remote_key)
    elif task.kind == TaskKind.DELETE_BUCKET:
        client.delete_bucket(task.bucket)
    else:
        raise ValueError(f"Unsupported task kind: {task.kind}")


class BatchTransferEngine:
    """
    Runs independent transfer tasks on a fixed-size worker pool.

    Every task yields exactly one TaskOutcome; a failing task never stops its
    siblings. The report lists outcomes in input order, whatever order the
    workers finished in.

    On KeyboardInterrupt queued tasks are dropped and reported as cancelled
    while tasks already running are left to finish.
    """

    def __init__(
        self,
        client: Any,
        max_workers: int = DEFAULT_MAX_WORKERS,
        on_progress: ProgressCallback | None = None,
    ):
        if max_workers < 1:
            raise ValueError(f"Worker pool size must be at least 1, got {max_workers}")
        self.client = client
        self.max_workers = max_workers
        self.on_progress = on_progress

        self._lock = threading.Lock()
        self._cancelled = threading.Event()
        self._outcomes: list[TaskOutcome | None] = []
        self._completed = 0

    def _record(self, index: int, outcome: TaskOutcome) -> None:
        # Reported under the lock so the count never goes backwards.
        with self._lock:
            self._outcomes[index] = outcome
            self._completed += 1
            if self.on_progress:
                self.on_progress(self._completed, len(self._outcomes))

    def _run_task(self, index: int, task: TransferTask) -> None:
        if self._cancelled.is_set():
            self._record(index, TaskOutcome.cancelled(task))
            return

        try:
            execute_task(self.client, task)
            outcome = TaskOutcome.success(task)
        except ObsCtlError as e:
            logger.info("Task %s failed: %s", task.target, e)
            outcome = TaskOutcome.failure(task, e)
        except Exception as e:
            logger.exception("Unexpected error in task %s", task.target)
            outcome = TaskOutcome.failure(task, e)

        self._record(index, outcome)

    def run(self, tasks: Sequence[TransferTask]) -> BatchReport:
        self._cancelled.clear()
        self._outcomes = [None] * len(tasks)
        self._completed = 0
        interrupted = False

        executor = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="obsctl-transfer"
        )
        try:
            futures = [
                executor.submit(self._run_task, index, task)
                for index, task in enumerate(tasks)
            ]
            wait(futures)
        except KeyboardInterrupt:
            interrupted = True
            self._cancelled.set()
            logger.warning("Interrupted, waiting for in-flight tasks to finish")
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        outcomes = tuple(
            outcome or TaskOutcome.cancelled(task)
            for outcome, task in zip(self._outcomes, tasks, strict=True)
        )
        return BatchReport(outcomes=outcomes, interrupted=interrupted)


def run_batch(
    client: Any,
    tasks: Sequence[TransferTask],
    max_workers: int = DEFAULT_MAX_WORKERS,
    silent: bool = False,
) -> BatchReport:
    """Runs a batch behind a status spinner on stderr."""
    if silent or not tasks:
        return BatchTransferEngine(client, max_workers=max_workers).run(tasks)

    with console_err.status(
        f"[bold yellow]Running {len(tasks)} tasks...", spinner="dots"
    ) as status:

        def on_progress(completed: int, total: int) -> None:
            status.update(f"[bold yellow]Completed {completed}/{total} tasks...")

        engine = BatchTransferEngine(
            client, max_workers=max_workers, on_progress=on_progress
        )
        return engine.run(tasks)
