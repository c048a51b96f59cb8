from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import StrEnum
from pathlib import Path
from typing import Any

from obsctl.core.errors import PartialBatchFailure


@dataclass(frozen=True)
class Credentials:
    """AK/SK pair used to sign every request of one invocation."""

    access_key: str
    secret_key: str = field(repr=False)


class TaskKind(StrEnum):
    UPLOAD = "upload"
    DELETE_OBJECT = "delete-object"
    DELETE_BUCKET = "delete-bucket"


class OutcomeStatus(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class TransferTask:
    kind: TaskKind
    bucket: str
    remote_key: str | None = None
    local_path: str | None = None

    @classmethod
    def upload(
        cls, bucket: str, local_path: str, remote_key: str | None = None
    ) -> "TransferTask":
        return cls(
            kind=TaskKind.UPLOAD,
            bucket=bucket,
            remote_key=remote_key or Path(local_path).name,
            local_path=local_path,
        )

    @classmethod
    def delete_object(cls, bucket: str, remote_key: str) -> "TransferTask":
        return cls(kind=TaskKind.DELETE_OBJECT, bucket=bucket, remote_key=remote_key)

    @classmethod
    def delete_bucket(cls, bucket: str) -> "TransferTask":
        return cls(kind=TaskKind.DELETE_BUCKET, bucket=bucket)

    @property
    def target(self) -> str:
        if self.kind == TaskKind.DELETE_BUCKET:
            return self.bucket
        return f"{self.bucket}/{self.remote_key}"

    @property
    def source(self) -> str:
        return self.local_path or "-"


@dataclass(frozen=True)
class TaskOutcome:
    task: TransferTask
    status: OutcomeStatus
    reason: str | None = None
    error_type: str | None = None

    @classmethod
    def success(cls, task: TransferTask) -> "TaskOutcome":
        return cls(task=task, status=OutcomeStatus.SUCCESS)

    @classmethod
    def failure(cls, task: TransferTask, error: Exception) -> "TaskOutcome":
        return cls(
            task=task,
            status=OutcomeStatus.FAILURE,
            reason=str(error),
            error_type=type(error).__name__,
        )

    @classmethod
    def cancelled(cls, task: TransferTask) -> "TaskOutcome":
        return cls(
            task=task,
            status=OutcomeStatus.CANCELLED,
            reason="Interrupted before the task started",
        )

    @property
    def is_failure(self) -> bool:
        return self.status != OutcomeStatus.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["task"]["kind"] = str(self.task.kind)
        data["status"] = str(self.status)
        return data


@dataclass(frozen=True)
class BatchReport:
    """Outcomes of one batch, always in the order the tasks were given."""

    outcomes: tuple[TaskOutcome, ...]
    interrupted: bool = False

    @property
    def successes(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.is_failure)

    @property
    def failures(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.is_failure)

    @property
    def has_failures(self) -> bool:
        return self.failures > 0

    def raise_for_failures(self) -> None:
        if self.has_failures:
            raise PartialBatchFailure(self)


@dataclass(frozen=True)
class ObjectEntry:
    key: str
    size: int
    last_modified: datetime | None = None
    storage_class: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.last_modified:
            data["last_modified"] = self.last_modified.isoformat()
        return data


@dataclass(frozen=True)
class ListingPage:
    entries: tuple[ObjectEntry, ...]
    next_marker: str | None = None


@dataclass(frozen=True)
class BucketEntry:
    name: str
    creation_date: datetime | None = None
    location: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.creation_date:
            data["creation_date"] = self.creation_date.isoformat()
        return data
