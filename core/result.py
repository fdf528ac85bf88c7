# core/result.py
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class StageStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class FailureReason(str, Enum):
    """
    Why a model-backed stage produced nothing usable.
    Every one of these is recovered locally by a deterministic fallback.
    """

    UNAVAILABLE = "completion_unavailable"
    COMPLETION_ERROR = "completion_error"
    EMPTY_RESPONSE = "empty_response"
    INVALID_PAYLOAD = "invalid_payload"


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """
    Outcome of one pipeline stage: either a value or a failure reason.
    """

    status: StageStatus
    value: Optional[T] = None
    reason: Optional[FailureReason] = None
    detail: Optional[str] = None

    @classmethod
    def success(cls, value: T) -> "StageResult[T]":
        return cls(status=StageStatus.SUCCESS, value=value)

    @classmethod
    def failure(cls, reason: FailureReason, detail: Optional[str] = None) -> "StageResult[T]":
        return cls(status=StageStatus.FAILURE, reason=reason, detail=detail)

    @property
    def ok(self) -> bool:
        return self.status is StageStatus.SUCCESS
