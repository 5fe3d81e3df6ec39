"""Tagged outcome returned by every service operation.

Expected business failures (validation, missing records, duplicates) are
returned as a `ServiceResult` instead of being raised; only unexpected
faults propagate as exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ResultStatus(str, Enum):
    OK = "ok"
    CREATED = "created"
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


HTTP_STATUS = {
    ResultStatus.OK: 200,
    ResultStatus.CREATED: 201,
    ResultStatus.BAD_REQUEST: 400,
    ResultStatus.NOT_FOUND: 404,
    ResultStatus.CONFLICT: 409,
}


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Outcome of a service call.

    Exactly one of `data` (success) or `message` (failure) is meaningful,
    depending on `status`.
    """
    status: ResultStatus
    data: Optional[T] = None
    message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status in (ResultStatus.OK, ResultStatus.CREATED)

    @property
    def http_status(self) -> int:
        return HTTP_STATUS[self.status]

    @classmethod
    def ok(cls, data: T) -> "ServiceResult[T]":
        return cls(ResultStatus.OK, data=data)

    @classmethod
    def created(cls, data: T) -> "ServiceResult[T]":
        return cls(ResultStatus.CREATED, data=data)

    @classmethod
    def bad_request(cls, message: str) -> "ServiceResult[T]":
        return cls(ResultStatus.BAD_REQUEST, message=message)

    @classmethod
    def not_found(cls, message: str) -> "ServiceResult[T]":
        return cls(ResultStatus.NOT_FOUND, message=message)

    @classmethod
    def conflict(cls, message: str) -> "ServiceResult[T]":
        return cls(ResultStatus.CONFLICT, message=message)
