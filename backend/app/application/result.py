"""处理器返回值：带状态标签的结果"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class ResultStatus(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    INVALID = "invalid"
    CONFLICT = "conflict"
    ERROR = "error"


@dataclass
class ValidationError:
    identifier: str
    error_message: str


@dataclass
class Result(Generic[T]):
    status: ResultStatus
    value: Optional[T] = None
    message: Optional[str] = None
    errors: List[ValidationError] = field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @classmethod
    def success(cls, value: T = None) -> "Result[T]":
        return cls(ResultStatus.SUCCESS, value=value)

    @classmethod
    def not_found(cls, message: str = "资源不存在") -> "Result[T]":
        return cls(ResultStatus.NOT_FOUND, message=message)

    @classmethod
    def invalid(cls, errors: List[ValidationError], message: Optional[str] = None) -> "Result[T]":
        if message is None:
            message = "; ".join(e.error_message for e in errors) or "请求参数无效"
        return cls(ResultStatus.INVALID, message=message, errors=list(errors))

    @classmethod
    def conflict(cls, message: str) -> "Result[T]":
        return cls(ResultStatus.CONFLICT, message=message)

    @classmethod
    def error(cls, message: str) -> "Result[T]":
        return cls(ResultStatus.ERROR, message=message)
