"""通用Schema：驼峰命名基类、分页包装、错误响应"""

import math
from typing import Any, Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """输出驼峰字段，输入同时接受驼峰和下划线"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class PaginatedList(CamelModel, Generic[T]):
    items: List[T] = []
    page_number: int
    page_size: int
    total_count: int
    total_pages: int
    has_previous_page: bool
    has_next_page: bool

    @classmethod
    def create(cls, items: Sequence[T], total_count: int, page_number: int, page_size: int):
        total_pages = math.ceil(total_count / page_size) if page_size > 0 else 0
        return cls(
            items=list(items),
            page_number=page_number,
            page_size=page_size,
            total_count=total_count,
            total_pages=total_pages,
            has_previous_page=page_number > 1,
            has_next_page=page_number < total_pages,
        )


class ErrorResponse(CamelModel):
    status_code: int
    message: str
    details: Optional[Any] = None


class ValidationErrorItem(CamelModel):
    identifier: str
    error_message: str
