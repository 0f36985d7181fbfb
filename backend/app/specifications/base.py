"""
查询规格基类

一个规格描述一次查询：
- criteria(): 过滤条件列表（AND 组合，空列表表示全部）
- order_by(): 排序条件
- includes(): 预加载选项
- skip / take: 分页窗口（可选）
"""

from typing import List, Optional, Tuple

from sqlalchemy import String, and_, func, true

from app.core.config import settings


def clamp_page(page_number: Optional[int], page_size: Optional[int]) -> Tuple[int, int]:
    """页码至少为1，每页条数限制在 [1, MAX_PAGE_SIZE]"""
    page_number = max(1, page_number or 1)
    if page_size is None:
        page_size = settings.DEFAULT_PAGE_SIZE
    page_size = min(max(1, page_size), settings.MAX_PAGE_SIZE)
    return page_number, page_size


def contains_text(column, term: str):
    """
    不区分大小写的子串匹配

    % 和 _ 按普通字符处理；SQLite 的 lower() 在连接时替换为 Unicode 版本
    """
    return func.lower(column, type_=String).contains(term.lower(), autoescape=True)


class Specification:
    skip: Optional[int] = None
    take: Optional[int] = None

    def criteria(self) -> List:
        return []

    def order_by(self) -> List:
        return []

    def includes(self) -> List:
        return []

    def where(self):
        conditions = self.criteria()
        if not conditions:
            return true()
        return and_(*conditions)

    def apply_paging(self, page_number: Optional[int], page_size: Optional[int]) -> None:
        page_number, page_size = clamp_page(page_number, page_size)
        self.page_number = page_number
        self.page_size = page_size
        self.skip = (page_number - 1) * page_size
        self.take = page_size
