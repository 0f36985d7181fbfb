from app.schemas.common import CamelModel


class CatalogSummary(CamelModel):
    """仪表盘汇总"""
    total_products: int = 0
    total_categories: int = 0
    total_tags: int = 0
    published_products: int = 0
    featured_products: int = 0
    out_of_stock_products: int = 0
    total_stock_value: float = 0
