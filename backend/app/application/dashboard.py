"""仪表盘汇总"""

from pydantic import BaseModel

from app.application.mediator import RequestHandler, handles
from app.application.result import Result
from app.schemas.dashboard import CatalogSummary
from app.specifications import (
    FeaturedProductsSpecification,
    OutOfStockProductsSpecification,
    PublishedProductsSpecification,
)


class GetCatalogSummaryQuery(BaseModel):
    pass


@handles(GetCatalogSummaryQuery)
class GetCatalogSummaryHandler(RequestHandler):
    action = "统计商品目录"

    async def execute(self, query: GetCatalogSummaryQuery) -> Result[CatalogSummary]:
        products = self.uow.products
        summary = CatalogSummary(
            total_products=await self.uow.get_total_product_count(),
            total_categories=await self.uow.get_total_category_count(),
            total_tags=await self.uow.tags.count(),
            published_products=await products.count(PublishedProductsSpecification()),
            featured_products=await products.count(FeaturedProductsSpecification(only_published=False)),
            out_of_stock_products=await products.count(OutOfStockProductsSpecification()),
            total_stock_value=await products.total_stock_value(),
        )
        return Result.success(summary)
