"""仪表盘API"""

from fastapi import APIRouter, Depends

from app.api.responses import unwrap
from app.application import Mediator
from app.application.dashboard import GetCatalogSummaryQuery
from app.core.deps import get_mediator
from app.schemas.dashboard import CatalogSummary

router = APIRouter()


@router.get("/summary", response_model=CatalogSummary)
async def get_catalog_summary(
    *,
    mediator: Mediator = Depends(get_mediator),
):
    return unwrap(await mediator.send(GetCatalogSummaryQuery()))
