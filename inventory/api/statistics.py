from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inventory.database import get_db
from inventory.services.statistics_service import StatisticsService
from inventory.schemas.statistics import StatisticsResponse

router = APIRouter(prefix="/estadisticas", tags=["Statistics"])


@router.get(
    "",
    response_model=StatisticsResponse,
    summary="Inventory statistics",
    description="Total products, total units in stock, low-stock count and products per category. Cached in Redis."
)
def get_statistics(db: Session = Depends(get_db)):
    service = StatisticsService(db)
    return service.get_statistics()
