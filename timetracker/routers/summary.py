from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.database import get_db
from timetracker.schemas.summary import SummaryResponse
from timetracker.services import summary_service

router = APIRouter(prefix="/summary", tags=["summary"])


@router.get("", response_model=SummaryResponse | None)
async def get_summary(db: AsyncSession = Depends(get_db)):
    return await summary_service.get_summary(db)
