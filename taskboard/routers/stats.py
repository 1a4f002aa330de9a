from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.dependencies import get_db, valid_user_id
from taskboard.services.stats import user_stats, overall_stats
from taskboard.utils.errors import query_guard

router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/users/{user_id}/stats")
async def get_user_stats(user_id: int = Depends(valid_user_id), db: AsyncSession = Depends(get_db)):
    with query_guard("Failed to fetch user statistics"):
        return await user_stats(db, user_id)


@router.get("/stats")
async def get_overall_stats(db: AsyncSession = Depends(get_db)):
    with query_guard("Failed to fetch statistics"):
        return await overall_stats(db)
