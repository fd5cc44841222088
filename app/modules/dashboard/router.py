"""
Dashboard Router - FastAPI endpoint for aggregated dashboard data.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db.engine import get_db_util
from app.core.response_interceptor import CustomAPIRoute
from app.modules.users.auth import TokenData, require_any_role
from .service import DashboardService
from .schemas import DashboardResponse

router = APIRouter(prefix="/dashboard", tags=["dashboard"], route_class=CustomAPIRoute)


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """
    Get all dashboard data in a single API call.

    Returns:
        - stats: counts of orders, cars and shipping forms, orders per status
        - financial_overview: total income, expenses, net balance, outstanding
        - recent_transactions: last 5 transactions
    """
    return await DashboardService.get_dashboard_data(db)
