"""
Dashboard DTOs (Data Transfer Objects)
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import date


class DashboardStatsResponse(BaseModel):
    """Basic statistics for dashboard"""

    total_orders: int = Field(..., description="Total number of orders")
    total_cars: int = Field(..., description="Total number of cars in inventory")
    available_cars: int = Field(..., description="Cars not reserved or sold")
    total_shipping_forms: int = Field(..., description="Total number of shipping forms")
    pending_shipping_forms: int = Field(..., description="Shipping forms not yet completed")
    orders_by_status: Dict[str, int] = Field(
        ..., description="Order count per status, every status present"
    )


class DashboardFinancialOverviewResponse(BaseModel):
    """Financial overview for dashboard"""

    total_income: float = Field(..., description="Sum of Income amounts")
    total_expenses: float = Field(..., description="Sum of Expense amounts")
    net_balance: float = Field(..., description="Income - expenses")
    outstanding: float = Field(..., description="Unpaid part of Income transactions")


class DashboardTransactionResponse(BaseModel):
    """Simplified transaction data for dashboard"""

    id: int
    type: str
    category: str
    amount: float
    currency: str
    payment_status: str
    transaction_date: date
    customer_name: Optional[str] = None

    class Config:
        from_attributes = True


class DashboardResponse(BaseModel):
    """Complete dashboard data in a single response"""

    stats: DashboardStatsResponse
    financial_overview: DashboardFinancialOverviewResponse
    recent_transactions: List[DashboardTransactionResponse] = Field(
        ..., description="Last 5 transactions"
    )
