# Import all models here so Base.metadata knows every table.
# Used by app.main, alembic and the test fixtures, never by the model modules.

from app.core.db.base import Base, BaseModel
from app.modules.users.models import User
from app.modules.settings.models import Setting
from app.modules.orders.models import Order
from app.modules.inventory.models import Car
from app.modules.finance.models import FinancialTransaction
from app.modules.shipping.models import ShippingForm

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "Setting",
    "Order",
    "Car",
    "FinancialTransaction",
    "ShippingForm",
]
