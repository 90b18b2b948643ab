from pydantic import BaseModel, ConfigDict
from storefront.models.order import OrderStatus


class OrderStatusUpdateRequest(BaseModel):
    """Move an order to a new status"""
    status: OrderStatus

    model_config = ConfigDict(extra="forbid")
