from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, FrozenSet
from datetime import datetime
from enum import Enum

from storefront.utils.date_utils import DateUtils
from storefront.utils.formatting_utils import FormattingUtils


class OrderStatus(Enum):
    """Order status enumeration"""
    PENDING = "pending"
    SHIPPED = "shipped"
    COMPLETED = "completed"

    @property
    def allowed_transitions(self) -> FrozenSet["OrderStatus"]:
        return _TRANSITIONS[self]

    def can_transition_to(self, target: "OrderStatus") -> bool:
        return target in self.allowed_transitions


_TRANSITIONS = {
    OrderStatus.PENDING: frozenset({OrderStatus.SHIPPED, OrderStatus.COMPLETED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
}


@dataclass(frozen=True)
class OrderLine:
    """A priced line computed from the cart, before it is persisted"""
    product_id: int
    quantity: int
    price_at_order_cents: int

    @property
    def subtotal_cents(self) -> int:
        return self.price_at_order_cents * self.quantity


@dataclass
class OrderItem:
    """Represents an item within an order"""
    order_item_id: int
    order_id: int
    product_id: Optional[int]  # None once the product has been deleted
    quantity: int
    price_at_order_cents: int  # Price at time of order
    product_name: Optional[str] = None
    product_image_url: Optional[str] = None

    @property
    def subtotal_cents(self) -> int:
        """Calculate subtotal in cents"""
        return self.price_at_order_cents * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "order_item_id": self.order_item_id,
            "order_id": self.order_id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "product_image_url": self.product_image_url,
            "quantity": self.quantity,
            "price_at_order_cents": self.price_at_order_cents,
            "price_at_order": FormattingUtils.format_money(self.price_at_order_cents),
            "subtotal_cents": self.subtotal_cents,
        }


@dataclass
class Order:
    """Represents a customer order"""
    id: int
    user_id: int
    status: OrderStatus
    total_cents: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItem] = field(default_factory=list)

    @property
    def total_items(self) -> int:
        """Total number of unique items in order"""
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        """Total quantity of all items"""
        return sum(item.quantity for item in self.items)

    def to_dict(self, include_items: bool = True) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        data = {
            "order_id": self.id,
            "user_id": self.user_id,
            "status": self.status.value,
            "total_cents": self.total_cents,
            "total": FormattingUtils.format_money(self.total_cents),
            "total_items": self.total_items,
            "total_quantity": self.total_quantity,
            "created_at": DateUtils.to_iso_string(self.created_at),
            "updated_at": DateUtils.to_iso_string(self.updated_at),
        }
        if include_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data
