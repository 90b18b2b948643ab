from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from datetime import datetime

from storefront.utils.date_utils import DateUtils
from storefront.utils.formatting_utils import FormattingUtils


@dataclass
class CartItem:
    """Represents a line in a shopping cart, joined with current product data"""
    cart_item_id: int
    cart_id: int
    product_id: int
    quantity: int
    product_name: str
    product_price_cents: int  # Current catalog price, display only
    product_image_url: Optional[str] = None

    @property
    def subtotal_cents(self) -> int:
        """Calculate subtotal in cents"""
        return self.product_price_cents * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "cart_item_id": self.cart_item_id,
            "cart_id": self.cart_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "product_name": self.product_name,
            "product_price_cents": self.product_price_cents,
            "product_price": FormattingUtils.format_money(self.product_price_cents),
            "product_image_url": self.product_image_url,
            "subtotal_cents": self.subtotal_cents,
        }


@dataclass
class Cart:
    """
    Represents a user's shopping cart.

    cart_id is None when the user has never added anything; such a cart is
    returned by reads instead of failing.
    """
    user_id: int
    cart_id: Optional[int] = None
    items: List[CartItem] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def exists(self) -> bool:
        return self.cart_id is not None

    @property
    def total_items(self) -> int:
        """Total number of lines in cart"""
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        """Total quantity of all items"""
        return sum(item.quantity for item in self.items)

    @property
    def total_cents(self) -> int:
        """Total cart value in cents at current prices"""
        return sum(item.subtotal_cents for item in self.items)

    @property
    def is_empty(self) -> bool:
        """Check if cart is empty"""
        return len(self.items) == 0

    def get_item_by_product(self, product_id: int) -> Optional[CartItem]:
        """Find cart line by product ID"""
        return next((item for item in self.items if item.product_id == product_id), None)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "cart_id": self.cart_id,
            "user_id": self.user_id,
            "total_items": self.total_items,
            "total_quantity": self.total_quantity,
            "total_cents": self.total_cents,
            "total": FormattingUtils.format_money(self.total_cents),
            "is_empty": self.is_empty,
            "created_at": DateUtils.to_iso_string(self.created_at),
            "updated_at": DateUtils.to_iso_string(self.updated_at),
            "items": [item.to_dict() for item in self.items],
        }
