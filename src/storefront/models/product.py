from dataclasses import dataclass
from typing import Optional, Dict, Any
from datetime import datetime

from storefront.utils.date_utils import DateUtils
from storefront.utils.formatting_utils import FormattingUtils


@dataclass
class Category:
    """Top-level grouping for products (e.g. Electronics, Clothing)"""
    id: int
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category_id": self.id,
            "name": self.name,
            "created_at": DateUtils.to_iso_string(self.created_at),
            "updated_at": DateUtils.to_iso_string(self.updated_at),
        }


@dataclass
class Product:
    """
    A catalog product.

    price_cents is the authoritative current price; orders copy it at
    creation time and never read it again.
    """
    id: int
    name: str
    price_cents: int  # Store as cents to avoid floating point issues
    stock: int
    description: Optional[str] = None
    image_url: Optional[str] = None
    category_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "product_id": self.id,
            "name": self.name,
            "description": self.description,
            "price_cents": self.price_cents,
            "price": FormattingUtils.format_money(self.price_cents),
            "stock": self.stock,
            "in_stock": self.in_stock,
            "image_url": self.image_url,
            "category_id": self.category_id,
            "created_at": DateUtils.to_iso_string(self.created_at),
            "updated_at": DateUtils.to_iso_string(self.updated_at),
        }
