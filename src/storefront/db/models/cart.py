from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, Integer
from sqlalchemy import ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship

from storefront.db.base import Base, IdType


class Cart(Base):
    """
    A shopping cart belonging to a user.

    A user has exactly one cart; the UNIQUE constraint on user_id is what
    resolves two concurrent first adds into a single row. updated_at is
    refreshed whenever items are added or removed.

    ON DELETE CASCADE means deleting a user also deletes their cart and,
    via the cascade on cart_items, all items in it.
    """

    __tablename__ = "carts"

    id = Column(IdType, primary_key=True, autoincrement=True)
    user_id = Column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    items = relationship(
        "CartItem", back_populates="cart", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Cart id={self.id} user_id={self.user_id}>"


class CartItem(Base):
    """
    A single product + quantity pair inside a cart.

    quantity must be > 0 -- removing an item means deleting the row, not
    setting quantity to 0. A product appears at most once per cart; repeated
    adds update the existing row.
    """

    __tablename__ = "cart_items"

    id = Column(IdType, primary_key=True, autoincrement=True)
    cart_id = Column(
        BigInteger, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False
    )
    product_id = Column(
        BigInteger, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    quantity = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_cart_item_quantity"),
        UniqueConstraint("cart_id", "product_id", name="uq_cart_item_product"),
    )

    cart = relationship("Cart", back_populates="items")

    def __repr__(self) -> str:
        return (
            f"<CartItem id={self.id} product_id={self.product_id} "
            f"qty={self.quantity}>"
        )
