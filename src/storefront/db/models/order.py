from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, Integer, Text
from sqlalchemy import ForeignKey, func
from sqlalchemy.orm import relationship

from storefront.db.base import Base, IdType


class Order(Base):
    """
    A purchase by a user.

    status is constrained to pending, shipped or completed by a CHECK
    constraint.

    total_cents is stored alongside order_items as the charged amount and
    always equals the sum of quantity * price_at_order_cents over its items.
    """

    __tablename__ = "orders"

    id = Column(IdType, primary_key=True, autoincrement=True)
    user_id = Column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    status = Column(Text, nullable=False, server_default="pending")
    total_cents = Column(BigInteger, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending','shipped','completed')",
            name="ck_order_status",
        ),
        CheckConstraint("total_cents >= 0", name="ck_order_total"),
    )

    # cascade='all, delete-orphan' -> deleting an order removes its line items
    items = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return (
            f"<Order id={self.id} status={self.status!r} "
            f"total_cents={self.total_cents}>"
        )


class OrderItem(Base):
    """
    A single line item within an order.

    price_at_order_cents is snapshotted at the time of purchase so that later
    price changes on the product do not alter historical order totals.

    product_id uses SET NULL on delete: the line survives the product as a
    historical record.
    """

    __tablename__ = "order_items"

    id = Column(IdType, primary_key=True, autoincrement=True)
    order_id = Column(
        BigInteger, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
    )
    product_id = Column(
        BigInteger, ForeignKey("products.id", ondelete="SET NULL"), nullable=True
    )
    quantity = Column(Integer, nullable=False)
    price_at_order_cents = Column(BigInteger, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("price_at_order_cents >= 0", name="ck_item_price_at_order"),
        CheckConstraint("quantity > 0", name="ck_item_quantity"),
    )

    order = relationship("Order", back_populates="items")

    def __repr__(self) -> str:
        return (
            f"<OrderItem id={self.id} product_id={self.product_id} "
            f"qty={self.quantity}>"
        )
