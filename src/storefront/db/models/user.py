from sqlalchemy import Column, DateTime, Text, func

from storefront.db.base import Base, IdType


class User(Base):
    """
    Represents a registered customer.

    Deleting a user cascades to their cart (and its items) and their orders
    (and their items) through the foreign keys declared on those tables.
    """

    __tablename__ = "users"

    id = Column(IdType, primary_key=True, autoincrement=True)
    email = Column(Text, nullable=False, unique=True)
    hashed_password = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
