from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional


class AddToCartRequest(BaseModel):
    """Request to add a product to the cart"""
    product_id: int = Field(ge=1, description="Product identifier")
    quantity: int = Field(description="Quantity to add")

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "product_id": 123,
                "quantity": 2
            }
        },
    )

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v):
        if v <= 0:
            raise ValueError("Quantity must be positive")
        return v


class RemoveFromCartRequest(BaseModel):
    """Request to remove a product (or part of its quantity) from the cart"""
    product_id: int = Field(ge=1, description="Product identifier")
    quantity: Optional[int] = Field(
        default=None,
        description="Quantity to remove; omitted removes the whole line",
    )

    model_config = ConfigDict(extra="forbid")

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Quantity to remove must be positive")
        return v
