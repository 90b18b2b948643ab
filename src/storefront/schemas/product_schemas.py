from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from storefront.schemas.common_schemas import PaginationRequest
from storefront.utils.validators import ValidationUtils


class CategoryRequest(BaseModel):
    """Create or rename a category"""
    name: str = Field(min_length=1, max_length=100, description="Category name")

    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = ValidationUtils.sanitize_text(v)
        if not v:
            raise ValueError("Name cannot be blank")
        return v


class ProductCreateRequest(BaseModel):
    """Request to create a catalog product"""
    name: str = Field(min_length=1, max_length=ValidationUtils.MAX_NAME_LENGTH)
    price_cents: int = Field(description="Unit price in cents")
    stock: int = Field(default=0, ge=0, description="Units in stock")
    description: Optional[str] = Field(default=None, max_length=ValidationUtils.MAX_TEXT_LENGTH)
    image_url: Optional[str] = Field(default=None, max_length=500)
    category_id: Optional[int] = Field(default=None, ge=1)

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "name": "Wireless Mouse",
                "price_cents": 2499,
                "stock": 50,
                "description": "2.4GHz wireless mouse",
                "image_url": "https://cdn.example.com/mouse.jpg",
                "category_id": 1
            }
        },
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = ValidationUtils.sanitize_text(v)
        if not v:
            raise ValueError("Name cannot be blank")
        return v

    @field_validator("price_cents")
    @classmethod
    def validate_price(cls, v):
        if not ValidationUtils.validate_price_cents(v):
            raise ValueError("Price must be a positive amount in cents")
        return v

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v):
        if v is not None and not ValidationUtils.validate_url(v):
            raise ValueError("Image URL must be an http(s) URL")
        return v


class ProductUpdateRequest(BaseModel):
    """
    Partial product update.

    Only the fields declared here can change; unknown fields are rejected.
    Fields left unset are not touched.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=ValidationUtils.MAX_NAME_LENGTH)
    price_cents: Optional[int] = None
    stock: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = Field(default=None, max_length=ValidationUtils.MAX_TEXT_LENGTH)
    image_url: Optional[str] = Field(default=None, max_length=500)
    category_id: Optional[int] = Field(default=None, ge=1)

    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return v
        v = ValidationUtils.sanitize_text(v)
        if not v:
            raise ValueError("Name cannot be blank")
        return v

    @field_validator("price_cents")
    @classmethod
    def validate_price(cls, v):
        if v is not None and not ValidationUtils.validate_price_cents(v):
            raise ValueError("Price must be a positive amount in cents")
        return v

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v):
        if v is not None and not ValidationUtils.validate_url(v):
            raise ValueError("Image URL must be an http(s) URL")
        return v

    def changes(self) -> dict:
        """Fields explicitly provided by the caller"""
        return self.model_dump(exclude_unset=True)


class ProductListRequest(PaginationRequest):
    """Product list filters"""
    category_id: Optional[int] = Field(default=None, ge=1, description="Only products in this category")
