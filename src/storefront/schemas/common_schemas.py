from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class PaginationRequest(BaseModel):
    """Standard pagination parameters for list endpoints"""
    limit: int = Field(default=20, ge=1, le=100, description="Number of items to return (1-100)")
    after: Optional[int] = Field(default=None, ge=1, description="Cursor for pagination - ID to start after")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "limit": 20,
                "after": 123
            }
        }
    )


class PaginationResponse(BaseModel):
    """Standard pagination metadata for responses"""
    limit: int = Field(description="Number of items requested")
    count: int = Field(description="Number of items returned")
    has_more: bool = Field(description="Whether there are more items available")
    next_cursor: Optional[int] = Field(default=None, description="Cursor for next page")
