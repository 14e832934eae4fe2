"""Pydantic models describing Product payloads and response envelopes."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_serializer


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, examples=["Curved 40 inch monitor"])
    price: float = Field(..., gt=0, examples=[400])


class ProductCreate(ProductBase):
    """Schema for new products; availability is defaulted by the database."""


class ProductUpdate(ProductBase):
    """Full replacement of every mutable field."""

    availability: bool = Field(..., examples=[True])


class ProductRead(ProductBase):
    id: int
    availability: bool

    model_config = {"from_attributes": True}


class ProductDetail(ProductRead):
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime | None) -> str | None:
        """Convert datetime to ISO format string."""
        if value is None:
            return None
        return value.isoformat()


class ProductListResponse(BaseModel):
    data: list[ProductRead]


class ProductResponse(BaseModel):
    data: ProductDetail


class MessageResponse(BaseModel):
    data: str = Field(..., examples=["Product deleted"])


class ErrorResponse(BaseModel):
    error: str = Field(..., examples=["Product not found"])


class FieldError(BaseModel):
    type: str = "field"
    value: Any = None
    msg: str
    path: str
    location: str


class ValidationErrorResponse(BaseModel):
    errors: list[FieldError]
