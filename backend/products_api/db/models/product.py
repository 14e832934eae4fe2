"""SQLAlchemy model for product records."""

from sqlalchemy import Boolean, CheckConstraint, Column, Float, Integer, String, func
from sqlalchemy.types import DateTime

from products_api.db.base import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    price = Column(Float, nullable=False)
    availability = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_products_price_positive"),
        CheckConstraint("length(name) > 0", name="ck_products_name_not_empty"),
    )
