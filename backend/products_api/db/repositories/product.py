"""Product persistence behind a small repository returning plain records."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from products_api.api.schemas.product import (
    ProductCreate,
    ProductDetail,
    ProductRead,
    ProductUpdate,
)
from products_api.db.models.product import Product

logger = logging.getLogger(__name__)

# Range of the Integer primary key column
MIN_ID = -(2**31)
MAX_ID = 2**31 - 1


class ProductRepository:
    """CRUD operations on the ``products`` table.

    Every mutating call is its own transaction: it commits on success and
    rolls back before re-raising on a database error. Callers only ever
    see ``ProductRead`` / ``ProductDetail`` records, never ORM instances.
    """

    def __init__(self, session: Session):
        self.session = session

    def find_all(self) -> list[ProductRead]:
        products = self.session.scalars(select(Product).order_by(Product.id.desc()))
        return [ProductRead.model_validate(p) for p in products]

    def find_by_id(self, product_id: int) -> ProductDetail | None:
        product = self._get(product_id)
        return ProductDetail.model_validate(product) if product else None

    def create(self, payload: ProductCreate) -> ProductDetail:
        product = Product(name=payload.name, price=payload.price)
        self.session.add(product)
        self._commit()
        self.session.refresh(product)
        logger.info(f"Created product {product.id}")
        return ProductDetail.model_validate(product)

    def update(self, product_id: int, payload: ProductUpdate) -> ProductDetail | None:
        product = self._get(product_id)
        if product is None:
            return None

        product.name = payload.name
        product.price = payload.price
        product.availability = payload.availability
        self._commit()
        self.session.refresh(product)
        logger.info(f"Updated product {product_id}")
        return ProductDetail.model_validate(product)

    def toggle_availability(self, product_id: int) -> ProductDetail | None:
        product = self._get(product_id)
        if product is None:
            return None

        product.availability = not product.availability
        self._commit()
        self.session.refresh(product)
        logger.info(f"Set availability of product {product_id} to {product.availability}")
        return ProductDetail.model_validate(product)

    def delete(self, product_id: int) -> bool:
        product = self._get(product_id)
        if product is None:
            return False

        self.session.delete(product)
        self._commit()
        logger.info(f"Deleted product {product_id}")
        return True

    def _get(self, product_id: int) -> Product | None:
        if not MIN_ID <= product_id <= MAX_ID:
            return None
        return self.session.get(Product, product_id)

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
