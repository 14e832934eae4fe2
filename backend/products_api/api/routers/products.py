"""CRUD endpoints for the product catalogue."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.exc import SQLAlchemyError

from products_api.api.dependencies.db import get_product_repository
from products_api.api.schemas.product import (
    ErrorResponse,
    MessageResponse,
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
    ValidationErrorResponse,
)
from products_api.api.validation import (
    RequestInput,
    valid_availability,
    valid_id,
    valid_name,
    valid_price,
    validate,
)
from products_api.core.errors import NotFoundError, ServerError
from products_api.db.repositories.product import ProductRepository

logger = logging.getLogger(__name__)

router = APIRouter()

PRODUCT_NOT_FOUND = "Product not found"

ID_PARAM = {"id": "product_id"}

_invalid_request = {"model": ValidationErrorResponse, "description": "Bad request"}
_not_found = {"model": ErrorResponse, "description": PRODUCT_NOT_FOUND}
_server_error = {"model": ErrorResponse, "description": "Server error"}


def _body_schema(model) -> dict:
    """Document a JSON body that is parsed by the validation rules, not FastAPI."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


def _product_id(description: str = "The ID of the product"):
    # Declared for the OpenAPI docs only; the id is parsed by valid_id()
    return Path(..., description=description, examples=[1])


@router.get(
    "",
    summary="Get all products",
    response_model=ProductListResponse,
    responses={500: _server_error},
)
def get_products(
    repository: ProductRepository = Depends(get_product_repository),
) -> ProductListResponse:
    """Return every product, newest first, without audit timestamps."""
    try:
        products = repository.find_all()
    except SQLAlchemyError as e:
        logger.error(f"Database error listing products: {e}", exc_info=True)
        raise ServerError("Failed to retrieve products") from e
    return ProductListResponse(data=products)


@router.get(
    "/{product_id}",
    summary="Get a product",
    response_model=ProductResponse,
    responses={400: _invalid_request, 404: _not_found, 500: _server_error},
)
def get_product_by_id(
    product_id: str = _product_id(),
    data: RequestInput = Depends(validate(valid_id(), params=ID_PARAM)),
    repository: ProductRepository = Depends(get_product_repository),
) -> ProductResponse:
    """Get a product based on its unique ID."""
    pk = data.cleaned["id"]
    try:
        product = repository.find_by_id(pk)
    except SQLAlchemyError as e:
        logger.error(f"Database error fetching product {pk}: {e}", exc_info=True)
        raise ServerError(f"Failed to retrieve product {pk}") from e

    if product is None:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return ProductResponse(data=product)


@router.post(
    "",
    summary="Create a new product",
    status_code=status.HTTP_201_CREATED,
    response_model=ProductResponse,
    responses={400: _invalid_request, 500: _server_error},
    openapi_extra=_body_schema(ProductCreate),
)
def create_product(
    data: RequestInput = Depends(validate(valid_name(), valid_price())),
    repository: ProductRepository = Depends(get_product_repository),
) -> ProductResponse:
    """Persist a product; availability starts out true."""
    payload = ProductCreate(name=data.cleaned["name"], price=data.cleaned["price"])
    try:
        product = repository.create(payload)
    except SQLAlchemyError as e:
        logger.error(f"Database error creating product: {e}", exc_info=True)
        raise ServerError("Failed to create product") from e
    return ProductResponse(data=product)


@router.put(
    "/{product_id}",
    summary="Update a product with user input",
    response_model=ProductResponse,
    responses={400: _invalid_request, 404: _not_found, 500: _server_error},
    openapi_extra=_body_schema(ProductUpdate),
)
def update_product(
    product_id: str = _product_id("The ID of the product to update"),
    data: RequestInput = Depends(
        validate(
            valid_id(),
            valid_name(),
            valid_price(),
            valid_availability(),
            params=ID_PARAM,
        )
    ),
    repository: ProductRepository = Depends(get_product_repository),
) -> ProductResponse:
    """Replace name, price and availability of an existing product."""
    pk = data.cleaned["id"]
    payload = ProductUpdate(
        name=data.cleaned["name"],
        price=data.cleaned["price"],
        availability=data.cleaned["availability"],
    )
    try:
        product = repository.update(pk, payload)
    except SQLAlchemyError as e:
        logger.error(f"Database error updating product {pk}: {e}", exc_info=True)
        raise ServerError(f"Failed to update product {pk}") from e

    if product is None:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return ProductResponse(data=product)


@router.patch(
    "/{product_id}",
    summary="Update availability",
    response_model=ProductResponse,
    responses={400: _invalid_request, 404: _not_found, 500: _server_error},
)
def update_availability(
    product_id: str = _product_id("The ID of the product to toggle"),
    data: RequestInput = Depends(validate(valid_id(), params=ID_PARAM)),
    repository: ProductRepository = Depends(get_product_repository),
) -> ProductResponse:
    """Flip the availability flag of a product."""
    pk = data.cleaned["id"]
    try:
        product = repository.toggle_availability(pk)
    except SQLAlchemyError as e:
        logger.error(
            f"Database error toggling availability of product {pk}: {e}", exc_info=True
        )
        raise ServerError(f"Failed to update product {pk}") from e

    if product is None:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return ProductResponse(data=product)


@router.delete(
    "/{product_id}",
    summary="Delete a product",
    response_model=MessageResponse,
    responses={400: _invalid_request, 404: _not_found, 500: _server_error},
)
def delete_product(
    product_id: str = _product_id("The ID of the product to delete"),
    data: RequestInput = Depends(validate(valid_id(), params=ID_PARAM)),
    repository: ProductRepository = Depends(get_product_repository),
) -> MessageResponse:
    """Permanently remove a product."""
    pk = data.cleaned["id"]
    try:
        deleted = repository.delete(pk)
    except SQLAlchemyError as e:
        logger.error(f"Database error deleting product {pk}: {e}", exc_info=True)
        raise ServerError(f"Failed to delete product {pk}") from e

    if not deleted:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return MessageResponse(data="Product deleted")
