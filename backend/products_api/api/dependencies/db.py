"""Database session and repository dependencies."""

from collections.abc import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from products_api.db.repositories.product import ProductRepository
from products_api.db.session import Database


def get_database(request: Request) -> Database:
    """The Database instance the app was built with."""
    return request.app.state.database


def get_session(
    database: Database = Depends(get_database),
) -> Generator[Session, None, None]:
    """FastAPI dependency that yields a managed SQLAlchemy session."""
    yield from database.session()


def get_product_repository(
    session: Session = Depends(get_session),
) -> ProductRepository:
    return ProductRepository(session)
