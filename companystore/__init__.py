"""Data access for companies: dynamic filters, partial updates, joined positions."""

__version__ = "0.1.0"

from .company import CompanyRepository
from .database import Database, init_database
from .errors import BadRequestError, CompanyStoreError, NotFoundError
from .sql import build_set_clause, build_where_clause

__all__ = [
    "BadRequestError",
    "CompanyRepository",
    "CompanyStoreError",
    "Database",
    "NotFoundError",
    "build_set_clause",
    "build_where_clause",
    "init_database",
]
