from .models import User, Store, NearbyStore, Product, Order, ProductUpdate, SupplyRequest
from .errors import (
    AppError,
    ErrorKind,
    DatabaseConnectionError,
    MalformedInputError,
    QueryError,
    ValidationError,
    NotFoundError,
    AuthorizationError,
    OutOfRangeError,
)

__all__ = [
    "User",
    "Store",
    "NearbyStore",
    "Product",
    "Order",
    "ProductUpdate",
    "SupplyRequest",
    "AppError",
    "ErrorKind",
    "DatabaseConnectionError",
    "MalformedInputError",
    "QueryError",
    "ValidationError",
    "NotFoundError",
    "AuthorizationError",
    "OutOfRangeError",
]
