from .auth_service import AuthService
from .catalog_service import CatalogService
from .order_service import OrderService
from .product_update_service import ProductUpdateService
from .supply_service import SupplyService
from .reporting_service import ReportingService

__all__ = [
    "AuthService",
    "CatalogService",
    "OrderService",
    "ProductUpdateService",
    "SupplyService",
    "ReportingService",
]
