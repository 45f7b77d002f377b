from .account_view import AccountView
from .catalog_view import CatalogView
from .orders_view import OrdersView
from .manager_view import ManagerView

__all__ = ["AccountView", "CatalogView", "OrdersView", "ManagerView"]
