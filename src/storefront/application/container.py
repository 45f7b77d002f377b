from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import Engine

from storefront.repositories.sql_repo import SqlRepository
from storefront.services.auth_service import AuthService
from storefront.services.catalog_service import CatalogService
from storefront.services.order_service import OrderService
from storefront.services.product_update_service import ProductUpdateService
from storefront.services.reporting_service import ReportingService
from storefront.services.supply_service import SupplyService


@dataclass(frozen=True)
class AppContainer:
    repo: SqlRepository
    auth: AuthService
    catalog: CatalogService
    orders: OrderService
    updates: ProductUpdateService
    supply: SupplyService
    reporting: ReportingService


def build_container(engine: Engine) -> AppContainer:
    repo = SqlRepository(engine)

    auth = AuthService(repo)
    catalog = CatalogService(repo)
    orders = OrderService(repo, catalog)
    updates = ProductUpdateService(repo, auth)
    supply = SupplyService(repo, auth)
    reporting = ReportingService(repo, auth)

    return AppContainer(
        repo=repo,
        auth=auth,
        catalog=catalog,
        orders=orders,
        updates=updates,
        supply=supply,
        reporting=reporting,
    )
