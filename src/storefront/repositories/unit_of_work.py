from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from storefront.domain.models import Order, ProductUpdate, SupplyRequest


class UnitOfWork(Protocol):
    def __enter__(self) -> "UnitOfWork": ...
    def __exit__(self, exc_type, exc, tb) -> None: ...
    def create_order(self, customer_id: int, store_id: int, product_name: str, units: int) -> Order: ...
    def create_product_update(
        self, manager_id: int, store_id: int, product_name: str, column: str, value
    ) -> ProductUpdate: ...
    def create_supply_request(
        self, manager_id: int, warehouse_id: int, store_id: int, product_name: str, units: int
    ) -> SupplyRequest: ...


def now_stamp() -> str:
    return datetime.now().replace(microsecond=0).isoformat(sep=" ")


@dataclass
class RepositoryUnitOfWork:
    """Unit of Work adapter for transactional write use-cases.

    Each repository write method runs its statements inside a single
    database transaction. This class stamps the timestamps so services
    stay persistence-agnostic.
    """

    repo: object

    def __enter__(self) -> "RepositoryUnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None

    def create_order(self, customer_id: int, store_id: int, product_name: str, units: int) -> Order:
        return self.repo.create_order(customer_id, store_id, product_name, units, now_stamp())

    def create_product_update(self, manager_id: int, store_id: int, product_name: str, column: str, value) -> ProductUpdate:
        return self.repo.create_product_update(manager_id, store_id, product_name, column, value, now_stamp())

    def create_supply_request(
        self, manager_id: int, warehouse_id: int, store_id: int, product_name: str, units: int
    ) -> SupplyRequest:
        return self.repo.create_supply_request(manager_id, warehouse_id, store_id, product_name, units)
