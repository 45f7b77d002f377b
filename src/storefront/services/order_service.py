from __future__ import annotations

import logging
from typing import Callable

from storefront.domain.errors import MalformedInputError
from storefront.domain.models import Order, User
from storefront.repositories.unit_of_work import RepositoryUnitOfWork, UnitOfWork
from storefront.services.catalog_service import CatalogService

log = logging.getLogger("storefront.orders")

RECENT_LIMIT = 5


class OrderService:
    def __init__(
        self,
        repo,
        catalog: CatalogService,
        uow_factory: Callable[[], UnitOfWork] | None = None,
    ):
        self.repo = repo
        self.catalog = catalog
        self.uow_factory = uow_factory or (lambda: RepositoryUnitOfWork(repo))

    def place_order(self, user: User, store_id: int, product_name: str, quantity: int) -> Order:
        """Order ``quantity`` units from a store within reach of the user.

        The count is decremented without a stock check, so it can go
        negative. Reach and product checks happen before any write.
        """
        name = (product_name or "").strip()
        if not name:
            raise MalformedInputError("Product name is required.")
        if int(quantity) <= 0:
            raise MalformedInputError("Quantity must be >= 1.")

        self.catalog.reachable_store(user, store_id)
        self.catalog.get_product(store_id, name)

        with self.uow_factory() as uow:
            order = uow.create_order(user.id, int(store_id), name, int(quantity))
        log.info(
            "order_created order=%s customer=%s store=%s product=%s units=%s",
            order.number, user.id, store_id, name, quantity,
        )
        return order

    def recent_orders(self, user: User, limit: int = RECENT_LIMIT) -> list[Order]:
        return self.repo.recent_orders(user.id, limit)
