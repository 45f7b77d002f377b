from __future__ import annotations

import logging
from typing import Callable

from storefront.domain.errors import MalformedInputError, NotFoundError
from storefront.domain.models import SupplyRequest, User
from storefront.repositories.unit_of_work import RepositoryUnitOfWork, UnitOfWork

log = logging.getLogger("storefront.manager")


class SupplyService:
    def __init__(self, repo, auth, uow_factory: Callable[[], UnitOfWork] | None = None):
        self.repo = repo
        self.auth = auth
        self.uow_factory = uow_factory or (lambda: RepositoryUnitOfWork(repo))

    def place_supply_request(
        self, manager: User, store_id: int, product_name: str, units: int, warehouse_id: int
    ) -> SupplyRequest:
        """Restock a managed store from a warehouse.

        Adds ``units`` to the product count and records the request in the
        same transaction.
        """
        if int(units) <= 0:
            raise MalformedInputError("Units must be >= 1.")
        name = (product_name or "").strip()
        if not name:
            raise MalformedInputError("Product name is required.")

        self.auth.require_store_manager(manager, store_id)
        if not self.repo.warehouse_exists(int(warehouse_id)):
            raise NotFoundError("Warehouse does not exist.")
        if self.repo.get_product(int(store_id), name) is None:
            raise NotFoundError(f"Product '{name}' not found in store {store_id}.")

        with self.uow_factory() as uow:
            request = uow.create_supply_request(manager.id, int(warehouse_id), int(store_id), name, int(units))
        log.info(
            "supply_requested request=%s manager=%s warehouse=%s store=%s product=%s units=%s",
            request.number, manager.id, warehouse_id, store_id, name, units,
        )
        return request
