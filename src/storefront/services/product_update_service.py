from __future__ import annotations

import logging
import math
from typing import Callable

from storefront.domain.errors import MalformedInputError, NotFoundError
from storefront.domain.models import ProductUpdate, User
from storefront.repositories.unit_of_work import RepositoryUnitOfWork, UnitOfWork

log = logging.getLogger("storefront.manager")


def _parse_units(raw: str) -> int:
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise MalformedInputError("Number of units must be a whole number.") from exc
    if value < 0:
        raise MalformedInputError("Number of units must be >= 0.")
    return value


def _parse_price(raw: str) -> float:
    try:
        value = float(raw.strip())
    except ValueError as exc:
        raise MalformedInputError("Price per unit must be a number.") from exc
    if not math.isfinite(value) or value < 0:
        raise MalformedInputError("Price per unit must be a finite number >= 0.")
    return value


def _parse_name(raw: str) -> str:
    value = raw.strip()
    if not value:
        raise MalformedInputError("Product name can not be empty.")
    return value


EDITABLE_FIELDS: dict[str, Callable[[str], object]] = {
    "numberofunits": _parse_units,
    "priceperunit": _parse_price,
    "productname": _parse_name,
}


class ProductUpdateService:
    def __init__(self, repo, auth, uow_factory: Callable[[], UnitOfWork] | None = None):
        self.repo = repo
        self.auth = auth
        self.uow_factory = uow_factory or (lambda: RepositoryUnitOfWork(repo))

    @staticmethod
    def editable_fields() -> list[str]:
        return list(EDITABLE_FIELDS)

    def update_product(self, manager: User, store_id: int, product_name: str, field: str, raw_value: str) -> ProductUpdate:
        self.auth.require_store_manager(manager, store_id)

        column = (field or "").strip().lower()
        parser = EDITABLE_FIELDS.get(column)
        if parser is None:
            raise MalformedInputError(
                f"Field '{field}' can not be edited. Choose one of: {', '.join(EDITABLE_FIELDS)}."
            )
        value = parser(raw_value or "")

        name = (product_name or "").strip()
        if self.repo.get_product(int(store_id), name) is None:
            raise NotFoundError(f"Product '{name}' not found in store {store_id}.")

        with self.uow_factory() as uow:
            record = uow.create_product_update(manager.id, int(store_id), name, column, value)
        log.info(
            "product_updated update=%s manager=%s store=%s product=%s field=%s",
            record.number, manager.id, store_id, name, column,
        )
        return record

    def recent_updates(self, manager: User, limit: int = 5) -> list[ProductUpdate]:
        return self.repo.recent_product_updates(manager.id, limit)
