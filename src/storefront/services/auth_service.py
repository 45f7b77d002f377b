from __future__ import annotations

import logging

from storefront.domain.errors import AuthorizationError, MalformedInputError
from storefront.domain.models import Store, User

log = logging.getLogger(__name__)

CUSTOMER_ROLE = "Customer"


class AuthService:
    def __init__(self, repo):
        self.repo = repo

    def create_user(self, name: str, password: str, latitude: float, longitude: float) -> int:
        """Register a customer. Coordinates are expected in [0, 100] but not checked."""
        user = (name or "").strip()
        if not user:
            raise MalformedInputError("Name is required.")
        if not password:
            raise MalformedInputError("Password is required.")

        uid = self.repo.create_user(user, password, float(latitude), float(longitude), CUSTOMER_ROLE)
        log.info("user_created user_id=%s", uid)
        return uid

    def login(self, name: str, password: str) -> User:
        user = self.repo.authenticate_user((name or "").strip(), password or "")
        if not user:
            log.info("login_failed name=%s", name)
            raise AuthorizationError("Invalid name or password.")
        log.info("login_ok user_id=%s", user.id)
        return user

    def require_store_manager(self, user: User, store_id: int) -> Store:
        store = self.repo.get_store(int(store_id))
        if store is None or store.manager_id != user.id:
            raise AuthorizationError("You don't manage this store.")
        return store

    def managed_stores(self, user: User) -> list[Store]:
        stores = self.repo.list_stores_managed_by(user.id)
        if not stores:
            raise AuthorizationError("You don't manage any store.")
        return stores
