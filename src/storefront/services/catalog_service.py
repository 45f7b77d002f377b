from __future__ import annotations

from storefront.domain.errors import NotFoundError, OutOfRangeError
from storefront.domain.geo import SEARCH_RADIUS, distance, within_radius
from storefront.domain.models import NearbyStore, Product, Store, User


class CatalogService:
    def __init__(self, repo, radius: float = SEARCH_RADIUS):
        self.repo = repo
        self.radius = radius

    def _located(self, user: User) -> User:
        # coordinates are read per operation, not taken from the login snapshot
        current = self.repo.get_user_by_id(user.id)
        if current is None:
            raise NotFoundError(f"User {user.id} no longer exists.")
        return current

    def nearby_stores(self, user: User) -> list[NearbyStore]:
        user = self._located(user)
        out: list[NearbyStore] = []
        for s in self.repo.list_stores():
            d = distance(user.latitude, user.longitude, s.latitude, s.longitude)
            if within_radius(d, self.radius):
                out.append(NearbyStore(store_id=s.id, name=s.name, distance=d))
        return out

    def reachable_store(self, user: User, store_id: int) -> Store:
        store = self.repo.get_store(int(store_id))
        if store is None:
            raise NotFoundError(f"Store {store_id} does not exist.")
        user = self._located(user)
        d = distance(user.latitude, user.longitude, store.latitude, store.longitude)
        if not within_radius(d, self.radius):
            raise OutOfRangeError(f"Store not within {self.radius:g} mile radius.")
        return store

    def list_products(self, store_id: int) -> list[Product]:
        return self.repo.list_products_for_store(int(store_id))

    def get_product(self, store_id: int, product_name: str) -> Product:
        p = self.repo.get_product(int(store_id), product_name)
        if not p:
            raise NotFoundError(f"Product '{product_name}' not found in store {store_id}.")
        return p
