from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    id: int
    name: str
    latitude: float
    longitude: float
    role: str


@dataclass(frozen=True)
class Store:
    id: int
    name: str
    latitude: float
    longitude: float
    manager_id: int


@dataclass(frozen=True)
class NearbyStore:
    store_id: int
    name: str
    distance: float


@dataclass(frozen=True)
class Product:
    store_id: int
    name: str
    units: int
    price_per_unit: float


@dataclass(frozen=True)
class Order:
    number: int
    customer_id: int
    store_id: int
    product_name: str
    units: int
    ordered_at: str


@dataclass(frozen=True)
class ProductUpdate:
    number: int
    manager_id: int
    store_id: int
    product_name: str
    updated_on: str


@dataclass(frozen=True)
class SupplyRequest:
    number: int
    manager_id: int
    warehouse_id: int
    store_id: int
    product_name: str
    units: int


@dataclass(frozen=True)
class PopularProduct:
    product_name: str
    order_count: int


@dataclass(frozen=True)
class PopularCustomer:
    user_id: int
    name: str
    latitude: float
    longitude: float
    order_count: int
