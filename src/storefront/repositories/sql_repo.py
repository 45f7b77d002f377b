from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from storefront.domain.errors import NotFoundError, QueryError
from storefront.domain.models import (
    Order,
    PopularCustomer,
    PopularProduct,
    Product,
    ProductUpdate,
    Store,
    SupplyRequest,
    User,
)

log = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Editable product columns. Only these fragments are ever placed in SQL text.
PRODUCT_COLUMNS: dict[str, str] = {
    "numberofunits": "numberofunits",
    "priceperunit": "priceperunit",
    "productname": "productname",
}

# Tables whose key is numbered by the client as previous max + 1.
NUMBERED_TABLES: dict[str, str] = {
    "orders": "ordernumber",
    "productupdates": "updatenumber",
    "productsupplyrequests": "requestnumber",
}


def _ts(value) -> str:
    if isinstance(value, datetime):
        return value.strftime(TIMESTAMP_FORMAT)
    return str(value)[:19]


class SqlRepository:
    def __init__(self, engine: Engine):
        self.engine = engine

    @contextmanager
    def _conn(self, *, write: bool = False) -> Iterator[Connection]:
        try:
            with (self.engine.begin() if write else self.engine.connect()) as conn:
                yield conn
        except SQLAlchemyError as exc:
            raise QueryError(str(exc).splitlines()[0]) from exc

    # ---------- Users ----------
    def create_user(self, name: str, password: str, latitude: float, longitude: float, role: str) -> int:
        with self._conn(write=True) as conn:
            row = conn.execute(
                text(
                    """
                    INSERT INTO users (name, password, latitude, longitude, type)
                    VALUES (:name, :password, :lat, :lon, :role)
                    RETURNING userid
                    """
                ),
                {
                    "name": name,
                    "password": self._hash_password(password),
                    "lat": float(latitude),
                    "lon": float(longitude),
                    "role": role,
                },
            ).one()
        return int(row[0])

    def authenticate_user(self, name: str, password: str) -> Optional[User]:
        with self._conn() as conn:
            rows = conn.execute(
                text(
                    """
                    SELECT userid, name, latitude, longitude, type, password
                    FROM users
                    WHERE name = :name
                    ORDER BY userid
                    """
                ),
                {"name": name},
            ).all()
        for r in rows:
            stored = str(r[5])
            if not self._verify_password(stored, password):
                continue
            # transparent upgrade from legacy plain-text passwords
            if not stored.startswith("pbkdf2_sha256$"):
                self._upgrade_password(int(r[0]), password)
            return self._user(r)
        return None

    def _upgrade_password(self, user_id: int, password: str) -> None:
        # the login already succeeded; a rejected rewrite leaves the old value in place
        try:
            with self._conn(write=True) as conn:
                conn.execute(
                    text("UPDATE users SET password = :pw WHERE userid = :uid"),
                    {"pw": self._hash_password(password), "uid": int(user_id)},
                )
        except QueryError:
            log.error("password_upgrade_failed user_id=%s", user_id, exc_info=True)

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        with self._conn() as conn:
            r = conn.execute(
                text("SELECT userid, name, latitude, longitude, type FROM users WHERE userid = :uid"),
                {"uid": int(user_id)},
            ).first()
        return self._user(r) if r else None

    @staticmethod
    def _user(r) -> User:
        return User(
            id=int(r[0]),
            name=str(r[1]).strip(),
            latitude=float(r[2]),
            longitude=float(r[3]),
            role=str(r[4]).strip(),
        )

    # ---------- Stores ----------
    def list_stores(self) -> list[Store]:
        with self._conn() as conn:
            rows = conn.execute(
                text("SELECT storeid, name, latitude, longitude, managerid FROM store ORDER BY storeid")
            ).all()
        return [self._store(r) for r in rows]

    def get_store(self, store_id: int) -> Optional[Store]:
        with self._conn() as conn:
            r = conn.execute(
                text("SELECT storeid, name, latitude, longitude, managerid FROM store WHERE storeid = :sid"),
                {"sid": int(store_id)},
            ).first()
        return self._store(r) if r else None

    def list_stores_managed_by(self, user_id: int) -> list[Store]:
        with self._conn() as conn:
            rows = conn.execute(
                text(
                    """
                    SELECT storeid, name, latitude, longitude, managerid
                    FROM store
                    WHERE managerid = :uid
                    ORDER BY storeid
                    """
                ),
                {"uid": int(user_id)},
            ).all()
        return [self._store(r) for r in rows]

    def manages_store(self, user_id: int, store_id: int) -> bool:
        with self._conn() as conn:
            r = conn.execute(
                text("SELECT 1 FROM store WHERE storeid = :sid AND managerid = :uid"),
                {"sid": int(store_id), "uid": int(user_id)},
            ).first()
        return r is not None

    @staticmethod
    def _store(r) -> Store:
        return Store(
            id=int(r[0]),
            name=str(r[1] or "").strip(),
            latitude=float(r[2]),
            longitude=float(r[3]),
            manager_id=int(r[4]),
        )

    def warehouse_exists(self, warehouse_id: int) -> bool:
        with self._conn() as conn:
            r = conn.execute(
                text("SELECT 1 FROM warehouse WHERE warehouseid = :wid"),
                {"wid": int(warehouse_id)},
            ).first()
        return r is not None

    # ---------- Products ----------
    def list_products_for_store(self, store_id: int) -> list[Product]:
        with self._conn() as conn:
            rows = conn.execute(
                text(
                    """
                    SELECT storeid, productname, numberofunits, priceperunit
                    FROM product
                    WHERE storeid = :sid
                    ORDER BY productname
                    """
                ),
                {"sid": int(store_id)},
            ).all()
        return [self._product(r) for r in rows]

    def get_product(self, store_id: int, product_name: str) -> Optional[Product]:
        with self._conn() as conn:
            r = conn.execute(
                text(
                    """
                    SELECT storeid, productname, numberofunits, priceperunit
                    FROM product
                    WHERE storeid = :sid AND productname = :pname
                    """
                ),
                {"sid": int(store_id), "pname": product_name},
            ).first()
        return self._product(r) if r else None

    @staticmethod
    def _product(r) -> Product:
        return Product(
            store_id=int(r[0]),
            name=str(r[1]).strip(),
            units=int(r[2]),
            price_per_unit=float(r[3]),
        )

    def _adjust_units(self, conn: Connection, store_id: int, product_name: str, delta: int) -> int:
        conn.execute(
            text(
                """
                UPDATE product
                SET numberofunits = numberofunits + :delta
                WHERE storeid = :sid AND productname = :pname
                """
            ),
            {"delta": int(delta), "sid": int(store_id), "pname": product_name},
        )
        r = conn.execute(
            text("SELECT numberofunits FROM product WHERE storeid = :sid AND productname = :pname"),
            {"sid": int(store_id), "pname": product_name},
        ).first()
        if r is None:
            raise NotFoundError(f"Product '{product_name}' not found in store {store_id}.")
        return int(r[0])

    @staticmethod
    def _next_number(conn: Connection, table: str) -> int:
        """Previous max + 1 for a numbered table, held until the transaction ends."""
        column = NUMBERED_TABLES[table]
        if conn.dialect.name == "postgresql":
            # self-conflicting lock: concurrent writers queue, readers are not blocked
            conn.execute(text(f"LOCK TABLE {table} IN SHARE ROW EXCLUSIVE MODE"))
        return int(conn.execute(text(f"SELECT COALESCE(MAX({column}), 0) + 1 FROM {table}")).scalar_one())

    # ---------- Orders ----------
    def create_order(self, customer_id: int, store_id: int, product_name: str, units: int, ordered_at: str) -> Order:
        with self._conn(write=True) as conn:
            self._adjust_units(conn, store_id, product_name, -int(units))
            number = self._next_number(conn, "orders")
            conn.execute(
                text(
                    """
                    INSERT INTO orders (ordernumber, customerid, storeid, productname, unitsordered, ordertime)
                    VALUES (:num, :cid, :sid, :pname, :units, :at)
                    """
                ),
                {
                    "num": number,
                    "cid": int(customer_id),
                    "sid": int(store_id),
                    "pname": product_name,
                    "units": int(units),
                    "at": ordered_at,
                },
            )
        return Order(
            number=number,
            customer_id=int(customer_id),
            store_id=int(store_id),
            product_name=product_name,
            units=int(units),
            ordered_at=ordered_at,
        )

    def recent_orders(self, customer_id: int, limit: int = 5) -> list[Order]:
        with self._conn() as conn:
            rows = conn.execute(
                text(
                    """
                    SELECT ordernumber, customerid, storeid, productname, unitsordered, ordertime
                    FROM orders
                    WHERE customerid = :cid
                    ORDER BY ordertime DESC, ordernumber DESC
                    LIMIT :lim
                    """
                ),
                {"cid": int(customer_id), "lim": int(limit)},
            ).all()
        return [self._order(r) for r in rows]

    def recent_orders_for_manager(self, manager_id: int, limit: int = 50) -> list[Order]:
        with self._conn() as conn:
            rows = conn.execute(
                text(
                    """
                    SELECT o.ordernumber, o.customerid, o.storeid, o.productname, o.unitsordered, o.ordertime
                    FROM orders o
                    JOIN store s ON s.storeid = o.storeid
                    WHERE s.managerid = :uid
                    ORDER BY o.ordertime DESC, o.ordernumber DESC
                    LIMIT :lim
                    """
                ),
                {"uid": int(manager_id), "lim": int(limit)},
            ).all()
        return [self._order(r) for r in rows]

    @staticmethod
    def _order(r) -> Order:
        return Order(
            number=int(r[0]),
            customer_id=int(r[1]),
            store_id=int(r[2]),
            product_name=str(r[3]).strip(),
            units=int(r[4]),
            ordered_at=_ts(r[5]),
        )

    # ---------- Product updates ----------
    def create_product_update(
        self,
        manager_id: int,
        store_id: int,
        product_name: str,
        column: str,
        value,
        updated_on: str,
    ) -> ProductUpdate:
        sql_column = PRODUCT_COLUMNS.get(column)
        if sql_column is None:
            raise ValueError(f"Column '{column}' is not editable.")

        with self._conn(write=True) as conn:
            number = self._next_number(conn, "productupdates")
            conn.execute(
                text(
                    """
                    INSERT INTO productupdates (updatenumber, managerid, storeid, productname, updatedon)
                    VALUES (:num, :uid, :sid, :pname, :at)
                    """
                ),
                {
                    "num": number,
                    "uid": int(manager_id),
                    "sid": int(store_id),
                    "pname": product_name,
                    "at": updated_on,
                },
            )
            result = conn.execute(
                text(f"UPDATE product SET {sql_column} = :value WHERE storeid = :sid AND productname = :pname"),
                {"value": value, "sid": int(store_id), "pname": product_name},
            )
            if result.rowcount == 0:
                raise NotFoundError(f"Product '{product_name}' not found in store {store_id}.")
        return ProductUpdate(
            number=number,
            manager_id=int(manager_id),
            store_id=int(store_id),
            product_name=product_name,
            updated_on=updated_on,
        )

    def recent_product_updates(self, manager_id: int, limit: int = 5) -> list[ProductUpdate]:
        with self._conn() as conn:
            rows = conn.execute(
                text(
                    """
                    SELECT updatenumber, managerid, storeid, productname, updatedon
                    FROM productupdates
                    WHERE managerid = :uid
                    ORDER BY updatedon DESC, updatenumber DESC
                    LIMIT :lim
                    """
                ),
                {"uid": int(manager_id), "lim": int(limit)},
            ).all()
        return [
            ProductUpdate(
                number=int(r[0]),
                manager_id=int(r[1]),
                store_id=int(r[2]),
                product_name=str(r[3]).strip(),
                updated_on=_ts(r[4]),
            )
            for r in rows
        ]

    # ---------- Supply requests ----------
    def create_supply_request(
        self, manager_id: int, warehouse_id: int, store_id: int, product_name: str, units: int
    ) -> SupplyRequest:
        with self._conn(write=True) as conn:
            self._adjust_units(conn, store_id, product_name, int(units))
            number = self._next_number(conn, "productsupplyrequests")
            conn.execute(
                text(
                    """
                    INSERT INTO productsupplyrequests
                        (requestnumber, managerid, warehouseid, storeid, productname, unitsrequested)
                    VALUES (:num, :uid, :wid, :sid, :pname, :units)
                    """
                ),
                {
                    "num": number,
                    "uid": int(manager_id),
                    "wid": int(warehouse_id),
                    "sid": int(store_id),
                    "pname": product_name,
                    "units": int(units),
                },
            )
        return SupplyRequest(
            number=number,
            manager_id=int(manager_id),
            warehouse_id=int(warehouse_id),
            store_id=int(store_id),
            product_name=product_name,
            units=int(units),
        )

    # ---------- Analytics ----------
    def popular_products(self, manager_id: int, limit: int = 5) -> list[PopularProduct]:
        with self._conn() as conn:
            rows = conn.execute(
                text(
                    """
                    SELECT o.productname, COUNT(o.unitsordered) AS num_orders
                    FROM orders o
                    JOIN store s ON s.storeid = o.storeid
                    WHERE s.managerid = :uid
                    GROUP BY o.productname
                    ORDER BY num_orders DESC, o.productname ASC
                    LIMIT :lim
                    """
                ),
                {"uid": int(manager_id), "lim": int(limit)},
            ).all()
        return [PopularProduct(product_name=str(r[0]).strip(), order_count=int(r[1])) for r in rows]

    def popular_customers(self, manager_id: int, limit: int = 5) -> list[PopularCustomer]:
        # Ascending by order count, as the menu always reported them.
        with self._conn() as conn:
            rows = conn.execute(
                text(
                    """
                    SELECT c.userid, c.name, c.latitude, c.longitude, oc.num_orders
                    FROM (
                        SELECT o.customerid, COUNT(DISTINCT o.ordernumber) AS num_orders
                        FROM orders o
                        JOIN store s ON s.storeid = o.storeid
                        WHERE s.managerid = :uid
                        GROUP BY o.customerid
                    ) oc
                    JOIN users c ON c.userid = oc.customerid
                    ORDER BY oc.num_orders ASC, c.userid ASC
                    LIMIT :lim
                    """
                ),
                {"uid": int(manager_id), "lim": int(limit)},
            ).all()
        return [
            PopularCustomer(
                user_id=int(r[0]),
                name=str(r[1]).strip(),
                latitude=float(r[2]),
                longitude=float(r[3]),
                order_count=int(r[4]),
            )
            for r in rows
        ]

    def store_summary(self, manager_id: int) -> list[tuple[int, str, int, int, int]]:
        """Per managed store: (store id, name, products, orders, units ordered)."""
        with self._conn() as conn:
            rows = conn.execute(
                text(
                    """
                    SELECT s.storeid, s.name,
                           (SELECT COUNT(*) FROM product p WHERE p.storeid = s.storeid),
                           (SELECT COUNT(*) FROM orders o WHERE o.storeid = s.storeid),
                           (SELECT COALESCE(SUM(o.unitsordered), 0) FROM orders o WHERE o.storeid = s.storeid)
                    FROM store s
                    WHERE s.managerid = :uid
                    ORDER BY s.storeid
                    """
                ),
                {"uid": int(manager_id)},
            ).all()
        return [(int(r[0]), str(r[1] or "").strip(), int(r[2]), int(r[3]), int(r[4])) for r in rows]

    @staticmethod
    def _hash_password(password: str, *, rounds: int = 200_000, salt: str | None = None) -> str:
        salt = salt or secrets.token_hex(16)
        digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), rounds).hex()
        return f"pbkdf2_sha256${rounds}${salt}${digest}"

    @staticmethod
    def _verify_password(stored: str, provided: str) -> bool:
        stored = stored.strip()
        if stored.startswith("pbkdf2_sha256$"):
            try:
                _algo, rounds_s, salt, digest = stored.split("$", 3)
                candidate = hashlib.pbkdf2_hmac(
                    "sha256",
                    provided.encode("utf-8"),
                    bytes.fromhex(salt),
                    int(rounds_s),
                ).hex()
            except ValueError:
                return False
            return hmac.compare_digest(candidate, digest)
        return hmac.compare_digest(stored.encode("utf-8"), provided.encode("utf-8"))
