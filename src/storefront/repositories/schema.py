from __future__ import annotations

import logging

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    text,
)
from sqlalchemy.engine import Connection, Engine

log = logging.getLogger(__name__)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("userid", Integer, primary_key=True),
    Column("name", String(50), nullable=False),
    Column("password", String(200), nullable=False),
    Column("latitude", Float, nullable=False),
    Column("longitude", Float, nullable=False),
    Column("type", String(10), nullable=False),
)

store = Table(
    "store",
    metadata,
    Column("storeid", Integer, primary_key=True),
    Column("name", String(30), nullable=False, server_default=""),
    Column("latitude", Float, nullable=False),
    Column("longitude", Float, nullable=False),
    Column("managerid", Integer, ForeignKey("users.userid"), nullable=False),
    Column("dateestablished", DateTime),
)

product = Table(
    "product",
    metadata,
    Column("storeid", Integer, ForeignKey("store.storeid"), primary_key=True, autoincrement=False),
    Column("productname", String(30), primary_key=True),
    Column("numberofunits", Integer, nullable=False),
    Column("priceperunit", Float, nullable=False),
)

warehouse = Table(
    "warehouse",
    metadata,
    Column("warehouseid", Integer, primary_key=True),
    Column("area", Float),
    Column("latitude", Float),
    Column("longitude", Float),
)

orders = Table(
    "orders",
    metadata,
    Column("ordernumber", Integer, primary_key=True, autoincrement=False),
    Column("customerid", Integer, ForeignKey("users.userid"), nullable=False),
    Column("storeid", Integer, ForeignKey("store.storeid"), nullable=False),
    Column("productname", String(30), nullable=False),
    Column("unitsordered", Integer, nullable=False),
    Column("ordertime", DateTime, nullable=False),
)

productupdates = Table(
    "productupdates",
    metadata,
    Column("updatenumber", Integer, primary_key=True, autoincrement=False),
    Column("managerid", Integer, ForeignKey("users.userid"), nullable=False),
    Column("storeid", Integer, ForeignKey("store.storeid"), nullable=False),
    Column("productname", String(30), nullable=False),
    Column("updatedon", DateTime, nullable=False),
)

productsupplyrequests = Table(
    "productsupplyrequests",
    metadata,
    Column("requestnumber", Integer, primary_key=True, autoincrement=False),
    Column("managerid", Integer, ForeignKey("users.userid"), nullable=False),
    Column("warehouseid", Integer, ForeignKey("warehouse.warehouseid"), nullable=False),
    Column("storeid", Integer, ForeignKey("store.storeid"), nullable=False),
    Column("productname", String(30), nullable=False),
    Column("unitsrequested", Integer, nullable=False),
)

schema_migrations = Table(
    "schema_migrations",
    MetaData(),
    Column("version", Integer, primary_key=True, autoincrement=False),
    Column("applied_at", DateTime, nullable=False),
)


def _migration_v1_base(conn: Connection) -> None:
    metadata.create_all(conn)


def _migration_v2_history_indexes(conn: Connection) -> None:
    conn.execute(text("CREATE INDEX IF NOT EXISTS ix_orders_customer_time ON orders (customerid, ordertime)"))
    conn.execute(
        text("CREATE INDEX IF NOT EXISTS ix_productupdates_manager_time ON productupdates (managerid, updatedon)")
    )


MIGRATIONS = [
    (1, _migration_v1_base),
    (2, _migration_v2_history_indexes),
]


def run_migrations(engine: Engine) -> int:
    """Apply pending migrations in one transaction and return the schema version."""
    with engine.begin() as conn:
        schema_migrations.create(conn, checkfirst=True)
        current_version = int(conn.execute(text("SELECT COALESCE(MAX(version), 0) FROM schema_migrations")).scalar_one())

        for version, migration in MIGRATIONS:
            if version <= current_version:
                continue
            migration(conn)
            conn.execute(
                text("INSERT INTO schema_migrations (version, applied_at) VALUES (:v, CURRENT_TIMESTAMP)"),
                {"v": version},
            )
            log.info("migration_applied version=%s", version)
            current_version = version
    return current_version
