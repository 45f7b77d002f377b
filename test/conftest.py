import io
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def make_db(tmp_path: Path, name: str = "store.db"):
    from storefront.repositories.database import make_engine
    from storefront.repositories.schema import run_migrations

    engine = make_engine(f"sqlite:///{tmp_path / name}")
    run_migrations(engine)
    return engine


def execute(engine, sql: str, params: dict | None = None) -> None:
    from sqlalchemy import text

    with engine.begin() as conn:
        conn.execute(text(sql), params or {})


def fetch_all(engine, sql: str, params: dict | None = None) -> list:
    from sqlalchemy import text

    with engine.connect() as conn:
        return list(conn.execute(text(sql), params or {}).all())


def add_user(engine, name: str, password: str, lat: float, lon: float, role: str = "Customer") -> int:
    # plain-text password, as rows loaded from the course dataset are stored
    from sqlalchemy import text

    with engine.begin() as conn:
        row = conn.execute(
            text(
                "INSERT INTO users (name, password, latitude, longitude, type) "
                "VALUES (:n, :p, :lat, :lon, :r) RETURNING userid"
            ),
            {"n": name, "p": password, "lat": lat, "lon": lon, "r": role},
        ).one()
    return int(row[0])


def add_store(engine, store_id: int, lat: float, lon: float, manager_id: int, name: str = "") -> int:
    execute(
        engine,
        "INSERT INTO store (storeid, name, latitude, longitude, managerid) VALUES (:s, :n, :lat, :lon, :m)",
        {"s": store_id, "n": name or f"Store {store_id}", "lat": lat, "lon": lon, "m": manager_id},
    )
    return store_id


def add_product(engine, store_id: int, name: str, units: int, price: float = 1.0) -> None:
    execute(
        engine,
        "INSERT INTO product (storeid, productname, numberofunits, priceperunit) VALUES (:s, :n, :u, :p)",
        {"s": store_id, "n": name, "u": units, "p": price},
    )


def add_warehouse(engine, warehouse_id: int) -> int:
    execute(
        engine,
        "INSERT INTO warehouse (warehouseid, area, latitude, longitude) VALUES (:w, 100, 50, 50)",
        {"w": warehouse_id},
    )
    return warehouse_id


def add_order(
    engine, customer_id: int, store_id: int, product: str, units: int, at: str, number: int | None = None
) -> int:
    if number is None:
        number = scalar(engine, "SELECT COALESCE(MAX(ordernumber), 0) + 1 FROM orders")
    execute(
        engine,
        "INSERT INTO orders (ordernumber, customerid, storeid, productname, unitsordered, ordertime) "
        "VALUES (:n, :c, :s, :p, :u, :t)",
        {"n": number, "c": customer_id, "s": store_id, "p": product, "u": units, "t": at},
    )
    return number


def scalar(engine, sql: str, params: dict | None = None):
    return fetch_all(engine, sql, params)[0][0]


def scripted_console(*lines: str):
    from storefront.ui.console import Console

    stdin = io.StringIO("".join(f"{line}\n" for line in lines))
    return Console(stdin=stdin, stdout=io.StringIO(), stderr=io.StringIO())


@pytest.fixture
def engine(tmp_path: Path):
    eng = make_db(tmp_path)
    yield eng
    eng.dispose()
