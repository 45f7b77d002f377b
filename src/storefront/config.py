from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import sys

from sqlalchemy.engine import URL


@dataclass(frozen=True)
class AppPaths:
    base_dir: Path
    logs_dir: Path


@dataclass(frozen=True)
class DatabaseSettings:
    dbname: str
    port: int
    user: str
    password: str = ""
    host: str = "localhost"
    driver: str = "postgresql+psycopg2"
    url_override: str | None = None
    init_schema: bool = False

    def url(self) -> URL | str:
        if self.url_override:
            return self.url_override
        return URL.create(
            self.driver,
            username=self.user,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.dbname,
        )


def _windows_appdata() -> Path:
    return Path(os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming")))


def _mac_app_support() -> Path:
    return Path.home() / "Library" / "Application Support"


def get_app_paths(app_name: str = "Storefront") -> AppPaths:
    if sys.platform.startswith("win"):
        base = _windows_appdata() / app_name
    elif sys.platform == "darwin":
        base = _mac_app_support() / app_name
    else:
        base = Path.home() / f".{app_name.lower()}"

    logs = base / "logs"

    base.mkdir(parents=True, exist_ok=True)
    logs.mkdir(parents=True, exist_ok=True)

    return AppPaths(base_dir=base, logs_dir=logs)


def load_database_settings(dbname: str, port: str, user: str, environ: dict[str, str] | None = None) -> DatabaseSettings:
    env = os.environ if environ is None else environ
    try:
        port_num = int(port)
    except ValueError as exc:
        raise ValueError(f"Port must be a number, got '{port}'.") from exc

    return DatabaseSettings(
        dbname=dbname,
        port=port_num,
        user=user,
        password=env.get("STOREFRONT_DB_PASSWORD", ""),
        host=env.get("STOREFRONT_DB_HOST", "localhost").strip() or "localhost",
        driver=env.get("STOREFRONT_DB_DRIVER", "postgresql+psycopg2").strip() or "postgresql+psycopg2",
        url_override=env.get("STOREFRONT_DATABASE_URL", "").strip() or None,
        init_schema=env.get("STOREFRONT_INIT_SCHEMA", "").strip().lower() in {"1", "true", "yes"},
    )
