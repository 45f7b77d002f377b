from __future__ import annotations

import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from storefront.application.container import build_container
from storefront.application.session import Session
from storefront.config import get_app_paths, load_database_settings
from storefront.domain.errors import DatabaseConnectionError
from storefront.logging_config import setup_logging
from storefront.repositories.database import connect
from storefront.repositories.schema import run_migrations
from storefront.ui.app import App
from storefront.ui.console import Console

log = logging.getLogger(__name__)

USAGE = "Usage: storefront <dbname> <port> <user>"


def main(argv: list[str] | None = None, console: Console | None = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 3:
        print(USAGE, file=sys.stderr)
        return 1

    paths = get_app_paths()
    setup_logging(paths.logs_dir, level=logging.INFO)

    try:
        settings = load_database_settings(*args)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    console = console or Console()
    console.say("Connecting to database...")
    try:
        engine = connect(settings.url())
    except DatabaseConnectionError as e:
        log.error("connection_failed db=%s port=%s user=%s: %s", settings.dbname, settings.port, settings.user, e)
        console.warn(f"Error - {e}")
        console.say("Make sure the database server is running on this machine.")
        return 2
    console.say("Done")

    status = 0
    try:
        if settings.init_schema:
            version = run_migrations(engine)
            console.say(f"Schema ready (version {version}).")
        session = Session(app=build_container(engine), console=console)
        App(session).run()
    except SQLAlchemyError as e:
        log.error("database_error", exc_info=True)
        console.warn(f"Error - {str(e).splitlines()[0]}")
        status = 3
    except Exception as e:
        log.exception("session_crashed")
        console.warn(f"Error - {e}")
        status = 3
    finally:
        console.say("Disconnecting from database...")
        engine.dispose()
        console.say("Done\n\nBye !")
    return status


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
