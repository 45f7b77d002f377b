from pathlib import Path

import pytest

from sqlalchemy.exc import OperationalError

from conftest import add_order, add_product, add_store, add_user, execute, scalar, scripted_console

from storefront import main as main_module
from storefront.application.container import build_container
from storefront.application.session import Session, SessionState
from storefront.config import AppPaths
from storefront.ui.app import App


def _run(engine, *lines):
    console = scripted_console(*lines)
    session = Session(app=build_container(engine), console=console)
    App(session).run()
    return session, console.stdout.getvalue(), console.stderr.getvalue()


def test_invalid_and_unknown_choices_reprompt(engine):
    session, out, _err = _run(engine, "abc", "", "7", "9")

    assert out.count("Your input is invalid!") == 2
    assert "Unrecognized choice!" in out
    assert session.state is SessionState.TERMINATED


def test_end_of_input_terminates_session(engine):
    session, out, _err = _run(engine, "1", "carol")

    assert session.state is SessionState.TERMINATED
    assert scalar(engine, "SELECT COUNT(*) FROM users") == 0


def test_create_user_then_login_logout_and_exit(engine):
    session, out, _err = _run(
        engine,
        "1", "carol", "pw", "10", "10",
        "2", "carol", "pw",
        "20",
        "9",
    )

    assert "User successfully created!" in out
    assert "Welcome, carol!" in out
    assert "20. Log out" in out
    assert session.user is None
    assert session.state is SessionState.TERMINATED


def test_failed_login_stays_in_main_menu(engine):
    add_user(engine, "alice", "secret", 10, 10)

    session, out, _err = _run(engine, "2", "alice", "nope", "5", "9")

    assert "Invalid name or password." in out
    assert "Unrecognized choice!" in out
    assert session.user is None


def test_bad_latitude_aborts_create_user(engine):
    _session, out, _err = _run(engine, "1", "dan", "pw", "north", "9")

    assert "Latitude must be a number" in out
    assert scalar(engine, "SELECT COUNT(*) FROM users") == 0


@pytest.mark.parametrize("raw", ["nan", "inf", "-Infinity"])
def test_non_finite_coordinates_abort_create_user(engine, raw):
    _session, out, _err = _run(engine, "1", "dan", "pw", "10", raw, "9")

    assert "Longitude must be a finite number" in out
    assert scalar(engine, "SELECT COUNT(*) FROM users") == 0


def test_customer_flow_through_user_menu(engine):
    mgr = add_user(engine, "mgr", "pw", 0, 0, role="Manager")
    add_user(engine, "alice", "secret", 10, 10)
    add_store(engine, 1, 10, 10, mgr)
    add_store(engine, 2, 40, 10, mgr)
    add_store(engine, 3, 41, 10, mgr)
    add_product(engine, 1, "Widget", 20, 2.0)

    session, out, _err = _run(
        engine,
        "2", "alice", "secret",
        "1",
        "2", "1",
        "3", "1", "Widget", "5",
        "3", "3", "Widget", "1",
        "4",
        "99",
    )

    assert "Store ID: 1, Name: Store 1, Distance: 0.00" in out
    assert "Store ID: 2, Name: Store 2, Distance: 30.00" in out
    assert "Store ID: 3," not in out
    assert "productname\tnumberofunits\tpriceperunit" in out
    assert "Widget\t20\t2.00" in out
    assert "Store not within 30 mile radius." in out
    assert "Units Ordered: 5" in out
    assert scalar(engine, "SELECT numberofunits FROM product WHERE storeid = 1") == 15
    assert session.state is SessionState.TERMINATED


def test_manager_menu_rejects_foreign_store_before_asking_more(engine):
    mgr = add_user(engine, "mgr", "pw", 0, 0, role="Manager")
    add_user(engine, "alice", "secret", 10, 10)
    add_store(engine, 1, 10, 10, mgr)

    _session, out, _err = _run(engine, "2", "alice", "secret", "5", "1", "6", "7", "8", "99")

    assert "You don't manage this store." in out
    assert "No product updates yet." in out
    assert out.count("No orders in your stores yet.") == 2


def test_manager_views_report_available_rows(engine):
    mgr = add_user(engine, "mgr", "pw", 0, 0, role="Manager")
    cust = add_user(engine, "cust", "pw", 0, 0)
    add_store(engine, 1, 0, 0, mgr)
    add_product(engine, 1, "Widget", 20, 2.0)
    add_order(engine, cust, 1, "Widget", 2, "2024-01-01 10:00:00")

    _session, out, _err = _run(
        engine,
        "2", "mgr", "pw",
        "5", "1", "Widget", "numberofunits", "12",
        "6",
        "7",
        "8",
        "99",
    )

    assert "Product updated" in out
    assert "Update Number: 1, Store ID: 1, Product Name: Widget" in out
    assert "Product name: Widget, Number of Orders: 1" in out
    assert "(listed from fewest to most orders)" in out
    assert f"User ID: {cust}, Name: cust" in out


def test_query_failure_keeps_session_alive(engine):
    add_user(engine, "alice", "secret", 10, 10)
    execute(engine, "DROP TABLE product")

    session, out, err = _run(engine, "2", "alice", "secret", "2", "1", "20", "9")

    assert "View products failed" in err
    assert session.state is SessionState.TERMINATED


# ---------- CLI ----------
def test_wrong_argument_count_prints_usage(capsys):
    assert main_module.main(["onlydb"]) == 1
    assert main_module.main(["a", "b", "c", "d"]) == 1

    err = capsys.readouterr().err
    assert "Usage: storefront <dbname> <port> <user>" in err


def test_main_runs_session_against_configured_url(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(main_module, "get_app_paths", lambda: AppPaths(base_dir=tmp_path, logs_dir=tmp_path / "logs"))
    monkeypatch.setenv("STOREFRONT_DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv("STOREFRONT_INIT_SCHEMA", "1")
    console = scripted_console("1", "erin", "pw", "1", "1", "2", "erin", "pw", "1", "20", "9")

    code = main_module.main(["storedb", "5432", "erin"], console=console)

    out = console.stdout.getvalue()
    assert code == 0
    assert "User successfully created!" in out
    assert "No stores within reach." in out
    assert "Disconnecting from database..." in out
    assert out.rstrip().endswith("Bye !")


def test_main_exits_non_zero_when_database_unreachable(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(main_module, "get_app_paths", lambda: AppPaths(base_dir=tmp_path, logs_dir=tmp_path / "logs"))
    monkeypatch.setenv("STOREFRONT_DATABASE_URL", f"sqlite:///{tmp_path / 'missing' / 'dir' / 'x.db'}")
    console = scripted_console()

    code = main_module.main(["storedb", "5432", "erin"], console=console)

    assert code == 2
    assert "Unable to connect" in console.stderr.getvalue()


def test_main_reports_migration_failure_and_cleans_up(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(main_module, "get_app_paths", lambda: AppPaths(base_dir=tmp_path, logs_dir=tmp_path / "logs"))
    monkeypatch.setenv("STOREFRONT_DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv("STOREFRONT_INIT_SCHEMA", "1")

    def denied(_engine):
        raise OperationalError("CREATE TABLE users", {}, Exception("permission denied for schema public"))

    monkeypatch.setattr(main_module, "run_migrations", denied)
    console = scripted_console()

    code = main_module.main(["storedb", "5432", "erin"], console=console)

    assert code == 3
    assert "permission denied for schema public" in console.stderr.getvalue()
    assert console.stdout.getvalue().rstrip().endswith("Bye !")


def test_main_reports_unexpected_session_error(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(main_module, "get_app_paths", lambda: AppPaths(base_dir=tmp_path, logs_dir=tmp_path / "logs"))
    monkeypatch.setenv("STOREFRONT_DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")

    class CrashingApp:
        def __init__(self, session):
            self.session = session

        def run(self):
            raise RuntimeError("terminal went away")

    monkeypatch.setattr(main_module, "App", CrashingApp)
    console = scripted_console()

    code = main_module.main(["storedb", "5432", "erin"], console=console)

    assert code == 3
    assert "Error - terminal went away" in console.stderr.getvalue()
    assert "Disconnecting from database..." in console.stdout.getvalue()
