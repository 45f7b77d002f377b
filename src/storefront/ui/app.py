from __future__ import annotations

import logging
from typing import Callable

from storefront.application.session import Session, SessionState
from storefront.ui.console import EndOfInput
from storefront.ui.views.account_view import AccountView
from storefront.ui.views.catalog_view import CatalogView
from storefront.ui.views.manager_view import ManagerView
from storefront.ui.views.orders_view import OrdersView

log = logging.getLogger(__name__)

GREETING = (
    "\n\n*******************************************************\n"
    "              User Interface                         \n"
    "*******************************************************\n"
)

MAIN_EXIT = 9
USER_LOGOUT = 20
USER_EXIT = 99


class App:
    """Two-level menu loop: main menu, then the signed-in user menu."""

    def __init__(self, session: Session):
        self.session = session
        self.console = session.console

        self.account_view = AccountView(session)
        self.catalog_view = CatalogView(session)
        self.orders_view = OrdersView(session)
        self.manager_view = ManagerView(session)

        self.main_menu: dict[int, tuple[str, Callable[[], object]]] = {
            1: ("Create user", self.account_view.create_user),
            2: ("Log in", self.account_view.log_in),
            MAIN_EXIT: ("< EXIT", self.session.terminate),
        }
        self.user_menu: dict[int, tuple[str, Callable[[], object]]] = {
            1: ("View Stores within 30 miles", self.catalog_view.view_nearby_stores),
            2: ("View Product List", self.catalog_view.view_products),
            3: ("Place a Order", self.orders_view.place_order),
            4: ("View 5 recent orders", self.orders_view.view_recent_orders),
            5: ("Update Product", self.manager_view.update_product),
            6: ("View 5 recent Product Updates Info", self.manager_view.view_recent_updates),
            7: ("View 5 Popular Items", self.manager_view.view_popular_products),
            8: ("View 5 Popular Customers", self.manager_view.view_popular_customers),
            9: ("Place Product Supply Request to Warehouse", self.manager_view.place_supply_request),
            10: ("Export Store Report to Excel", self.manager_view.export_report),
            USER_LOGOUT: ("Log out", self._log_out),
            USER_EXIT: ("< EXIT", self.session.terminate),
        }

    def _log_out(self) -> None:
        log.info("logout user_id=%s", self.session.user.id if self.session.user else None)
        self.session.log_out()

    def _render(self, menu: dict[int, tuple[str, Callable[[], object]]], separator_before: int | None = None) -> None:
        self.console.say("MAIN MENU")
        self.console.say("---------")
        for key, (label, _handler) in menu.items():
            if key == separator_before:
                self.console.say(".........................")
            self.console.say(f"{key}. {label}")

    def step(self) -> None:
        """Show the menu for the current state and dispatch one choice."""
        if self.session.state is SessionState.AUTHENTICATED:
            menu = self.user_menu
            self._render(menu, separator_before=USER_LOGOUT)
        else:
            menu = self.main_menu
            self._render(menu)

        choice = self.console.read_choice()
        entry = menu.get(choice)
        if entry is None:
            self.console.say("Unrecognized choice!")
            return
        entry[1]()

    def run(self) -> None:
        self.console.say(GREETING)
        try:
            while self.session.state is not SessionState.TERMINATED:
                self.step()
        except EndOfInput:
            log.info("input_closed")
            self.session.terminate()
