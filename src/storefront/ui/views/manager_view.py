from __future__ import annotations

from datetime import date
from pathlib import Path

from storefront.ui.views.base_view import BaseView


class ManagerView(BaseView):
    def update_product(self) -> None:
        def action():
            user = self.session.require_user()
            store_id = self.console.ask_int("\tEnter store ID: ", "Store ID")
            self.app.auth.require_store_manager(user, store_id)
            product_name = self.console.ask("\tWhich product do you want to edit? ")
            fields = ", ".join(self.app.updates.editable_fields())
            field = self.console.ask(f"\tWhat do you want to edit? ({fields}) ")
            new_value = self.console.ask("\tWhat do you want to change it to? ")
            record = self.app.updates.update_product(user, store_id, product_name, field, new_value)
            self.console.say(f"Product updated (update #{record.number}).")

        self.run_action("Update product", action)

    def view_recent_updates(self) -> None:
        def action():
            updates = self.app.updates.recent_updates(self.session.require_user())
            if not updates:
                self.console.say("No product updates yet.")
            for u in updates:
                self.console.say(
                    f"Update Number: {u.number}, Store ID: {u.store_id}, "
                    f"Product Name: {u.product_name}, Updated On: {u.updated_on}"
                )

        self.run_action("View recent updates", action)

    def view_popular_products(self) -> None:
        def action():
            rows = self.app.reporting.popular_products(self.session.require_user())
            if not rows:
                self.console.say("No orders in your stores yet.")
            for p in rows:
                self.console.say(f"Product name: {p.product_name}, Number of Orders: {p.order_count}")

        self.run_action("View popular products", action)

    def view_popular_customers(self) -> None:
        def action():
            rows = self.app.reporting.popular_customers(self.session.require_user())
            if not rows:
                self.console.say("No orders in your stores yet.")
                return
            self.console.say("(listed from fewest to most orders)")
            for c in rows:
                self.console.say(
                    f"User ID: {c.user_id}, Name: {c.name}, Latitude: {c.latitude:g}, "
                    f"Longitude: {c.longitude:g}, Num Orders: {c.order_count}"
                )

        self.run_action("View popular customers", action)

    def place_supply_request(self) -> None:
        def action():
            user = self.session.require_user()
            store_id = self.console.ask_int("\tEnter store ID: ", "Store ID")
            self.app.auth.require_store_manager(user, store_id)
            product_name = self.console.ask("\tEnter product name: ")
            units = self.console.ask_int("\tEnter number of units: ", "Number of units")
            warehouse_id = self.console.ask_int("\tEnter warehouse ID: ", "Warehouse ID")
            request = self.app.supply.place_supply_request(user, store_id, product_name, units, warehouse_id)
            self.console.say(f"Supply request {request.number} placed.")

        self.run_action("Place supply request", action)

    def export_report(self) -> None:
        def action():
            user = self.session.require_user()
            default = f"store_report_{date.today().isoformat()}.xlsx"
            raw = self.console.ask(f"\tSave report as [{default}]: ").strip()
            path = self.app.reporting.export_store_report_excel(user, Path(raw or default))
            self.console.say(f"Report written to {path}.")

        self.run_action("Export report", action)
