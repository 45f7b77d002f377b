from __future__ import annotations

from storefront.ui.views.base_view import BaseView


class CatalogView(BaseView):
    def view_nearby_stores(self) -> None:
        def action():
            stores = self.app.catalog.nearby_stores(self.session.require_user())
            if not stores:
                self.console.say("No stores within reach.")
            for s in stores:
                self.console.say(f"Store ID: {s.store_id}, Name: {s.name}, Distance: {s.distance:.2f}")

        self.run_action("View stores", action)

    def view_products(self) -> None:
        def action():
            store_id = self.console.ask_int("\tEnter Store ID: ", "Store ID")
            products = self.app.catalog.list_products(store_id)
            self.console.print_table(
                ["productname", "numberofunits", "priceperunit"],
                ((p.name, p.units, f"{p.price_per_unit:.2f}") for p in products),
            )

        self.run_action("View products", action)
