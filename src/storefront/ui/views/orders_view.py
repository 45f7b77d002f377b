from __future__ import annotations

from storefront.ui.views.base_view import BaseView


class OrdersView(BaseView):
    def place_order(self) -> None:
        def action():
            user = self.session.require_user()
            store_id = self.console.ask_int("\tEnter Store ID: ", "Store ID")
            product_name = self.console.ask("\tEnter Product Name: ")
            quantity = self.console.ask_int("\tEnter Quantity Purchased: ", "Quantity")
            order = self.app.orders.place_order(user, store_id, product_name, quantity)
            self.console.say(f"Order {order.number} placed at {order.ordered_at}.")

        self.run_action("Place order", action)

    def view_recent_orders(self) -> None:
        def action():
            orders = self.app.orders.recent_orders(self.session.require_user())
            if not orders:
                self.console.say("You have no orders yet.")
            for o in orders:
                self.console.say(
                    f"Store ID: {o.store_id}, Product Name: {o.product_name}, "
                    f"Units Ordered: {o.units}, Order Time: {o.ordered_at}"
                )

        self.run_action("View recent orders", action)
