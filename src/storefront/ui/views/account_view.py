from __future__ import annotations

from storefront.domain.models import User
from storefront.ui.views.base_view import BaseView


class AccountView(BaseView):
    def create_user(self) -> None:
        def action():
            name = self.console.ask("\tEnter name: ")
            password = self.console.ask("\tEnter password: ")
            latitude = self.console.ask_float("\tEnter latitude: ", "Latitude")
            longitude = self.console.ask_float("\tEnter longitude: ", "Longitude")
            self.app.auth.create_user(name, password, latitude, longitude)
            self.console.say("User successfully created!")

        self.run_action("Create user", action)

    def log_in(self) -> User | None:
        def action() -> User:
            name = self.console.ask("\tEnter name: ")
            password = self.console.ask("\tEnter password: ")
            return self.app.auth.login(name, password)

        user = self.run_action("Log in", action)
        if user is not None:
            self.session.log_in(user)
            self.console.say(f"Welcome, {user.name}!")
        return user
