from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from storefront.application.container import AppContainer
from storefront.domain.models import User
from storefront.ui.console import Console


class SessionState(Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    TERMINATED = "terminated"


@dataclass
class Session:
    """Everything one terminal session needs: services, console and the signed-in user."""

    app: AppContainer
    console: Console
    user: Optional[User] = None
    state: SessionState = SessionState.UNAUTHENTICATED

    def log_in(self, user: User) -> None:
        self.user = user
        self.state = SessionState.AUTHENTICATED

    def log_out(self) -> None:
        self.user = None
        self.state = SessionState.UNAUTHENTICATED

    def terminate(self) -> None:
        self.state = SessionState.TERMINATED

    def require_user(self) -> User:
        if self.user is None:
            raise RuntimeError("No user is logged in.")
        return self.user
