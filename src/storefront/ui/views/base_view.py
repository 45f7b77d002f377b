from __future__ import annotations

import logging
from typing import Callable, TypeVar

from storefront.domain.errors import AppError, ErrorKind

log = logging.getLogger(__name__)

T = TypeVar("T")


class BaseView:
    def __init__(self, session):
        self.session = session
        self.console = session.console
        self.app = session.app

    def run_action(self, title: str, action: Callable[[], T]) -> T | None:
        """Run one menu operation; failures end the operation, never the session."""
        try:
            return action()
        except AppError as e:
            self.handle_error(title, e)
            return None

    def handle_error(self, title: str, err: AppError) -> None:
        if err.kind is ErrorKind.QUERY:
            log.error("%s failed: %s", title, err, exc_info=err)
            self.console.warn(f"{title} failed: {err}")
        elif err.kind is ErrorKind.MALFORMED_INPUT:
            log.info("%s aborted on input: %s", title, err)
            self.console.say(str(err))
        else:
            log.info("%s rejected: %s", title, err)
            self.console.say(str(err))
