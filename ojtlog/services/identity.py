"""Who is calling.

``IdentityProvider`` is what the repository asks on every call; it is never
cached across calls. ``AuthSession`` holds signed-in state for long-lived
clients and lets them observe sign-in/sign-out through explicit
subscriptions. ``StaticIdentity`` is the per-request identity the HTTP layer
builds from a bearer token.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Protocol
from uuid import uuid4

logger = logging.getLogger(__name__)


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


AuthListener = Callable[[AuthEvent, Optional[str]], None]


class IdentityProvider(Protocol):
    async def get_current_user_id(self) -> str | None: ...


class StaticIdentity:
    def __init__(self, user_id: str | None) -> None:
        self.user_id = user_id or None

    async def get_current_user_id(self) -> str | None:
        return self.user_id


class Subscription:
    """Handle returned by ``AuthSession.subscribe``.

    After ``unsubscribe`` the listener is never called again, even for a
    notification that was already being delivered.
    """

    def __init__(self, session: "AuthSession", subscription_id: str, listener: AuthListener) -> None:
        self._session = session
        self._subscription_id = subscription_id
        self._listener: AuthListener | None = listener
        self._active = True

    @property
    def id(self) -> str:
        return self._subscription_id

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if self._active:
            self._active = False
            self._listener = None
            self._session._forget(self._subscription_id)

    def _deliver(self, event: AuthEvent, user_id: str | None) -> None:
        listener = self._listener
        if not self._active or listener is None:
            return
        listener(event, user_id)


class AuthSession:
    def __init__(self, user_id: str | None = None) -> None:
        self._user_id = user_id or None
        self._subscriptions: dict[str, Subscription] = {}

    @property
    def user_id(self) -> str | None:
        return self._user_id

    async def get_current_user_id(self) -> str | None:
        return self._user_id

    def sign_in(self, user_id: str) -> None:
        if not user_id:
            raise ValueError("user_id is required")
        self._user_id = user_id
        self._notify(AuthEvent.SIGNED_IN, user_id)

    def sign_out(self) -> None:
        if self._user_id is None:
            return
        self._user_id = None
        self._notify(AuthEvent.SIGNED_OUT, None)

    def subscribe(self, listener: AuthListener) -> Subscription:
        subscription = Subscription(self, str(uuid4()), listener)
        self._subscriptions[subscription.id] = subscription
        return subscription

    @property
    def listener_count(self) -> int:
        return len(self._subscriptions)

    def _forget(self, subscription_id: str) -> None:
        self._subscriptions.pop(subscription_id, None)

    def _notify(self, event: AuthEvent, user_id: str | None) -> None:
        for subscription in list(self._subscriptions.values()):
            try:
                subscription._deliver(event, user_id)
            except Exception:
                logger.exception(
                    "auth.listener_failed",
                    extra={"extra_data": {"event": event.value, "subscription": subscription.id}},
                )


async def resolve_user_id(provider: IdentityProvider) -> str | None:
    """Ask ``provider`` for the caller; a failing provider means "no user"."""
    try:
        user_id = await provider.get_current_user_id()
    except Exception:
        logger.exception("auth.resolve_failed")
        return None
    return user_id or None
