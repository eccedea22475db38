"""Auth-state observation with explicit unsubscribe."""

import pytest

from ojtlog.services.identity import AuthEvent, AuthSession, StaticIdentity, resolve_user_id


async def test_session_tracks_sign_in_and_out():
    session = AuthSession()
    assert await session.get_current_user_id() is None
    session.sign_in("user-1")
    assert await session.get_current_user_id() == "user-1"
    session.sign_out()
    assert await session.get_current_user_id() is None


def test_listeners_receive_auth_changes():
    session = AuthSession()
    seen = []
    session.subscribe(lambda event, user_id: seen.append((event, user_id)))

    session.sign_in("user-1")
    session.sign_out()
    session.sign_out()  # already signed out: no event

    assert seen == [(AuthEvent.SIGNED_IN, "user-1"), (AuthEvent.SIGNED_OUT, None)]


def test_unsubscribe_stops_delivery_and_is_idempotent():
    session = AuthSession()
    seen = []
    subscription = session.subscribe(lambda event, user_id: seen.append(event))
    assert session.listener_count == 1

    subscription.unsubscribe()
    subscription.unsubscribe()
    session.sign_in("user-1")

    assert seen == []
    assert subscription.active is False
    assert session.listener_count == 0


def test_listener_unsubscribed_mid_notification_is_skipped():
    session = AuthSession()
    seen = []
    subscriptions = {}

    def first(event, user_id):
        seen.append("first")
        subscriptions["second"].unsubscribe()

    subscriptions["first"] = session.subscribe(first)
    subscriptions["second"] = session.subscribe(lambda event, user_id: seen.append("second"))

    session.sign_in("user-1")
    assert seen == ["first"]


def test_failing_listener_does_not_block_others():
    session = AuthSession()
    seen = []

    def broken(event, user_id):
        raise RuntimeError("boom")

    session.subscribe(broken)
    session.subscribe(lambda event, user_id: seen.append(user_id))
    session.sign_in("user-1")
    assert seen == ["user-1"]


def test_sign_in_requires_user_id():
    with pytest.raises(ValueError):
        AuthSession().sign_in("")


async def test_resolve_user_id_treats_errors_and_blanks_as_anonymous():
    class Broken:
        async def get_current_user_id(self):
            raise ConnectionError("identity service down")

    assert await resolve_user_id(Broken()) is None
    assert await resolve_user_id(StaticIdentity("")) is None
    assert await resolve_user_id(StaticIdentity("user-1")) == "user-1"
