"""Tests for view state and navigation rules."""

import pytest

from tumbi.client.session import SessionContext
from tumbi.client.views import InvalidTransition, Navigator, View, ViewKind, is_allowed


def signed_in() -> SessionContext:
    session = SessionContext()
    session.token = "token"
    session.user = {"id": 1}
    return session


def test_tabs_are_reachable_from_anywhere():
    for source in ViewKind:
        for tab in (ViewKind.HOME, ViewKind.SAVED, ViewKind.SELL, ViewKind.MESSAGES, ViewKind.PROFILE):
            assert is_allowed(source, tab)


@pytest.mark.parametrize("source,target,allowed", [
    (ViewKind.HOME, ViewKind.DETAILS, True),
    (ViewKind.SAVED, ViewKind.DETAILS, True),
    (ViewKind.DETAILS, ViewKind.EDIT, True),
    (ViewKind.PROFILE, ViewKind.EDIT, True),
    (ViewKind.HOME, ViewKind.EDIT, False),
    (ViewKind.DETAILS, ViewKind.CONVERSATION, True),
    (ViewKind.MESSAGES, ViewKind.CONVERSATION, True),
    (ViewKind.HOME, ViewKind.CONVERSATION, False),
    (ViewKind.DETAILS, ViewKind.VENDOR_PROFILE, True),
    (ViewKind.SAVED, ViewKind.VENDOR_PROFILE, False),
])
def test_transition_graph(source, target, allowed):
    assert is_allowed(source, target) is allowed


def test_view_requires_its_id():
    with pytest.raises(ValueError):
        View(ViewKind.DETAILS)
    with pytest.raises(ValueError):
        View(ViewKind.CONVERSATION)
    with pytest.raises(ValueError):
        View(ViewKind.VENDOR_PROFILE)


def test_invalid_transition_raises():
    navigator = Navigator(signed_in())

    with pytest.raises(InvalidTransition):
        navigator.navigate(View.edit(3))

    assert navigator.current == View.home()


def test_signed_out_user_gets_auth_prompt():
    navigator = Navigator(SessionContext())

    assert navigator.navigate(View(ViewKind.SAVED)) is False
    assert navigator.auth_prompt is True
    assert navigator.current.kind == ViewKind.HOME

    # Public views stay open
    assert navigator.navigate(View.details(3)) is True
    navigator.dismiss_auth_prompt()
    assert navigator.auth_prompt is False


def test_back_walks_history():
    navigator = Navigator(signed_in())
    navigator.navigate(View.details(1))
    navigator.navigate(View.vendor_profile(7))
    navigator.navigate(View.details(2))

    assert navigator.back() == View.vendor_profile(7)
    assert navigator.back() == View.details(1)
    assert navigator.back() == View.home()
    assert navigator.back() == View.home()


def test_back_from_conversation_goes_to_inbox():
    navigator = Navigator(signed_in())
    navigator.navigate(View.details(1))
    navigator.navigate(View.conversation(4))

    assert navigator.back().kind == ViewKind.MESSAGES
    assert navigator.history == []


def test_tabs_reset_history():
    navigator = Navigator(signed_in())
    navigator.navigate(View.details(1))
    navigator.navigate(View(ViewKind.PROFILE))

    assert navigator.history == []
    assert navigator.back() == View.home()
