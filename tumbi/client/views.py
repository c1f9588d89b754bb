"""Explicit view state and the transitions allowed between views."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from tumbi.client.session import SessionContext


class ViewKind(str, Enum):
    HOME = "home"
    SELL = "sell"
    EDIT = "edit"
    DETAILS = "details"
    SAVED = "saved"
    MESSAGES = "messages"
    CONVERSATION = "chat-conversation"
    PROFILE = "profile"
    VENDOR_PROFILE = "vendor-profile"


# Bottom-navigation tabs: reachable from every view
TAB_VIEWS: FrozenSet[ViewKind] = frozenset({
    ViewKind.HOME,
    ViewKind.SAVED,
    ViewKind.SELL,
    ViewKind.MESSAGES,
    ViewKind.PROFILE,
})

# Every other view, keyed by target, with the views it may be entered from
TRANSITIONS: Dict[ViewKind, FrozenSet[ViewKind]] = {
    ViewKind.DETAILS: frozenset({
        ViewKind.HOME,
        ViewKind.SAVED,
        ViewKind.PROFILE,
        ViewKind.VENDOR_PROFILE,
        ViewKind.EDIT,
        ViewKind.CONVERSATION,
    }),
    ViewKind.EDIT: frozenset({ViewKind.DETAILS, ViewKind.PROFILE}),
    ViewKind.CONVERSATION: frozenset({ViewKind.DETAILS, ViewKind.MESSAGES}),
    ViewKind.VENDOR_PROFILE: frozenset({ViewKind.DETAILS}),
}

AUTH_REQUIRED: FrozenSet[ViewKind] = frozenset({
    ViewKind.SELL,
    ViewKind.EDIT,
    ViewKind.SAVED,
    ViewKind.MESSAGES,
    ViewKind.CONVERSATION,
    ViewKind.PROFILE,
})


class InvalidTransition(Exception):
    """A navigation the view graph does not allow."""

    def __init__(self, source: ViewKind, target: ViewKind):
        super().__init__(f"Cannot navigate from {source.value} to {target.value}")
        self.source = source
        self.target = target


@dataclass(frozen=True)
class View:
    """One screen, with the id it is about where it needs one."""
    kind: ViewKind
    listing_id: Optional[int] = None
    conversation_id: Optional[int] = None
    vendor_id: Optional[int] = None

    def __post_init__(self):
        if self.kind in (ViewKind.DETAILS, ViewKind.EDIT) and self.listing_id is None:
            raise ValueError(f"{self.kind.value} view needs a listing_id")
        if self.kind == ViewKind.CONVERSATION and self.conversation_id is None:
            raise ValueError("conversation view needs a conversation_id")
        if self.kind == ViewKind.VENDOR_PROFILE and self.vendor_id is None:
            raise ValueError("vendor profile view needs a vendor_id")

    @classmethod
    def home(cls) -> "View":
        return cls(ViewKind.HOME)

    @classmethod
    def details(cls, listing_id: int) -> "View":
        return cls(ViewKind.DETAILS, listing_id=listing_id)

    @classmethod
    def edit(cls, listing_id: int) -> "View":
        return cls(ViewKind.EDIT, listing_id=listing_id)

    @classmethod
    def conversation(cls, conversation_id: int) -> "View":
        return cls(ViewKind.CONVERSATION, conversation_id=conversation_id)

    @classmethod
    def vendor_profile(cls, vendor_id: int) -> "View":
        return cls(ViewKind.VENDOR_PROFILE, vendor_id=vendor_id)


def is_allowed(source: ViewKind, target: ViewKind) -> bool:
    if target in TAB_VIEWS:
        return True
    return source in TRANSITIONS.get(target, frozenset())


class Navigator:
    """
    The current view plus a back stack.

    Views that need a signed-in user raise ``auth_prompt`` instead of
    navigating when the session is empty.
    """

    def __init__(self, session: SessionContext):
        self.session = session
        self.current = View.home()
        self.history: List[View] = []
        self.auth_prompt = False

    def can_navigate(self, target: View) -> bool:
        return is_allowed(self.current.kind, target.kind)

    def navigate(self, target: View) -> bool:
        """
        Move to ``target``. Returns False when the auth prompt was raised
        instead; raises InvalidTransition for moves the graph forbids.
        """
        if not self.can_navigate(target):
            raise InvalidTransition(self.current.kind, target.kind)

        if target.kind in AUTH_REQUIRED and not self.session.is_authenticated:
            self.auth_prompt = True
            return False

        if target.kind in TAB_VIEWS:
            # Tabs start a fresh stack
            self.history = []
        else:
            self.history.append(self.current)
        self.current = target
        return True

    def back(self) -> View:
        """Return to the previous view. A conversation always returns to the inbox."""
        if self.current.kind == ViewKind.CONVERSATION:
            self.history = []
            self.current = View(ViewKind.MESSAGES)
        elif self.history:
            self.current = self.history.pop()
        else:
            self.current = View.home()
        return self.current

    def reset(self) -> None:
        self.current = View.home()
        self.history = []

    def dismiss_auth_prompt(self) -> None:
        self.auth_prompt = False
