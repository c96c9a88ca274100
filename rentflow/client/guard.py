from dataclasses import dataclass
from typing import Optional

LOGIN_PATH = "/login"

LOADING = "loading"
AUTHENTICATED = "authenticated"
UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class GuardOutcome:
    """What the caller should do for the current state.

    render: "spinner", "children" or "nothing".
    redirect: a path to navigate to, set on exactly one outcome per guard.
    """

    state: str
    render: str
    redirect: Optional[str] = None


class RouteGuard:
    """loading -> authenticated | unauthenticated, resolved once.

    Later `resolve` calls on a resolved guard return the settled state
    without emitting another redirect.
    """

    def __init__(self, login_path=LOGIN_PATH):
        self.login_path = login_path
        self.state = LOADING
        self._redirected = False

    @property
    def resolved(self):
        return self.state != LOADING

    def current(self) -> GuardOutcome:
        if self.state == LOADING:
            return GuardOutcome(LOADING, "spinner")
        if self.state == AUTHENTICATED:
            return GuardOutcome(AUTHENTICATED, "children")
        return GuardOutcome(UNAUTHENTICATED, "nothing")

    def resolve(self, authenticated: bool) -> GuardOutcome:
        if self.resolved:
            return self.current()
        self.state = AUTHENTICATED if authenticated else UNAUTHENTICATED
        if self.state == UNAUTHENTICATED and not self._redirected:
            self._redirected = True
            return GuardOutcome(UNAUTHENTICATED, "nothing", redirect=self.login_path)
        return self.current()

    @classmethod
    def for_session(cls, session_store, login_path=LOGIN_PATH):
        """Guard resolved from whether the store currently holds a session."""
        guard = cls(login_path)
        return guard, guard.resolve(session_store.get_session() is not None)
