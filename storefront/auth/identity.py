"""Identity value and a reactive provider the cart subscribes to."""
import asyncio
import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

from storefront.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    """A signed-in user. Anonymous sessions use None instead of an Identity."""
    user_id: str
    email: Optional[str] = None


IdentityListener = Callable[[Optional[Identity]], Union[Awaitable[None], None]]


class IdentityProvider:
    """
    Holds the current identity and notifies listeners when it changes.

    Listeners may be plain callables or coroutine functions; coroutine
    listeners are awaited in subscription order.
    """

    def __init__(self, initial: Optional[Identity] = None):
        self._current = initial
        self._listeners: list[IdentityListener] = []

    @property
    def current(self) -> Optional[Identity]:
        return self._current

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def update(self, identity: Optional[Identity]) -> bool:
        """Set the identity. Returns True if it changed and listeners ran."""
        if identity == self._current:
            return False

        self._current = identity
        logger.info(
            "Identity changed: %s",
            sanitize_id_for_logging(identity.user_id) if identity else "anonymous",
        )
        for listener in list(self._listeners):
            result = listener(identity)
            if inspect.isawaitable(result):
                await result
        return True


def identity_from_session(session: Any) -> Optional[Identity]:
    """Build an Identity from a Supabase auth session (or None)."""
    user = getattr(session, "user", None) if session is not None else None
    if user is None:
        return None
    return Identity(user_id=str(user.id), email=getattr(user, "email", None))


def bind_supabase_auth(client, provider: IdentityProvider):
    """
    Forward Supabase auth state events to `provider`.

    Must be called from inside a running event loop; the provider update is
    scheduled on that loop. Returns the auth subscription.
    """
    loop = asyncio.get_running_loop()
    pending: set[asyncio.Task] = set()

    def on_change(event, session) -> None:
        if event == "SIGNED_OUT":
            identity = None
        else:
            identity = identity_from_session(session)
        task = loop.create_task(provider.update(identity))
        pending.add(task)
        task.add_done_callback(pending.discard)

    return client.auth.on_auth_state_change(on_change)
