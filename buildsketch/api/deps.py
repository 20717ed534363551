"""Shared FastAPI dependencies."""

from fastapi import Header, HTTPException

from buildsketch.core.clock import Clock, SystemClock
from buildsketch.domain.actors import Actor

_system_clock = SystemClock()


def get_clock() -> Clock:
    """Overridden in tests to pin "now"."""
    return _system_clock


def require_actor(
    x_actor_id: str | None = Header(default=None),
    x_actor_name: str | None = Header(default=None),
) -> Actor:
    """Actor identity as forwarded by the authentication front.

    No fallback: a mutation without an identified caller is rejected.
    """
    if not x_actor_id or not x_actor_name:
        raise HTTPException(status_code=401, detail="Actor identity headers are required")
    return Actor(id=x_actor_id, display_name=x_actor_name)
