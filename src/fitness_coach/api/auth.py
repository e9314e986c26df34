"""Caller identity for API requests."""

from uuid import UUID

from fastapi import Header

from fitness_coach.domain.errors import InvalidInputError


async def current_user_id(x_user_id: str | None = Header(default=None)) -> UUID:
    """Return the caller's user id from the ``X-User-Id`` header."""
    if not x_user_id:
        raise InvalidInputError("missing X-User-Id header")
    try:
        return UUID(x_user_id)
    except ValueError as exc:
        raise InvalidInputError("invalid X-User-Id header") from exc
