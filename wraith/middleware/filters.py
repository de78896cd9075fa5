"""
Built-in filter layers.

Each factory validates its arguments when called and returns a layer that
either passes the context on or halts the chain by returning False.
"""

from collections.abc import Callable
from typing import Any

from wraith.middleware.compose import Layer, resolve


def _check_strings(values: tuple[Any, ...], message: str) -> None:
    for value in values:
        if not isinstance(value, str):
            raise TypeError(message)


def _expect_channel_type(channel_type: str) -> Layer:
    if not isinstance(channel_type, str):
        raise TypeError("Expected channel type to be a string.")

    async def layer(next: Callable[..., Any], context: Any) -> Any:
        if context.message.channel.type != channel_type:
            return False
        return await resolve(next(context))

    return layer


def expect_dm() -> Layer:
    """Only pass messages received in a direct message."""
    return _expect_channel_type("dm")


def expect_group_dm() -> Layer:
    """Only pass messages received in a group direct message."""
    return _expect_channel_type("group")


def expect_guild() -> Layer:
    """Only pass messages received in a guild text channel."""
    return _expect_channel_type("text")


def expect_user(*identifiers: str) -> Layer:
    """
    Only pass messages from the given users.

    Args:
        identifiers: User ids or "username#discriminator" tags.

    Raises:
        TypeError: If an identifier is not a string.
    """
    _check_strings(identifiers, "Expected user identifiers to be strings.")
    allowed = set(identifiers)

    async def layer(next: Callable[..., Any], context: Any) -> Any:
        author = context.message.author
        tag = f"{getattr(author, 'username', '')}#{getattr(author, 'discriminator', '')}"
        if str(author.id) not in allowed and tag not in allowed:
            return False
        return await resolve(next(context))

    return layer


def expect_role(*identifiers: str) -> Layer:
    """
    Only pass messages from members holding one of the given roles.

    Messages without a member (outside a guild) always pass.

    Args:
        identifiers: Role ids or names.
    """
    _check_strings(identifiers, "Expected role identifiers to be strings.")
    allowed = set(identifiers)

    async def layer(next: Callable[..., Any], context: Any) -> Any:
        member = context.member
        if member is not None:
            roles = getattr(member, "roles", None) or []
            if not any(str(role.id) in allowed or role.name in allowed for role in roles):
                return False
        return await resolve(next(context))

    return layer


def expect_permissions(*permissions: str | int) -> Layer:
    """
    Only pass messages from members holding all of the given permissions.

    Messages without a member (outside a guild) always pass. The member
    must provide has_permission(permission).
    """
    for permission in permissions:
        if isinstance(permission, bool) or not isinstance(permission, (str, int)):
            raise TypeError("Expected permissions to be strings or integers.")

    async def layer(next: Callable[..., Any], context: Any) -> Any:
        member = context.member
        if member is not None and not all(member.has_permission(p) for p in permissions):
            return False
        return await resolve(next(context))

    return layer


def user_id(*ids: str) -> Layer:
    """Only pass messages whose author id is one of the given ids."""
    _check_strings(ids, "Expected user IDs to be strings.")
    allowed = set(ids)

    async def layer(next: Callable[..., Any], context: Any) -> Any:
        if str(context.message.author.id) not in allowed:
            return False
        return await resolve(next(context))

    return layer
