"""Middleware composition and built-in layers."""

from wraith.middleware.compose import Layer, apply, compose, resolve
from wraith.middleware.filters import (
    expect_dm,
    expect_group_dm,
    expect_guild,
    expect_permissions,
    expect_role,
    expect_user,
    user_id,
)
from wraith.middleware.provide import provide

__all__ = [
    "Layer",
    "apply",
    "compose",
    "resolve",
    "expect_dm",
    "expect_group_dm",
    "expect_guild",
    "expect_permissions",
    "expect_role",
    "expect_user",
    "user_id",
    "provide",
]
