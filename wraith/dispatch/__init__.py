"""
Dispatch module for wraith.

Provides:
- Prefix filters
- Per-message dispatch context
- The dispatcher and its tagged failures
"""

from wraith.dispatch.context import DispatchContext
from wraith.dispatch.dispatcher import (
    DispatchFailure,
    Dispatcher,
    DispatchResult,
    FailureKind,
)
from wraith.dispatch.prefix import (
    DeferredFilter,
    MentionFilter,
    PrefixFilter,
    RegexFilter,
    create_prefix_filter,
)

__all__ = [
    "DispatchContext",
    "Dispatcher",
    "DispatchFailure",
    "DispatchResult",
    "FailureKind",
    "PrefixFilter",
    "RegexFilter",
    "MentionFilter",
    "DeferredFilter",
    "create_prefix_filter",
]
