"""
Tests for prefix filters.
"""

import re

import pytest

from wraith.dispatch.prefix import (
    DeferredFilter,
    MentionFilter,
    RegexFilter,
    create_prefix_filter,
)


class TestCreatePrefixFilter:
    """Tests for building filters from configured prefixes."""

    @pytest.mark.asyncio
    async def test_plain_string_is_escaped(self, message_factory):
        prefix_filter = create_prefix_filter("$.")
        assert isinstance(prefix_filter, RegexFilter)
        assert await prefix_filter.test(message_factory("$.ping"))
        assert await prefix_filter.test(message_factory("$xping")) is None
        assert await prefix_filter.test(message_factory("ping $.")) is None

    @pytest.mark.asyncio
    async def test_client_mention(self, message_factory):
        prefix_filter = create_prefix_filter("@client", "42")
        assert isinstance(prefix_filter, MentionFilter)
        assert await prefix_filter.test(message_factory("<@42> ping"))
        assert await prefix_filter.test(message_factory("<@!42> ping"))
        assert await prefix_filter.test(message_factory("<@43> ping")) is None

    def test_client_mention_needs_id(self):
        with pytest.raises(ValueError):
            create_prefix_filter("@client")

    @pytest.mark.asyncio
    async def test_self_prefix_only_matches_own_messages(self, message_factory):
        prefix_filter = create_prefix_filter("@me:>>", "42")
        assert prefix_filter.allows_self

        pattern = await prefix_filter.test(message_factory(">>ping", author_id="42"))
        assert pattern.match(">>ping")
        assert await prefix_filter.test(message_factory(">>ping", author_id="7")) is None
        assert await prefix_filter.test(message_factory("ping", author_id="42")) is None

    @pytest.mark.asyncio
    async def test_pattern_is_anchored_with_flags(self, message_factory):
        prefix_filter = create_prefix_filter(re.compile(r"hey bot,?\s*", re.IGNORECASE))
        assert await prefix_filter.test(message_factory("HEY BOT, ping"))
        assert await prefix_filter.test(message_factory("oh hey bot ping")) is None

    @pytest.mark.asyncio
    async def test_callable(self, message_factory):
        prefix_filter = create_prefix_filter(lambda message: message.author.id == "admin")
        assert isinstance(prefix_filter, DeferredFilter)
        assert (await prefix_filter.test(message_factory("ping", author_id="admin"))).pattern == ""
        assert await prefix_filter.test(message_factory("ping")) is None

    def test_empty_prefix(self):
        with pytest.raises(ValueError):
            create_prefix_filter("  ")

    def test_unsupported_prefix(self):
        with pytest.raises(TypeError):
            create_prefix_filter(5)


class TestDeferredFilter:
    """Tests for closure results."""

    @pytest.mark.asyncio
    async def test_async_closure_returning_string(self, message_factory):
        async def closure(message):
            return "?"

        pattern = await DeferredFilter(closure).test(message_factory("?ping"))
        assert pattern.match("?ping").end() == 1

    @pytest.mark.asyncio
    async def test_closure_returning_pattern(self, message_factory):
        pattern = await DeferredFilter(lambda m: re.compile("!+")).test(message_factory("!!ping"))
        assert pattern.match("!!ping").end() == 2

    @pytest.mark.asyncio
    async def test_closure_returning_bad_value(self, message_factory):
        with pytest.raises(TypeError):
            await DeferredFilter(lambda m: 5).test(message_factory("ping"))

    def test_requires_function(self):
        with pytest.raises(TypeError):
            DeferredFilter("nope")
