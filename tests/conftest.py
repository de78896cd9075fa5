"""
Pytest configuration and shared fixtures for wraith tests.
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

# Add the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from wraith.commands.registry import CommandRegistry
from wraith.services.container import ServiceContainer


def make_message(content, author_id="user-1", channel_type="text", member=None,
                 username="user", discriminator="0001"):
    """Build a host message double with an async-capable channel."""
    message = MagicMock()
    message.content = content
    message.author.id = author_id
    message.author.username = username
    message.author.discriminator = discriminator
    message.channel.type = channel_type
    message.channel.send = AsyncMock(return_value="sent")
    message.channel.send_embed = AsyncMock(return_value="sent-embed")
    message.member = member
    return message


@pytest.fixture
def message_factory():
    """Factory for host message doubles."""
    return make_message


@pytest.fixture
def commands():
    """An empty command registry."""
    return CommandRegistry()


@pytest.fixture
def services():
    """An empty service container."""
    return ServiceContainer()


@pytest.fixture
def config_dir(tmp_path):
    """Create a temporary config directory."""
    config = tmp_path / "config"
    config.mkdir()
    return config
